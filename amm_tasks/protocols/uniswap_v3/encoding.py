"""Calldata and address encoding for Uniswap V3"""

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3

from .types import sort_addresses

# keccak256 of UniswapV3Pool creation code, fixed by the core deployment
POOL_INIT_CODE_HASH = "0xe34f199b19b2b4f47f68442619d555527d244f78a3297ea89325f843f87b8b54"

EXACT_INPUT_SINGLE_SIGNATURE = (
    "exactInputSingle((address,address,uint24,address,uint256,uint256,uint256,uint160))"
)
EXACT_INPUT_SINGLE_SELECTOR = function_signature_to_4byte_selector(EXACT_INPUT_SINGLE_SIGNATURE)


def encode_exact_input_single(token_in, token_out, fee, recipient, deadline,
                              amount_in, amount_out_minimum, sqrt_price_limit_x96=0):
    """
    Encode SwapRouter.exactInputSingle calldata.

    Args:
        token_in: Input token address
        token_out: Output token address
        fee: Pool fee tier
        recipient: Address receiving the output tokens
        deadline: Absolute Unix timestamp, embedded as given
        amount_in: Exact input amount
        amount_out_minimum: Revert threshold for the output
        sqrt_price_limit_x96: Price limit (0 = none)

    Returns:
        Calldata bytes (selector + ABI-encoded params struct)
    """
    params = encode(
        ["(address,address,uint24,address,uint256,uint256,uint256,uint160)"],
        [(
            Web3.to_checksum_address(token_in),
            Web3.to_checksum_address(token_out),
            int(fee),
            Web3.to_checksum_address(recipient),
            int(deadline),
            int(amount_in),
            int(amount_out_minimum),
            int(sqrt_price_limit_x96),
        )],
    )
    return EXACT_INPUT_SINGLE_SELECTOR + params


def compute_pool_address(factory, token_a, token_b, fee, init_code_hash=POOL_INIT_CODE_HASH):
    """
    Deterministic CREATE2 address of a pool.

    Only valid for factories built from the canonical pool bytecode.
    """
    token0, token1 = sort_addresses(token_a, token_b)
    salt = Web3.keccak(encode(
        ["address", "address", "uint24"],
        [Web3.to_checksum_address(token0), Web3.to_checksum_address(token1), int(fee)],
    ))
    digest = Web3.keccak(
        b"\xff"
        + bytes.fromhex(Web3.to_checksum_address(factory)[2:])
        + salt
        + bytes.fromhex(init_code_hash[2:])
    )
    return Web3.to_checksum_address(digest[12:])
