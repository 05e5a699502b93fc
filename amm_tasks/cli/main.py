"""Main CLI entry point"""

import sys
import json
import logging
import argparse
from fractions import Fraction
from pathlib import Path

from web3 import Web3

from ..contracts.weth import WETH
from ..core.connection import Web3Manager
from ..protocols.uniswap_v3 import (
    DeploymentOrchestrator,
    LiquidityManager,
    PoolManager,
    SwapManager,
    UniswapV3Config,
)
from ..protocols.uniswap_v3.operations.deploy import ArtifactStore


def get_results_dir():
    """Get results directory, create if needed"""
    results_dir = Path.cwd() / "results"
    results_dir.mkdir(exist_ok=True)
    return results_dir


def save_result(filename, data):
    """Save result to JSON file in results directory"""
    results_dir = get_results_dir()
    filepath = results_dir / filename
    with open(filepath, "w") as f:
        json.dump(data, f, indent=2, default=str)
    return filepath


def parse_slippage(value):
    """Percent string ("0.1" means 0.1%) to an exact Fraction"""
    try:
        slippage = Fraction(value) / 100
    except (ValueError, ZeroDivisionError):
        raise argparse.ArgumentTypeError(f"invalid slippage percent: {value}")
    if slippage < 0 or slippage >= 1:
        raise argparse.ArgumentTypeError(f"slippage must be in [0, 100): {value}")
    return slippage


def signer(args):
    """Web3Manager with the account selected by --account"""
    return Web3Manager(require_signer=True, account_index=args.account)


def cmd_accounts(args):
    """List selectable signing accounts"""
    manager = Web3Manager(require_signer=False)
    accounts = manager.accounts()

    print("=" * 60)
    print(f"ACCOUNTS (chain {manager.chain_id})")
    print("=" * 60)
    result = []
    for index, account in enumerate(accounts):
        balance = manager.w3.eth.get_balance(account.address)
        print(f"  [{index:2d}] {account.address}  {Web3.from_wei(balance, 'ether'):.4f} ETH")
        result.append({"index": index, "address": account.address, "balance_wei": balance})
    print("=" * 60)

    filepath = save_result("accounts.json", result)
    print(f"\nSaved to {filepath}", file=sys.stderr)


def cmd_deploy(args):
    """Deploy WETH9, factory, router and position manager"""
    manager = signer(args)
    artifacts = ArtifactStore(args.artifacts) if args.artifacts else None
    orchestrator = DeploymentOrchestrator(manager, artifacts=artifacts)

    print(f"Deploying Uniswap V3 contracts from {manager.address}")
    addresses = orchestrator.deploy_all(weth=args.weth)

    print("\nSuccess!")
    for name, address in addresses.items():
        print(f"  {name:8s} {address}")

    filepath = save_result(f"deployment_{manager.chain_id}.json", addresses)
    print(f"\nSaved to {filepath}", file=sys.stderr)


def cmd_deploy_weth(args):
    """Deploy a standalone WETH9"""
    manager = signer(args)
    artifacts = ArtifactStore(args.artifacts) if args.artifacts else None
    address = DeploymentOrchestrator(manager, artifacts=artifacts).deploy_weth()

    print(f"WETH9 deployed at {address}")
    filepath = save_result(f"weth_{manager.chain_id}.json", {"weth": address})
    print(f"Saved to {filepath}", file=sys.stderr)


def cmd_wrap(args):
    """Wrap ETH to WETH"""
    manager = signer(args)
    weth_address = args.weth or UniswapV3Config().get_contract_address(manager.chain_id, "weth")
    weth = WETH(manager, weth_address)
    amount_wei = Web3.to_wei(args.amount, "ether")

    print(f"Wrapping {args.amount} ETH to WETH at {weth.address}")
    before = weth.balance_of()
    receipt = weth.deposit(amount_wei)
    after = weth.balance_of()

    print(f"\nSuccess!")
    print(f"Tx: {receipt['transactionHash'].hex()}")
    print(f"WETH: {weth.format(before)} -> {weth.format(after)}")

    save_data = {
        "action": "wrap",
        "amount_wei": amount_wei,
        "tx_hash": receipt["transactionHash"].hex(),
        "block": receipt["blockNumber"],
        "gas_used": receipt["gasUsed"],
        "weth_before": before,
        "weth_after": after,
    }
    filepath = save_result(f"wrap_{receipt['transactionHash'].hex()[:10]}.json", save_data)
    print(f"Saved to {filepath}", file=sys.stderr)


def cmd_create_pool(args):
    """Create and initialize a pool"""
    pools = PoolManager(manager=signer(args), nfpm_address=args.nfpm)

    print(f"Creating pool {args.token0}/{args.token1} fee {args.fee}")
    print(f"Initial ratio: {args.amount1} / {args.amount0}")
    result = pools.create_pool(args.token0, args.token1, args.fee, args.amount0, args.amount1)

    print(f"\nSuccess! Pool: {result['pool']}")
    print(f"sqrtPriceX96: {result['sqrt_price_x96']}")
    print(f"Tick: {result['tick']}")
    print(f"Tx: {result['tx_hash']}")

    filepath = save_result(f"pool_{result['pool'][:10]}.json", result)
    print(f"Saved to {filepath}", file=sys.stderr)


def cmd_add_liquidity(args):
    """Mint a position one tick spacing around the amount ratio"""
    liquidity = LiquidityManager(manager=signer(args), nfpm_address=args.nfpm)

    print(f"Adding liquidity: {args.amount0} {args.token0} + {args.amount1} {args.token1}")
    print(f"Fee: {args.fee}, Minimums: {args.amount0_min} / {args.amount1_min}")
    result = liquidity.add_liquidity(
        token0=args.token0,
        token1=args.token1,
        fee=args.fee,
        amount0=args.amount0,
        amount1=args.amount1,
        amount0_min=args.amount0_min,
        amount1_min=args.amount1_min,
        deadline_minutes=args.deadline,
    )

    print(f"\nSuccess! Token ID: {result['token_id']}")
    print(f"Ticks: {result['tick_lower']} to {result['tick_upper']}")
    print(f"Used: {result['token0']['amount']} {result['token0']['symbol']} + "
          f"{result['token1']['amount']} {result['token1']['symbol']}")
    print(f"Tx: {result['tx_hash']}")

    filepath = save_result(f"add_liquidity_{result['token_id']}.json", result)
    print(f"Saved to {filepath}", file=sys.stderr)


def _swap_kwargs(args):
    return {
        "token_in": args.token_in,
        "token_out": args.token_out,
        "amount_in": args.amount,
        "fee": args.fee,
        "slippage": args.slippage,
        "deadline_minutes": args.deadline,
        "pool_address": args.pool_address,
        "recipient": args.recipient,
    }


def print_trade(result):
    t_in = result["token_in"]
    t_out = result["token_out"]
    print(f"\n  Pool: {result['pool']} (fee {result['fee']})")
    print(f"  Send:            {t_in['formatted']}")
    print(f"  Expected output: {t_out['formatted']}")
    print(f"  Minimum output:  {t_out['min_amount']} (slippage {float(Fraction(result['slippage'])) * 100:.3f}%)")
    print(f"  Deadline:        {result['deadline']}")


def cmd_quote(args):
    """Build a swap against the current pool state without sending"""
    swaps = SwapManager(
        manager=Web3Manager(require_signer=False),
        router_address=args.router,
        require_signer=False,
    )
    result = swaps.quote(**_swap_kwargs(args))

    print("=" * 60)
    print(f"QUOTE: {result['token_in']['symbol']} -> {result['token_out']['symbol']}")
    print("=" * 60)
    print_trade(result)
    print("\n" + "=" * 60)

    filepath = save_result(f"quote_{result['token_in']['symbol']}_{result['token_out']['symbol']}.json", result)
    print(f"\nSaved to {filepath}", file=sys.stderr)


def cmd_swap(args):
    """Execute an exact-input swap"""
    swaps = SwapManager(manager=signer(args), router_address=args.router)

    if args.dry_run:
        print(f"[DRY RUN] Simulating swap: {args.amount} {args.token_in} -> {args.token_out}")
    else:
        print(f"Swapping {args.amount} {args.token_in} -> {args.token_out} from account {args.account}")
    result = swaps.swap(dry_run=args.dry_run, **_swap_kwargs(args))

    print_trade(result)
    if args.dry_run:
        print("\nDRY RUN - No transaction sent")
    else:
        print(f"\nSuccess!")
        print(f"Tx: {result['tx_hash']}")
        print(f"Gas used: {result['gas_used']}")

    prefix = "swap_dry_run" if args.dry_run else "swap"
    filepath = save_result(f"{prefix}_{result['token_in']['symbol']}_{result['token_out']['symbol']}.json", result)
    print(f"Saved to {filepath}", file=sys.stderr)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="amm-tasks",
        description="Deploy, bootstrap and trade against a Uniswap V3 deployment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""examples:
  amm-tasks deploy                                         # WETH9, factory, router, NFPM
  amm-tasks accounts                                       # Selectable signers
  amm-tasks wrap 10                                        # 10 ETH -> WETH
  amm-tasks create-pool WETH USDC 3000 1000000000000000000 2000000000
  amm-tasks add-liquidity WETH USDC 3000 1000000000000000000 2000000000 0 0
  amm-tasks swap WETH USDC 10000000000000000 --slippage 0.5 --dry-run

amounts are in the token's smallest unit (wei for WETH).

configuration:
  RPC_URL               Set in .env file
  MNEMONIC/PRIVATE_KEY  Set in wallet.env
  tokens                config/tokens.json
  addresses             config/deployment.json (written by deploy)
  gas                   config/gas_config.json
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    def signer_args(p):
        p.add_argument("--account", type=int, default=0, help="Signer index (default: 0)")

    # deploy
    deploy_parser = subparsers.add_parser("deploy", help="Deploy the Uniswap V3 contracts")
    deploy_parser.add_argument("--weth", help="Reuse an existing WETH9 instead of deploying one")
    deploy_parser.add_argument("--artifacts", help="Artifacts directory (default: config/artifacts)")
    signer_args(deploy_parser)
    deploy_parser.set_defaults(func=cmd_deploy)

    weth_parser = subparsers.add_parser("deploy-weth", help="Deploy WETH9 only")
    weth_parser.add_argument("--artifacts", help="Artifacts directory (default: config/artifacts)")
    signer_args(weth_parser)
    weth_parser.set_defaults(func=cmd_deploy_weth)

    accounts_parser = subparsers.add_parser("accounts", help="List signing accounts")
    accounts_parser.set_defaults(func=cmd_accounts)

    wrap_parser = subparsers.add_parser("wrap", help="Wrap ETH to WETH")
    wrap_parser.add_argument("amount", type=float, help="Amount of ETH to wrap")
    wrap_parser.add_argument("--weth", help="WETH9 address (default: deployment.json)")
    signer_args(wrap_parser)
    wrap_parser.set_defaults(func=cmd_wrap)

    # create-pool
    pool_parser = subparsers.add_parser("create-pool", help="Create and initialize a pool")
    pool_parser.add_argument("token0", help="Token symbol or address")
    pool_parser.add_argument("token1", help="Token symbol or address")
    pool_parser.add_argument("fee", type=int, help="Fee tier (500, 3000, 10000)")
    pool_parser.add_argument("amount0", type=int, help="token0 amount defining the price")
    pool_parser.add_argument("amount1", type=int, help="token1 amount defining the price")
    pool_parser.add_argument("--nfpm", help="Position manager address (default: deployment.json)")
    signer_args(pool_parser)
    pool_parser.set_defaults(func=cmd_create_pool)

    # add-liquidity
    add_parser = subparsers.add_parser("add-liquidity", help="Mint a position around the amount ratio")
    add_parser.add_argument("token0", help="Token symbol or address")
    add_parser.add_argument("token1", help="Token symbol or address")
    add_parser.add_argument("fee", type=int, help="Fee tier (500, 3000, 10000)")
    add_parser.add_argument("amount0", type=int, help="Desired token0 amount")
    add_parser.add_argument("amount1", type=int, help="Desired token1 amount")
    add_parser.add_argument("amount0_min", type=int, help="Minimum token0 amount")
    add_parser.add_argument("amount1_min", type=int, help="Minimum token1 amount")
    add_parser.add_argument("--deadline", type=int, default=1, help="Deadline in minutes (default: 1)")
    add_parser.add_argument("--nfpm", help="Position manager address (default: deployment.json)")
    signer_args(add_parser)
    add_parser.set_defaults(func=cmd_add_liquidity)

    # quote / swap
    for name, func, help_text in (
        ("quote", cmd_quote, "Build a swap without sending it"),
        ("swap", cmd_swap, "Exact-input swap through one pool"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("token_in", help="Token to send")
        p.add_argument("token_out", help="Token to receive")
        p.add_argument("amount", type=int, help="Amount of token_in (smallest unit)")
        p.add_argument("--fee", type=int, default=3000, help="Fee tier (default: 3000)")
        p.add_argument("--slippage", type=parse_slippage, default=Fraction(1, 1000),
                       help="Slippage tolerance in percent (default: 0.1)")
        p.add_argument("--deadline", type=int, default=1, help="Deadline in minutes (default: 1)")
        p.add_argument("--pool-address", help="Pool address (default: derived from the factory)")
        p.add_argument("--router", help="SwapRouter address (default: deployment.json)")
        p.add_argument("--recipient", help="Output recipient (default: the selected account)")
        if name == "swap":
            p.add_argument("--dry-run", action="store_true", help="Build without executing")
            signer_args(p)
        p.set_defaults(func=func)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
