"""Command-line interface for lpremover.

Usage:
    lpremover networks
    lpremover status --token-a 0x... --token-b 0x... [--amount 1.5]
    lpremover watch --token-a 0x... --token-b 0x...
    lpremover remove --token-a 0x... --token-b 0x... --amount 1.5 [--min-a X --min-b Y]

Environment variables (see lpremover.config.Settings):
    RPC_URL, PRIVATE_KEY or WALLET_SEED_PHRASE, ACCOUNT_ADDRESS, DRY_RUN,
    POLL_INTERVAL, REMOVAL_SLIPPAGE, TOKEN_LIST_URL
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Optional

from eth_utils import is_address

from lpremover.chains import NETWORKS
from lpremover.client import create_client
from lpremover.config import get_settings
from lpremover.models import Slot
from lpremover.notifications.notifier import Notification
from lpremover.remover.service import LiquidityRemover

logger = logging.getLogger(__name__)


def format_balance(balance: Optional[Decimal], symbol: Optional[str]) -> str:
    """Balance to 8 significant digits with its symbol."""
    if balance is not None and symbol:
        return f"{balance:.8g} {symbol}"
    return "0.0"


def format_reserve(reserve: Optional[Decimal], symbol: Optional[str]) -> str:
    if reserve is not None and symbol:
        return f"{reserve} {symbol}"
    return "0.0"


def _address(value: str) -> str:
    if not is_address(value):
        raise argparse.ArgumentTypeError(f"not an address: {value}")
    return value


def _decimal(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value}")
    if not amount.is_finite() or amount < 0:
        raise argparse.ArgumentTypeError(f"must be a finite amount of at least 0: {value}")
    return amount


def print_state(remover: LiquidityRemover) -> None:
    state = remover.state
    session = remover.session
    first, second = state.first, state.second

    print(f"Account:      {session.account or '(none)'}")
    print(f"Chain:        {session.chain_id}")
    print(f"{first.symbol or 'first'} balance:  {format_balance(first.balance, first.symbol)}")
    print(f"{second.symbol or 'second'} balance: {format_balance(second.balance, second.symbol)}")
    print(
        f"Reserves:     {format_reserve(state.reserves.first, first.symbol)} / "
        f"{format_reserve(state.reserves.second, second.symbol)}"
    )
    print(f"LP tokens:    {state.position.total_tokens_owned}")

    if state.quote is not None:
        quote = state.quote
        print(f"Burn:         {quote.lp_tokens_to_burn} LP")
        print(f"Receive:      {format_balance(quote.amount_out_first, first.symbol)}")
        print(f"              {format_balance(quote.amount_out_second, second.symbol)}")


def print_notification(notification: Notification) -> None:
    print(f"[{notification.variant.value.upper()}] {notification.message}")


async def _open(args) -> Optional[LiquidityRemover]:
    """Create a remover, resolve its session and select the pair."""
    settings = get_settings()
    remover = LiquidityRemover(create_client(settings), settings)
    remover.notifier.subscribe(print_notification)

    session = await remover.start(poll=False)
    if session.wrong_network:
        print(
            f"Wrong network: chain id {session.chain_id} is not supported "
            f"(supported: {', '.join(str(c) for c in sorted(NETWORKS))})"
        )
        await remover.client.close()
        return None

    await remover.select_token(Slot.FIRST, args.token_a)
    await remover.select_token(Slot.SECOND, args.token_b)
    return remover


async def cmd_status(args) -> int:
    remover = await _open(args)
    if remover is None:
        return 1
    try:
        if args.amount:
            await remover.set_amount(args.amount)
            if not remover.can_remove():
                print(f"Removal of {args.amount} LP is not possible with this balance")
        print_state(remover)
        return 0
    finally:
        await remover.client.close()


async def cmd_watch(args) -> int:
    remover = await _open(args)
    if remover is None:
        return 1

    async def tick():
        await remover.poll_once()
        print_state(remover)
        print("-" * 40)

    remover.poller.callback = tick
    print_state(remover)
    print("-" * 40)
    remover.poller.start()
    try:
        await asyncio.Event().wait()
    finally:
        await remover.stop()
        await remover.client.close()
    return 0


async def cmd_remove(args) -> int:
    remover = await _open(args)
    if remover is None:
        return 1
    try:
        await remover.set_amount(args.amount)
        if not remover.can_remove():
            print_state(remover)
            print(f"Removal of {args.amount} LP is not enabled")
            return 1

        print_state(remover)
        result = await remover.remove(args.min_a, args.min_b)
        if result is None or not result.success:
            return 1
        if result.tx_hash:
            print(f"Transaction: {result.tx_hash}")
        return 0
    finally:
        await remover.client.close()


def cmd_networks(args) -> int:
    for network in NETWORKS.values():
        print(f"{network.chain_id:>6}  {network.name} ({network.dex_name})")
        print(f"        router: {network.router_address}")
        symbols = ", ".join(t.symbol for t in network.tokens)
        print(f"        tokens: {symbols}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lpremover",
        description="Preview and remove liquidity from Uniswap V2-style pools",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("networks", help="List supported networks")

    def pair_command(name: str, help_text: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--token-a", type=_address, required=True, help="First token address")
        p.add_argument("--token-b", type=_address, required=True, help="Second token address")
        return p

    status = pair_command("status", "Show balances, reserves and an optional preview")
    status.add_argument("--amount", help="LP amount to preview")

    pair_command("watch", "Poll and print pair state until interrupted")

    remove = pair_command("remove", "Remove liquidity")
    remove.add_argument("--amount", required=True, help="LP amount to remove")
    remove.add_argument("--min-a", type=_decimal, default=None, help="Minimum first token out")
    remove.add_argument("--min-b", type=_decimal, default=None, help="Minimum second token out")

    return parser


COMMANDS = {
    "status": cmd_status,
    "watch": cmd_watch,
    "remove": cmd_remove,
}


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    log_level = logging.DEBUG if (settings.debug or args.verbose) else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "networks":
        sys.exit(cmd_networks(args))

    if settings.dry_run:
        logger.info("DRY_RUN is enabled - removals are simulated")

    try:
        code = asyncio.run(COMMANDS[args.command](args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
