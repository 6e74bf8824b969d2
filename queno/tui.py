#!/usr/bin/env python3

import asyncio
import getpass
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from web3 import Web3

from queno.chain import ChainClient
from queno.config import DEFAULT_CONF_PATHS, Settings, load_settings, private_key_from_env
from queno.constants import HISTORY_PREVIEW, MAX_SELECTION, NUMBER_COUNT, Currency
from queno.errors import QuenoError
from queno.session import BetSession

GRID_COLUMNS = 8


def prompt(text: str, default: Optional[str] = None) -> str:
    if default is None:
        return input(text)
    v = input(f"{text} [{default}]: ").strip()
    return v if v else default


def section(title: str) -> None:
    print("\n" + "-" * 60)
    print(title.center(60).rstrip())
    print("-" * 60)


def render_grid(session: BetSession) -> List[str]:
    selected = set(session.selection)
    drawn = set(session.drawn)
    final = set(session.outcome.selection) if session.outcome else set()
    rows = []
    row: List[str] = []
    for num in range(1, NUMBER_COUNT + 1):
        if num in drawn and num in final:
            cell = f"*{num:2d}*"
        elif num in drawn:
            cell = f"({num:2d})"
        elif num in selected:
            cell = f"[{num:2d}]"
        else:
            cell = f" {num:2d} "
        row.append(cell)
        if len(row) == GRID_COLUMNS:
            rows.append("  " + " ".join(row))
            row = []
    return rows


def fmt(amount: Decimal) -> str:
    return f"{amount:.4f}"


async def fetch_wallet_info(client: ChainClient) -> Tuple[int, Decimal, Decimal]:
    block = await client.block_number()
    native = await client.native_balance()
    token = await client.token_balance()
    return block, native, token


def connect(settings: Settings) -> ChainClient:
    private_key = private_key_from_env()
    if not private_key:
        print("QUENO_PRIVATE_KEY is not set.")
        private_key = getpass.getpass("Enter wallet private key: ").strip()
        if not private_key:
            raise SystemExit("A signing key is required.")
    try:
        return ChainClient.from_settings(settings, private_key)
    except (ValueError, RuntimeError, OSError) as e:
        raise SystemExit(f"Could not set up wallet: {e}")


def choose_numbers(session: BetSession) -> None:
    raw = prompt(f"Pick up to {MAX_SELECTION} numbers (comma separated) or 'a' for auto-pick", default="a")
    if raw.strip().lower() == "a":
        session.set_auto_pick(True)
        return
    session.set_auto_pick(False)
    for token in raw.replace(" ", ",").split(","):
        if not token:
            continue
        try:
            num = int(token)
            if num not in session.selection and not session.toggle(num):
                print(f"  Skipped {num}: already {MAX_SELECTION} numbers selected")
        except ValueError:
            print(f"  Skipped {token!r}: not a number between 1 and {NUMBER_COUNT}")


def play_round(session: BetSession) -> None:
    section("SELECT NUMBERS")
    for line in render_grid(session):
        print(line)
    print()
    choose_numbers(session)

    session.amount = prompt("Bet amount per number", default=str(session.amount))
    try:
        session.currency = Currency.from_label(prompt("Currency (ETH/Ypto)", default=session.currency.label))
    except ValueError as e:
        print(f"  ✗ {e}")
        return

    reason = session.check_state()
    if reason is not None:
        print(f"\n  ✗ {reason.message}")
        return

    request = session.preview_request()
    cur = session.currency.label

    section("ORDER SUMMARY")
    print(f"\n  Numbers:           {', '.join(str(n) for n in session.selection)}")
    if session.auto_pick:
        print("  (auto-pick: numbers are drawn again when the bet is sent)")
    print(f"  Bet per number:    {request.amount_per_number} {cur}")
    print(f"  Total bet:         {fmt(request.total_stake)} {cur}")
    print(f"  RNG surcharge:     {request.surcharge} ETH")
    print(f"  Call value:        {Web3.from_wei(request.value, 'ether')} ETH")
    if request.needs_approval:
        print(f"  Token approval:    {fmt(request.total_stake)} Ypto (sent first)")

    print("\n" + "-" * 60)
    confirm = prompt("Confirm bet? (y/n)", default="y").lower()
    if confirm != "y":
        print("  Bet cancelled.")
        return

    print("\nSending bet, waiting for the draw...")
    try:
        outcome = asyncio.run(session.place_bet())
    except QuenoError as e:
        print(f"\n  ✗ FAILED: {e}")
        return

    section("RESULT")
    for line in render_grid(session):
        print(line)
    print()
    print(f"  Your numbers:      {', '.join(str(n) for n in sorted(outcome.selection))}")
    print(f"  Drawn:             {', '.join(str(n) for n in sorted(outcome.drawn))}")
    print(f"  Matches:           {', '.join(str(n) for n in sorted(outcome.matches)) or 'none'}")
    if outcome.won:
        print(f"\n  🎉 You Win! Reward: {fmt(outcome.reward)} {session.final_currency.label}")
    else:
        print(f"\n  😢 You Lose! Reward: {fmt(outcome.reward)} {session.final_currency.label}")


def show_history(session: BetSession) -> None:
    section("BET SUMMARY")
    totals = session.totals()
    for cur in Currency:
        t = totals[cur]
        print(f"\n  {cur.label}")
        print(f"    Total Bet:       {fmt(t.bet)} {cur.label}")
        print(f"    Total Reward:    {fmt(t.reward)} {cur.label}")
        print(f"    Balance:         {fmt(t.balance)} {cur.label}")

    section("HISTORY")
    if not len(session.history):
        print("\n  No bets yet")
        return
    if len(session.history) > HISTORY_PREVIEW and not session.show_all_history:
        session.show_all_history = prompt("See all history? (y/n)", default="n").lower() == "y"
    for entry in session.visible_history():
        print(f"\n  Selection: {', '.join(str(n) for n in sorted(entry.selection))}")
        print(f"  Drawn:     {', '.join(str(n) for n in sorted(entry.drawn))}")
        print(f"  Bet:       {fmt(entry.amount)} {entry.currency.label}")
        print(f"  Reward:    {fmt(entry.reward)} {entry.currency.label}")
    session.show_all_history = False


def main() -> None:
    try:
        settings = load_settings()
    except RuntimeError as e:
        raise SystemExit(f"Bad configuration: {e}")
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if settings.conf_path is None:
        print("No config file found, using defaults and QUENO_* environment variables.")
        print("Searched paths:")
        for p in DEFAULT_CONF_PATHS:
            print(f"  - {p}")
        print()

    client = connect(settings)
    session = BetSession(result_timeout=settings.result_timeout)

    print("=" * 60)
    print("                 Queno Lottery (TUI)")
    print("=" * 60)

    try:
        block, native, token = asyncio.run(fetch_wallet_info(client))
    except Exception as e:
        raise SystemExit(f"Could not reach node at {settings.rpc_url}: {session.decoder.decode(e)}")

    session.init(client)
    print(f"\nConnected to {settings.rpc_url} | Current block: {block}")
    print(f"  Address:         {session.address}")
    print(f"  ETH balance:     {native:.8f}")
    print(f"  Ypto balance:    {token:.8f}")

    try:
        while True:
            play_round(session)
            show_history(session)
            print()
            again = prompt("Play again? (y/n)", default="y").lower()
            if again != "y":
                break
            session.reset()
    except (KeyboardInterrupt, EOFError):
        print()
    finally:
        session.teardown()


if __name__ == "__main__":
    main()
