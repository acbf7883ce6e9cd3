"""Console launcher that follows one game as a participant."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from stonelotto.client.config import ClientSettings, load_settings
from stonelotto.client.gateway import HttpSessionGateway
from stonelotto.client.services import ConsoleNotifier, ConsoleSpeechService
from stonelotto.client.session import GameSession


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Stone Lotto console client")
    parser.add_argument("--server", default=settings.server_url)
    parser.add_argument("--game-id", type=int, required=True)
    parser.add_argument("--user-id", type=int, required=True)
    parser.add_argument("--token", default=settings.token or "")
    parser.add_argument("--roll", action="store_true", help="roll once the round is active")
    parser.add_argument("--say", default="", help="send one chat message after connecting")
    parser.add_argument("--once", action="store_true", help="refresh once and exit")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def build_session(args: argparse.Namespace, settings: ClientSettings) -> GameSession:
    gateway = HttpSessionGateway(
        base_url=args.server,
        token=args.token or None,
        timeout=settings.request_timeout,
    )
    return GameSession(
        game_id=args.game_id,
        user_id=args.user_id,
        gateway=gateway,
        speech=ConsoleSpeechService(),
        settings=settings,
        notifier=ConsoleNotifier(),
    )


def describe(session: GameSession) -> str:
    snapshot = session.snapshot
    if snapshot is None:
        return "No game state yet"
    game = snapshot.round
    parts = [
        f"Game {session.game_id} round {game.id}: {game.status.value}",
        f"stake {game.currency} {game.stake_amount:,.0f}",
        f"pot {game.currency} {game.pot_amount:,.0f}",
        f"roll {session.rounds.state.value}",
    ]
    if session.rounds.selected_stone_id is not None:
        parts.append(f"stone {session.rounds.selected_stone_id}")
    winners = session.winners()
    if winners:
        parts.append(f"winners {', '.join(winners)} on stone {game.winning_stone_id}")
    if session.chat.banner_text:
        parts.append(session.chat.banner_text)
    return " | ".join(parts)


async def follow_game(session: GameSession, args: argparse.Namespace) -> int:
    snapshot = await session.refresh()
    if snapshot is None:
        return 1
    print(describe(session))

    if args.say:
        await session.send_message(args.say)
    if args.roll:
        await session.roll()
    if args.once:
        return 0

    stop = asyncio.Event()
    last_line = ""
    runner = asyncio.create_task(session.run(stop))
    try:
        while not runner.done():
            line = describe(session)
            if line != last_line:
                print(line)
                last_line = line
            if args.roll and session.rounds.can_roll:
                await session.roll()
            await asyncio.sleep(session.settings.poll_interval)
    finally:
        stop.set()
        await runner
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = load_settings()
    session = build_session(args, settings)
    try:
        return asyncio.run(follow_game(session, args))
    except KeyboardInterrupt:
        print("Stopped.", file=sys.stderr)
        return 130
    finally:
        session.teardown()


if __name__ == "__main__":
    raise SystemExit(main())
