"""
██████╗ ███████╗ █████╗ ██╗          ██████╗ ██████╗      █████╗ ██╗
██╔══██╗██╔════╝██╔══██╗██║         ██╔═══██╗██╔══██╗    ██╔══██╗██║
██████╔╝█████╗  ███████║██║         ██║   ██║██████╔╝    ███████║██║
██╔══██╗██╔══╝  ██╔══██║██║         ██║   ██║██╔══██╗    ██╔══██║██║
██║  ██║███████╗██║  ██║███████╗    ╚██████╔╝██║  ██║    ██║  ██║██║
╚═╝  ╚═╝╚══════╝╚═╝  ╚═╝╚══════╝     ╚═════╝ ╚═╝  ╚═╝    ╚═╝  ╚═╝╚═╝
src/real_or_ai/cli.py
Interactive command-line front end for the daily Real or AI puzzle.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Awaitable, List, Optional

from .client import ApiClient
from .config import QuizSettings, load_settings
from .errors import LoadError, QuizError, ValidationError
from .identity import FileIdentityProvider
from .leaderboard import LeaderboardFetcher
from .navigator import Direction, Phase, Step
from .puzzle import Choice
from .session import QuizSession
from .sources import LocalJsonPuzzleSource, PuzzleSource
from .submission import SubmissionOutcome
from .utils.console import QuizConsole
from .utils.env_utils import append_to_env_file
from .utils.logger import logger, set_log_profile, spinner, step, success

HELP_LINES = [
    "r  mark the shown image as REAL",
    "a  mark the shown image as AI",
    "n  next round (submits after the last round)",
    "b  back to the previous round (review only)",
    "c  jump to the round you are answering",
    "s  retry a failed submission",
    "q  quit",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="real-or-ai",
        description="Real or AI: judge today's images, submit once, see the leaderboard",
    )
    parser.add_argument("--api-base", help="Base URL of the puzzle API (sets API_BASE)")
    parser.add_argument("--save", action="store_true", help="Persist --api-base into the .env file")
    parser.add_argument("--puzzle-file", help="Play a local puzzle JSON file instead of the API's")
    parser.add_argument("--limit", type=int, help="Number of leaderboard entries to show")
    parser.add_argument("--leaderboard", action="store_true", help="Only show today's leaderboard")
    parser.add_argument("--whoami", action="store_true", help="Print your user id and exit")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--debug", action="store_true", help="Enable verbose debug logging")
    verbosity.add_argument("--quiet", action="store_true", help="Only show warnings and errors")
    return parser


class QuizApp:
    """Drive a :class:`QuizSession` from terminal commands."""

    def __init__(self, session: QuizSession, console: QuizConsole, user: str) -> None:
        self.session = session
        self.console = console
        self.user = user

    async def handle(self, command: str) -> bool:
        """Apply one command; return ``False`` when the user wants to stop."""
        command = command.strip().lower()
        if command in ("q", "quit", "exit"):
            return False
        try:
            if command in ("r", "real"):
                self._record(Choice.REAL)
            elif command in ("a", "ai"):
                self._record(Choice.AI)
            elif command in ("n", "next"):
                await self._advance()
            elif command in ("b", "back"):
                self.session.view(Direction.BACK)
            elif command in ("c", "current"):
                self.session.view(Direction.CURRENT)
            elif command in ("s", "submit"):
                await self._submit()
            elif command in ("?", "h", "help"):
                self.console.bullet_list(HELP_LINES, tone="dim")
            elif command:
                self.console.text_block(f"Unknown command {command!r}; type ? for help.", tone="yellow")
        except ValidationError as exc:
            self.console.text_block(str(exc), tone="yellow")
        return True

    def _record(self, choice: Choice) -> None:
        if not self.session.record_current(choice):
            self.console.text_block("This round is locked; its answer can no longer change.", tone="yellow")

    async def _advance(self) -> None:
        if self.session.check_advance() is Step.SUBMIT:
            await self._submitting(self.session.advance())
        else:
            await self.session.advance()

    async def _submit(self) -> None:
        self.session.check_submit()
        await self._submitting(self.session.submit())

    async def _submitting(self, pending: Awaitable[Optional[SubmissionOutcome]]) -> None:
        async with spinner("Submitting answers") as waiting:
            outcome = await pending
            if outcome is not None and not outcome.accepted:
                waiting.fail(outcome.result.message)

    async def run(self) -> None:
        self.console.bullet_list(HELP_LINES, tone="dim")
        while True:
            self.console.show(self.session.snapshot(), user=self.user)
            if self.session.state.phase is Phase.FINALIZED:
                return
            command = self.console.prompt("→")
            if command is None or not await self.handle(command):
                return


def _puzzle_source(settings: QuizSettings, client: ApiClient) -> PuzzleSource:
    if settings.puzzle_path:
        return LocalJsonPuzzleSource(settings.puzzle_path)
    return client


async def _show_leaderboard(settings: QuizSettings, client: ApiClient, console: QuizConsole) -> None:
    board = LeaderboardFetcher(client)
    async with spinner("Fetching leaderboard"):
        entries = await board.fetch(None, settings.leaderboard_limit)
    console.headline("Today's leaderboard")
    console.show_leaderboard(entries)


async def run_quiz(settings: QuizSettings, console: QuizConsole, *, leaderboard_only: bool = False) -> int:
    identity = FileIdentityProvider(settings.identity_file)
    user = identity.user_token()
    async with ApiClient(settings.api_base, timeout_seconds=settings.request_timeout_seconds) as client:
        if leaderboard_only:
            await _show_leaderboard(settings, client, console)
            return 0

        session = QuizSession(
            _puzzle_source(settings, client),
            identity,
            client,
            client,
            leaderboard_limit=settings.leaderboard_limit,
            logger=logger.logger,
        )
        step("Loading today's puzzle")
        try:
            async with spinner("Fetching puzzle"):
                await session.load()
        except LoadError:
            return 1
        await QuizApp(session, console, user).run()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        set_log_profile("debug")
    elif args.quiet:
        set_log_profile("quiet")

    settings = load_settings().override(
        api_base=args.api_base,
        puzzle_path=args.puzzle_file,
        leaderboard_limit=args.limit if args.limit and args.limit > 0 else None,
    )
    if args.save and args.api_base:
        env_file = os.getenv("ENV_FILE", ".env")
        append_to_env_file(env_file, "API_BASE", settings.api_base)
        success(f"Saved API_BASE to {env_file}")

    if args.whoami:
        print(FileIdentityProvider(settings.identity_file).user_token())
        return 0

    console = QuizConsole()
    console.banner("Daily Puzzle")
    console.text_block(f"API base: {settings.api_base}", tone="dim")
    try:
        return asyncio.run(run_quiz(settings, console, leaderboard_only=args.leaderboard))
    except QuizError as exc:
        logger.error(str(exc))
        return 1
    except KeyboardInterrupt:
        console.text_block("Bye.", tone="dim")
        return 130


if __name__ == "__main__":
    sys.exit(main())
