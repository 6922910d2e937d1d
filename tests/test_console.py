import asyncio
import io
from datetime import datetime

from rich.console import Console

from real_or_ai.puzzle import LeaderboardEntry
from real_or_ai.utils.console import QuizConsole


def _console() -> tuple[QuizConsole, io.StringIO]:
    buffer = io.StringIO()
    return QuizConsole(Console(file=buffer, width=100, color_system=None)), buffer


def test_show_renders_round_progress_and_lock(session) -> None:
    asyncio.run(session.load())
    session.record_current("ai")
    asyncio.run(session.advance())
    session.view("back")
    console, buffer = _console()

    console.show(session.snapshot())

    output = buffer.getvalue()
    assert "Round 1" in output
    assert "Progress: 1/3" in output
    assert "AI" in output
    assert "locked" in output


def test_show_renders_result_and_leaderboard(session) -> None:
    asyncio.run(session.load())
    navigator = session.navigator
    while True:
        session.record_current("ai")
        if navigator.is_last_round:
            break
        navigator.advance()
    asyncio.run(session.advance())
    console, buffer = _console()

    console.show(session.snapshot(), user="alice")

    output = buffer.getvalue()
    assert "Score: 3/3" in output
    assert "Leaderboard" in output
    assert "alice" in output


def test_empty_leaderboard_message() -> None:
    console, buffer = _console()

    console.show_leaderboard([])
    console.show_leaderboard([LeaderboardEntry(1, "u_1", 4, datetime(2026, 10, 18, 9, 15, 0))])

    output = buffer.getvalue()
    assert "Nobody has played today yet." in output
    assert "09:15:00" in output
