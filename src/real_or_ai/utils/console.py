"""
██████╗ ███████╗ █████╗ ██╗          ██████╗ ██████╗      █████╗ ██╗
██╔══██╗██╔════╝██╔══██╗██║         ██╔═══██╗██╔══██╗    ██╔══██╗██║
██████╔╝█████╗  ███████║██║         ██║   ██║██████╔╝    ███████║██║
██╔══██╗██╔══╝  ██╔══██║██║         ██║   ██║██╔══██╗    ██╔══██║██║
██║  ██║███████╗██║  ██║███████╗    ╚██████╔╝██║  ██║    ██║  ██║██║
╚═╝  ╚═╝╚══════╝╚═╝  ╚═╝╚══════╝     ╚═════╝ ╚═╝  ╚═╝    ╚═╝  ╚═╝╚═╝
src/real_or_ai/utils/console.py
Console rendering utilities for the Real or AI CLI.

Everything here reads a :class:`~real_or_ai.session.SessionView`; nothing
writes back into the session.
"""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..navigator import Phase
from ..puzzle import Accepted, LeaderboardEntry, Rejected
from ..session import SessionView

__all__ = ["QuizConsole", "render_round", "render_result", "render_leaderboard"]

_BANNER = [
    "██████╗ ███████╗ █████╗ ██╗          ██████╗ ██████╗      █████╗ ██╗",
    "██╔══██╗██╔════╝██╔══██╗██║         ██╔═══██╗██╔══██╗    ██╔══██╗██║",
    "██████╔╝█████╗  ███████║██║         ██║   ██║██████╔╝    ███████║██║",
    "██╔══██╗██╔══╝  ██╔══██║██║         ██║   ██║██╔══██╗    ██╔══██║██║",
    "██║  ██║███████╗██║  ██║███████╗    ╚██████╔╝██║  ██║    ██║  ██║██║",
    "╚═╝  ╚═╝╚══════╝╚═╝  ╚═╝╚══════╝     ╚═════╝ ╚═╝  ╚═╝    ╚═╝  ╚═╝╚═╝",
]

_GRADIENT = [
    "rgb(147,51,234)",
    "rgb(168,85,247)",
    "rgb(192,132,252)",
    "rgb(139,92,246)",
    "rgb(99,102,241)",
    "rgb(67,56,202)",
]


def render_round(view: SessionView) -> Panel:
    """Panel describing the round currently shown."""
    if view.round is None:
        return Panel(Text("Loading puzzle…", style="dim"), title="Daily Puzzle", box=box.ROUNDED)

    lines = Text()
    lines.append(f"Date (UTC): {view.puzzle_date}\n", style="dim")
    lines.append(f"Progress: {view.answered}/{view.total_rounds}\n\n", style="dim")
    lines.append("Image: ", style="bold")
    lines.append(f"{view.round.image_ref}\n")
    lines.append("Selected: ", style="bold")
    if view.choice is None:
        lines.append("None", style="dim")
    else:
        lines.append(view.choice.value.upper(), style="bold magenta")
    if not view.editable:
        lines.append("   (locked)", style="yellow")

    title = f"Round {view.round.index} · {view.position + 1}/{view.total_rounds}"
    return Panel(lines, title=title, box=box.ROUNDED, border_style="blue")


def render_result(view: SessionView) -> Optional[Panel]:
    result = view.result
    if isinstance(result, Accepted):
        body = Text(f"Score: {result.score}/{result.total_rounds}", style="bold green")
        if result.already_submitted:
            body.append("\nYou already played today; this is your earlier score.", style="dim")
        return Panel(body, title=f"Result · {result.puzzle_date}", border_style="green")
    if isinstance(result, Rejected) and view.phase is Phase.ERRORED:
        body = Text(result.message, style="red")
        body.append("\nPress 's' to try submitting again.", style="dim")
        return Panel(body, title="Submission failed", border_style="red")
    return None


def render_leaderboard(entries: Sequence[LeaderboardEntry], *, highlight: Optional[str] = None) -> Table:
    table = Table(title="Leaderboard", box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right")
    table.add_column("Player")
    table.add_column("Score", justify="right")
    table.add_column("Submitted", style="dim")
    for entry in entries:
        style = "bold cyan" if highlight and entry.user == highlight else None
        submitted = entry.created_at.strftime("%H:%M:%S") if entry.created_at else ""
        table.add_row(str(entry.rank), entry.user, str(entry.score), submitted, style=style)
    return table


class QuizConsole:
    """Coordinated helper for rendering the quiz in a terminal."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(highlight=False)

    def banner(self, subtitle: Optional[str] = None) -> None:
        for i, line in enumerate(_BANNER):
            self.console.print(Text(line, style=f"bold {_GRADIENT[i % len(_GRADIENT)]}"), justify="center")
        if subtitle:
            self.console.rule(subtitle, style="magenta")

    def headline(self, title: str) -> None:
        self.console.rule(title, style="blue")

    def text_block(self, text: str, *, tone: Optional[str] = None) -> None:
        self.console.print(Text(text, style=tone or ""))

    def bullet_list(self, lines: Iterable[str], *, tone: Optional[str] = None) -> None:
        for line in lines:
            self.console.print(Text(f"• {line}", style=tone or ""))

    def show(self, view: SessionView, *, user: Optional[str] = None) -> None:
        parts = [render_round(view)]
        result = render_result(view)
        if result is not None:
            parts.append(result)
        if view.leaderboard:
            parts.append(render_leaderboard(view.leaderboard, highlight=user))
        self.console.print(Group(*parts))
        if view.last_error is not None and not isinstance(view.result, Rejected):
            self.console.print(Text(f"Error: {view.last_error}", style="red"))

    def show_leaderboard(self, entries: Sequence[LeaderboardEntry], *, highlight: Optional[str] = None) -> None:
        if not entries:
            self.text_block("Nobody has played today yet.", tone="dim")
            return
        self.console.print(render_leaderboard(entries, highlight=highlight))

    def prompt(self, prompt_text: str) -> Optional[str]:
        """Read one command; ``None`` once input is exhausted."""
        try:
            return self.console.input(f"[bold green]{prompt_text.strip()}[/] ")
        except EOFError:
            return None
