"""Read-only access to today's leaderboard."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Tuple

from .errors import LeaderboardError, QuizError
from .puzzle import LeaderboardEntry

LOGGER = logging.getLogger(__name__)


class LeaderboardBackend(Protocol):
    """Anything that can return ``(puzzle_date, entries)`` for today."""

    async def fetch_leaderboard(self, limit: int) -> Tuple[str, Tuple[LeaderboardEntry, ...]]:
        """Return today's leaderboard, at most ``limit`` entries."""


class LeaderboardFetcher:
    """Fetch the leaderboard for the active puzzle date. Holds no state between calls."""

    def __init__(self, backend: LeaderboardBackend) -> None:
        self._backend = backend

    async def fetch(self, puzzle_date: Optional[str], limit: int) -> Tuple[LeaderboardEntry, ...]:
        """Return at most ``limit`` entries; ``puzzle_date=None`` accepts any day."""
        if limit < 1:
            raise LeaderboardError(f"Leaderboard limit must be positive, got {limit}")
        try:
            board_date, entries = await self._backend.fetch_leaderboard(limit)
        except LeaderboardError:
            raise
        except QuizError as exc:
            raise LeaderboardError(str(exc)) from exc
        if puzzle_date and board_date and board_date != puzzle_date:
            raise LeaderboardError(
                f"Leaderboard is for {board_date}, expected {puzzle_date}"
            )
        LOGGER.debug("Fetched %d leaderboard entries for %s", len(entries), board_date or puzzle_date)
        return tuple(entries[:limit])
