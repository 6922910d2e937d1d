import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from real_or_ai.errors import LeaderboardError, LoadError, TransportError
from real_or_ai.identity import StaticIdentityProvider
from real_or_ai.puzzle import Accepted, AttemptResult, LeaderboardEntry, Puzzle, Round
from real_or_ai.session import QuizSession

PUZZLE_DATE = "2026-10-18"


def make_puzzle(*indexes: int, date: str = PUZZLE_DATE) -> Puzzle:
    return Puzzle(date=date, rounds=tuple(Round(index=i, image_ref=f"img{i}") for i in indexes))


class FakeSource:
    def __init__(self, *puzzles: Puzzle, error: Optional[LoadError] = None) -> None:
        self.puzzles = list(puzzles)
        self.error = error
        self.calls = 0
        self.gate: Optional[asyncio.Event] = None

    async def fetch_today(self) -> Puzzle:
        self.calls += 1
        puzzle = self.puzzles.pop(0) if len(self.puzzles) > 1 else self.puzzles[0]
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return puzzle


class FakeScorer:
    """Scores against a fixed key and remembers (user, date) like the real server."""

    def __init__(self, key: Dict[str, str], *, error: Optional[TransportError] = None) -> None:
        self.key = key
        self.error = error
        self.requests: List[Tuple[str, Dict[str, str], str]] = []
        self.scored: Dict[Tuple[str, str], Accepted] = {}
        self.gate: Optional[asyncio.Event] = None
        self.result: Optional[AttemptResult] = None

    async def post_attempt(self, puzzle_date: str, answers: Dict[str, str], user_token: str) -> AttemptResult:
        self.requests.append((puzzle_date, dict(answers), user_token))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        previous = self.scored.get((user_token, puzzle_date))
        if previous is not None:
            return Accepted(True, previous.puzzle_date, previous.score, previous.total_rounds)
        score = sum(1 for k, v in answers.items() if self.key.get(k) == v)
        accepted = Accepted(False, puzzle_date, score, len(self.key))
        self.scored[(user_token, puzzle_date)] = accepted
        return accepted


class FakeBoard:
    def __init__(self, entries=(), *, date: str = PUZZLE_DATE, error: Optional[LeaderboardError] = None) -> None:
        self.entries = tuple(entries)
        self.date = date
        self.error = error
        self.limits: List[int] = []

    async def fetch_leaderboard(self, limit: int) -> Tuple[str, Tuple[LeaderboardEntry, ...]]:
        self.limits.append(limit)
        if self.error is not None:
            raise self.error
        return self.date, self.entries


@pytest.fixture
def puzzle() -> Puzzle:
    return make_puzzle(3, 1, 2)


@pytest.fixture
def scorer() -> FakeScorer:
    return FakeScorer({"1": "ai", "2": "ai", "3": "ai"})


@pytest.fixture
def board() -> FakeBoard:
    return FakeBoard([LeaderboardEntry(rank=1, user="alice", score=3, created_at=None)])


@pytest.fixture
def session(puzzle, scorer, board) -> QuizSession:
    return QuizSession(FakeSource(puzzle), StaticIdentityProvider("user-1"), scorer, board, leaderboard_limit=5)
