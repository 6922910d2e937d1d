"""Domain objects for the daily puzzle and their wire representation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from .errors import LoadError, LeaderboardError, SubmissionError, TransportError, QuizError

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Choice(str, Enum):
    """The user's verdict for a round."""

    REAL = "real"
    AI = "ai"

    @classmethod
    def parse(cls, value: Union["Choice", str]) -> "Choice":
        if isinstance(value, Choice):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Choice must be 'real' or 'ai', got {value!r}") from exc


@dataclass(frozen=True)
class Round:
    """Value object representing one image to judge."""

    index: int
    image_ref: str


@dataclass(frozen=True)
class Puzzle:
    """Today's puzzle: a UTC date and its rounds, sorted by index."""

    date: str
    rounds: Tuple[Round, ...]

    def __post_init__(self) -> None:
        if not _DATE_RE.match(self.date or ""):
            raise LoadError(f"Puzzle date must look like YYYY-MM-DD, got {self.date!r}")
        if not self.rounds:
            raise LoadError("Puzzle has no rounds")
        ordered = tuple(sorted(self.rounds, key=lambda r: r.index))
        indexes = [r.index for r in ordered]
        if len(set(indexes)) != len(indexes):
            raise LoadError(f"Puzzle round indexes must be unique: {indexes}")
        object.__setattr__(self, "rounds", ordered)

    @property
    def round_indexes(self) -> Tuple[int, ...]:
        return tuple(r.index for r in self.rounds)

    def __len__(self) -> int:
        return len(self.rounds)

    @classmethod
    def from_payload(cls, payload: Any) -> "Puzzle":
        """Build a puzzle from ``{date, rounds: [{roundIndex, imageUrl}]}``."""
        if not isinstance(payload, dict):
            raise LoadError("Puzzle payload must be an object")
        raw_rounds = payload.get("rounds")
        if not isinstance(raw_rounds, list):
            raise LoadError("Puzzle payload must include a 'rounds' list")
        rounds = []
        for entry in raw_rounds:
            if not isinstance(entry, dict):
                raise LoadError("Puzzle round must be an object with 'roundIndex' and 'imageUrl'")
            try:
                index = entry["roundIndex"]
                image_url = entry["imageUrl"]
            except KeyError as exc:
                raise LoadError(f"Puzzle round missing field: {exc.args[0]}") from exc
            if isinstance(index, bool) or not isinstance(index, int):
                raise LoadError(f"roundIndex must be an integer, got {index!r}")
            rounds.append(Round(index=index, image_ref=str(image_url)))
        return cls(date=str(payload.get("date") or ""), rounds=tuple(rounds))


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    user: str
    score: int
    created_at: Optional[datetime]

    @classmethod
    def from_payload(cls, payload: Any) -> "LeaderboardEntry":
        if not isinstance(payload, dict):
            raise LeaderboardError("Leaderboard entry must be an object")
        try:
            rank = int(payload["rank"])
            score = int(payload["score"])
            user = str(payload["user"])
        except (KeyError, TypeError, ValueError) as exc:
            raise LeaderboardError(f"Malformed leaderboard entry: {payload!r}") from exc
        if rank < 1:
            raise LeaderboardError(f"Leaderboard rank must be >= 1, got {rank}")
        return cls(rank=rank, user=user, score=score, created_at=parse_timestamp(payload.get("createdAt")))


class ErrorKind(str, Enum):
    """Why an attempt was rejected."""

    SERVER = "server"
    TRANSPORT = "transport"


@dataclass(frozen=True)
class Accepted:
    """The scorer accepted the attempt (possibly an earlier one for the same day)."""

    already_submitted: bool
    puzzle_date: str
    score: int
    total_rounds: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Rejected:
    kind: ErrorKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_error(self) -> QuizError:
        if self.kind is ErrorKind.TRANSPORT:
            return TransportError(self.message)
        return SubmissionError(self.message, self.details)


AttemptResult = Union[Accepted, Rejected]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; ``None`` when absent or unreadable."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_attempt_response(status: int, payload: Any) -> AttemptResult:
    """Map an ``/api/attempt`` response onto :class:`Accepted` or :class:`Rejected`.

    A 200 body must carry ``ok: true`` and integer ``score``/``totalRounds``;
    anything else is a malformed success and raises :class:`TransportError`
    rather than being mistaken for a rejection.
    """
    if status == 200:
        if not isinstance(payload, dict) or payload.get("ok") is not True:
            raise TransportError("Malformed attempt response: missing ok=true")
        try:
            return Accepted(
                already_submitted=bool(payload.get("alreadySubmitted", False)),
                puzzle_date=str(payload["puzzleDate"]),
                score=int(payload["score"]),
                total_rounds=int(payload["totalRounds"]),
                created_at=parse_timestamp(payload.get("createdAt")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError(f"Malformed attempt response: {exc}") from exc

    body = payload if isinstance(payload, dict) else {}
    message = str(body.get("error") or f"Attempt rejected ({status})")
    details: Dict[str, Any] = {"status": status}
    for key in ("details", "puzzleDate", "totalRounds", "answered"):
        if key in body:
            details[key] = body[key]
    return Rejected(kind=ErrorKind.SERVER, message=message, details=details)


def leaderboard_from_payload(payload: Any) -> Tuple[str, Tuple[LeaderboardEntry, ...]]:
    """Parse ``{puzzleDate, leaderboard: [...]}``; ranks must strictly increase."""
    if not isinstance(payload, dict) or not isinstance(payload.get("leaderboard"), list):
        raise LeaderboardError("Leaderboard payload must include a 'leaderboard' list")
    entries = tuple(LeaderboardEntry.from_payload(item) for item in payload["leaderboard"])
    _check_ranks(entries)
    return str(payload.get("puzzleDate") or ""), entries


def _check_ranks(entries: Iterable[LeaderboardEntry]) -> None:
    previous = 0
    for entry in entries:
        if entry.rank <= previous:
            raise LeaderboardError("Leaderboard ranks must be strictly increasing")
        previous = entry.rank
