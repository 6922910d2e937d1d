"""Error taxonomy for the daily quiz client."""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "QuizError",
    "LoadError",
    "ValidationError",
    "SubmissionError",
    "TransportError",
    "LeaderboardError",
]


class QuizError(RuntimeError):
    """Base class for every error raised by the quiz client."""


class LoadError(QuizError):
    """Today's puzzle could not be fetched or was unusable."""


class ValidationError(QuizError):
    """A local precondition failed; no request was sent.

    ``reason`` is a short machine-readable code such as ``"unanswered"``,
    ``"incomplete"``, ``"not_ready"``, ``"in_flight"`` or ``"finalized"``.
    """

    def __init__(self, reason: str, message: Optional[str] = None) -> None:
        super().__init__(message or reason)
        self.reason = reason


class SubmissionError(QuizError):
    """The scorer rejected the attempt."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.details = details or {}


class TransportError(QuizError):
    """Network failure or an unparseable response body."""


class LeaderboardError(QuizError):
    """The leaderboard could not be fetched."""
