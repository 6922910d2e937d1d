"""Submission of a completed answer ledger to the remote scorer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Callable, Dict, Optional, Protocol, Tuple

from .errors import LeaderboardError, TransportError, ValidationError
from .leaderboard import LeaderboardFetcher
from .ledger import AnswerLedger
from .puzzle import Accepted, AttemptResult, ErrorKind, LeaderboardEntry, Puzzle, Rejected


class Scorer(Protocol):
    """Remote side that scores an attempt, idempotently per (user, date)."""

    async def post_attempt(
        self, puzzle_date: str, answers: Dict[str, str], user_token: str
    ) -> AttemptResult:
        """Send the answers; raise :class:`TransportError` on network or parse failure."""


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of one submission plus the leaderboard fetched after it, if any."""

    result: AttemptResult
    leaderboard: Optional[Tuple[LeaderboardEntry, ...]] = None
    leaderboard_error: Optional[LeaderboardError] = None

    @property
    def accepted(self) -> bool:
        return isinstance(self.result, Accepted)


ResultListener = Callable[[AttemptResult], bool]


class SubmissionCoordinator:
    """Perform at most one in-flight submission and trigger the leaderboard fetch.

    Failed submissions are not retried automatically; calling :meth:`submit`
    again re-runs validation and is safe because the scorer is idempotent.
    """

    def __init__(
        self,
        scorer: Scorer,
        leaderboard: LeaderboardFetcher,
        *,
        leaderboard_limit: int = 10,
        logger: logging.Logger | None = None,
        timer: Callable[[], float] = perf_counter,
    ) -> None:
        self._scorer = scorer
        self._leaderboard = leaderboard
        self._leaderboard_limit = leaderboard_limit
        self._logger = logger or logging.getLogger(__name__)
        self._timer = timer
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def validate(self, puzzle: Puzzle, ledger: AnswerLedger) -> None:
        """Raise :class:`ValidationError` unless a submission may be sent now."""
        if self._in_flight:
            raise ValidationError("in_flight", "A submission is already in flight")
        if not ledger.is_complete(puzzle):
            answered = len(puzzle) - len(ledger.missing(puzzle))
            raise ValidationError(
                "incomplete",
                f"Please answer all rounds ({answered}/{len(puzzle)}).",
            )

    async def submit(
        self,
        puzzle: Puzzle,
        ledger: AnswerLedger,
        user_token: str,
        on_result: ResultListener | None = None,
    ) -> SubmissionOutcome:
        """Submit ``ledger`` for ``puzzle``.

        ``on_result`` is called with the attempt result before any leaderboard
        request; returning ``False`` marks the result as stale and suppresses
        the leaderboard fetch.
        """
        self.validate(puzzle, ledger)
        payload = ledger.to_submission_payload()
        self._in_flight = True
        start = self._timer()
        try:
            result = await self._post(puzzle.date, payload, user_token)
        finally:
            self._in_flight = False
        elapsed = self._timer() - start

        if isinstance(result, Accepted):
            self._logger.info(
                "Attempt for %s scored %d/%d%s (elapsed %.2fs)",
                result.puzzle_date,
                result.score,
                result.total_rounds,
                " (already submitted)" if result.already_submitted else "",
                elapsed,
            )
        else:
            self._logger.warning(
                "Attempt for %s rejected [%s]: %s", puzzle.date, result.kind.value, result.message
            )

        if on_result is not None and not on_result(result):
            return SubmissionOutcome(result=result)
        if not isinstance(result, Accepted):
            return SubmissionOutcome(result=result)

        try:
            entries = await self._leaderboard.fetch(result.puzzle_date, self._leaderboard_limit)
        except LeaderboardError as exc:
            self._logger.warning("Leaderboard unavailable: %s", exc)
            return SubmissionOutcome(result=result, leaderboard_error=exc)
        return SubmissionOutcome(result=result, leaderboard=entries)

    async def _post(self, puzzle_date: str, payload: Dict[str, str], user_token: str) -> AttemptResult:
        try:
            return await self._scorer.post_attempt(puzzle_date, payload, user_token)
        except TransportError as exc:
            return Rejected(kind=ErrorKind.TRANSPORT, message=str(exc))
