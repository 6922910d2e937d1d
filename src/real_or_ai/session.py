"""One play-through of today's puzzle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .errors import LoadError, QuizError, ValidationError
from .identity import IdentityProvider
from .leaderboard import LeaderboardBackend, LeaderboardFetcher
from .navigator import Direction, NavigationState, Phase, RoundNavigator, Step
from .puzzle import AttemptResult, Choice, LeaderboardEntry, Puzzle, Rejected, Round
from .sources import PuzzleSource
from .submission import Scorer, SubmissionCoordinator, SubmissionOutcome


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot of a session for presentation."""

    phase: Phase
    puzzle_date: Optional[str]
    position: int
    total_rounds: int
    answered: int
    round: Optional[Round]
    choice: Optional[Choice]
    editable: bool
    unlocked_round_index: Optional[int]
    result: Optional[AttemptResult]
    leaderboard: Optional[Tuple[LeaderboardEntry, ...]]
    last_error: Optional[QuizError]


class QuizSession:
    """Compose navigator, ledger and submission for the currently loaded puzzle.

    Every :meth:`load` starts a new generation. Responses belonging to an
    older generation are dropped on arrival instead of being applied.
    """

    def __init__(
        self,
        puzzle_source: PuzzleSource,
        identity: IdentityProvider,
        scorer: Scorer,
        leaderboard_backend: LeaderboardBackend,
        *,
        leaderboard_limit: int = 10,
        logger: logging.Logger | None = None,
    ) -> None:
        self._source = puzzle_source
        self._identity = identity
        self._scorer = scorer
        self._leaderboard = LeaderboardFetcher(leaderboard_backend)
        self._leaderboard_limit = leaderboard_limit
        self._logger = logger or logging.getLogger(__name__)
        self._generation = 0
        self._navigator = RoundNavigator()
        self._coordinator = self._new_coordinator()
        self._board: Optional[Tuple[LeaderboardEntry, ...]] = None
        self.last_error: Optional[QuizError] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def navigator(self) -> RoundNavigator:
        return self._navigator

    @property
    def state(self) -> NavigationState:
        return self._navigator.state

    @property
    def result(self) -> Optional[AttemptResult]:
        return self._navigator.result

    @property
    def leaderboard(self) -> Optional[Tuple[LeaderboardEntry, ...]]:
        return self._board

    # ------------------------------------------------------------------ lifecycle
    async def load(self) -> None:
        """Fetch today's puzzle and start over with an empty ledger."""
        self._generation += 1
        generation = self._generation
        self._navigator = RoundNavigator()
        self._coordinator = self._new_coordinator()
        self._board = None
        self.last_error = None

        try:
            puzzle = await self._source.fetch_today()
        except LoadError as exc:
            if generation != self._generation:
                self._logger.debug("Discarding load failure from generation %d", generation)
                return
            self.last_error = exc
            self._navigator.fail(str(exc))
            self._logger.error("Could not load today's puzzle: %s", exc)
            raise

        if generation != self._generation:
            self._logger.debug("Discarding puzzle from generation %d", generation)
            return
        self._navigator.load(puzzle)
        self._logger.info("Puzzle %s ready with %d rounds", puzzle.date, len(puzzle))

    # ------------------------------------------------------------------ answering
    def record(self, round_index: int, choice: Union[Choice, str]) -> bool:
        if self._navigator.puzzle is None:
            raise ValidationError("not_ready", "No puzzle loaded yet")
        return self._navigator.ledger.record(round_index, choice)

    def record_current(self, choice: Union[Choice, str]) -> bool:
        current = self._navigator.current_round
        if current is None:
            raise ValidationError("not_ready", "No puzzle loaded yet")
        return self.record(current.index, choice)

    def view(self, direction: Direction | str) -> NavigationState:
        return self._navigator.view(direction)

    async def advance(self) -> Optional[SubmissionOutcome]:
        """Move to the next round, or submit when the last round is answered."""
        try:
            step = self._navigator.advance()
        except ValidationError as exc:
            self.last_error = exc
            raise
        self.last_error = None
        if step is Step.SUBMIT:
            return await self.submit()
        return None

    def check_advance(self) -> Step:
        """Raise the error :meth:`advance` would raise, without moving or submitting."""
        try:
            step = self._navigator.check_advance()
        except ValidationError as exc:
            self.last_error = exc
            raise
        if step is Step.SUBMIT:
            self.check_submit()
        return step

    # ------------------------------------------------------------------ submission
    def check_submit(self) -> Puzzle:
        """Raise :class:`ValidationError` unless :meth:`submit` would send a request."""
        navigator = self._navigator
        try:
            navigator.require_answering()
            puzzle = navigator.puzzle
            assert puzzle is not None
            self._coordinator.validate(puzzle, navigator.ledger)
        except ValidationError as exc:
            self.last_error = exc
            raise
        return puzzle

    async def submit(self) -> Optional[SubmissionOutcome]:
        """Submit the ledger; ``None`` if the session was reloaded meanwhile."""
        navigator = self._navigator
        coordinator = self._coordinator
        puzzle = self.check_submit()
        user_token = self._identity.user_token()
        navigator.begin_submission()
        generation = self._generation

        def apply(result: AttemptResult) -> bool:
            if generation != self._generation:
                self._logger.debug("Discarding attempt result from generation %d", generation)
                return False
            navigator.finish_submission(result)
            self.last_error = result.to_error() if isinstance(result, Rejected) else None
            return True

        try:
            outcome = await coordinator.submit(puzzle, navigator.ledger, user_token, on_result=apply)
        except Exception as exc:
            if navigator.phase is Phase.SUBMITTING:
                navigator.fail(str(exc))
            raise
        if generation != self._generation:
            return None
        if outcome.accepted:
            self._board = outcome.leaderboard
            if outcome.leaderboard_error is not None:
                self.last_error = outcome.leaderboard_error
        return outcome

    # ------------------------------------------------------------------ presentation
    def snapshot(self) -> SessionView:
        navigator = self._navigator
        puzzle = navigator.puzzle
        current = navigator.current_round
        answered = len(navigator.ledger) if puzzle is not None else 0
        return SessionView(
            phase=navigator.phase,
            puzzle_date=puzzle.date if puzzle else None,
            position=navigator.state.current_index,
            total_rounds=len(puzzle) if puzzle else 0,
            answered=answered,
            round=current,
            choice=navigator.ledger.get(current.index) if current is not None else None,
            editable=current is not None and navigator.is_editable(current.index),
            unlocked_round_index=navigator.state.unlocked_round_index,
            result=navigator.result,
            leaderboard=self._board,
            last_error=self.last_error,
        )

    def _new_coordinator(self) -> SubmissionCoordinator:
        return SubmissionCoordinator(
            self._scorer,
            self._leaderboard,
            leaderboard_limit=self._leaderboard_limit,
            logger=self._logger,
        )
