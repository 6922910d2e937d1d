"""Forward-only progression through the rounds of a puzzle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import ValidationError
from .ledger import AnswerLedger
from .puzzle import Accepted, AttemptResult, Puzzle, Rejected, Round

LOGGER = logging.getLogger(__name__)


class Phase(str, Enum):
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    FINALIZED = "finalized"
    ERRORED = "errored"


class Direction(str, Enum):
    BACK = "back"
    CURRENT = "current"


class Step(Enum):
    """What :meth:`RoundNavigator.advance` did."""

    MOVED = "moved"
    SUBMIT = "submit"


@dataclass(frozen=True)
class NavigationState:
    """Snapshot of the navigator; ``current_index`` is a position, not a round index."""

    phase: Phase
    current_index: int
    unlocked_round_index: Optional[int]
    error: Optional[str] = None


class RoundNavigator:
    """Own which round is shown and which round may still be answered.

    The shown round (``current_index``) can move back freely for review, but
    ``unlocked_round_index`` only ever moves to the round right after the one
    just completed. :meth:`is_editable` is the single definition of whether a
    round's answer may be written.
    """

    def __init__(self) -> None:
        self._phase = Phase.LOADING
        self._puzzle: Optional[Puzzle] = None
        self._ledger: Optional[AnswerLedger] = None
        self._current = 0
        self._unlocked: Optional[int] = None
        self._result: Optional[AttemptResult] = None
        self._error: Optional[str] = None

    # ------------------------------------------------------------------ queries
    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def puzzle(self) -> Optional[Puzzle]:
        return self._puzzle

    @property
    def ledger(self) -> AnswerLedger:
        if self._ledger is None:
            raise ValidationError("not_ready", "No puzzle loaded yet")
        return self._ledger

    @property
    def result(self) -> Optional[AttemptResult]:
        return self._result

    @property
    def state(self) -> NavigationState:
        return NavigationState(
            phase=self._phase,
            current_index=self._current,
            unlocked_round_index=self._unlocked,
            error=self._error,
        )

    @property
    def current_round(self) -> Optional[Round]:
        if self._puzzle is None:
            return None
        return self._puzzle.rounds[self._current]

    @property
    def is_last_round(self) -> bool:
        return self._puzzle is not None and self._current == len(self._puzzle) - 1

    def is_editable(self, round_index: int) -> bool:
        if self._phase not in (Phase.READY, Phase.ERRORED):
            return False
        current = self.current_round
        if current is None:
            return False
        return current.index == round_index and round_index == self._unlocked

    # ------------------------------------------------------------------ transitions
    def begin_loading(self) -> None:
        """Drop the current puzzle; nothing is answerable until :meth:`load`."""
        self._phase = Phase.LOADING
        self._puzzle = None
        self._ledger = None
        self._current = 0
        self._unlocked = None
        self._result = None
        self._error = None

    def load(self, puzzle: Puzzle) -> None:
        self.begin_loading()
        self._puzzle = puzzle
        self._ledger = AnswerLedger(puzzle.round_indexes, self.is_editable)
        self._unlocked = puzzle.rounds[0].index
        self._phase = Phase.READY
        LOGGER.debug("Loaded puzzle %s with %d rounds", puzzle.date, len(puzzle))

    def fail(self, reason: str) -> None:
        """Enter ``Errored`` from ``Loading`` or ``Submitting``."""
        if self._phase not in (Phase.LOADING, Phase.SUBMITTING):
            raise ValidationError("invalid_state", f"Cannot fail from {self._phase.value}")
        self._phase = Phase.ERRORED
        self._error = reason

    def view(self, direction: Direction | str) -> NavigationState:
        direction = Direction(direction)
        if self._puzzle is None:
            raise ValidationError("not_ready", "No puzzle loaded yet")
        if direction is Direction.BACK:
            self._current = max(self._current - 1, 0)
        else:
            self._current = self._position_of(self._unlocked)
        return self.state

    def check_advance(self) -> Step:
        """Raise what :meth:`advance` would raise and report the step it would take."""
        self.require_answering()
        assert self._puzzle is not None and self._ledger is not None
        current = self._puzzle.rounds[self._current]
        if current.index not in self._ledger:
            raise ValidationError("unanswered", f"Round {current.index} has no answer yet")
        return Step.SUBMIT if self.is_last_round else Step.MOVED

    def advance(self) -> Step:
        if self.check_advance() is Step.SUBMIT:
            return Step.SUBMIT
        assert self._puzzle is not None
        current = self._puzzle.rounds[self._current]
        self._current += 1
        if current.index == self._unlocked:
            self._unlocked = self._puzzle.rounds[self._current].index
            LOGGER.debug("Unlocked round %s", self._unlocked)
        return Step.MOVED

    def begin_submission(self) -> None:
        self.require_answering()
        self._phase = Phase.SUBMITTING
        self._error = None

    def finish_submission(self, result: AttemptResult) -> None:
        if self._phase is not Phase.SUBMITTING:
            raise ValidationError("invalid_state", "No submission in flight")
        self._result = result
        if isinstance(result, Accepted):
            self._phase = Phase.FINALIZED
        elif isinstance(result, Rejected):
            self.fail(result.message)

    # ------------------------------------------------------------------ helpers
    def require_answering(self) -> None:
        if self._phase is Phase.SUBMITTING:
            raise ValidationError("in_flight", "A submission is already in flight")
        if self._phase is Phase.FINALIZED:
            raise ValidationError("finalized", "This puzzle has already been scored")
        if self._puzzle is None or self._phase not in (Phase.READY, Phase.ERRORED):
            raise ValidationError("not_ready", "No puzzle loaded yet")

    def _position_of(self, round_index: Optional[int]) -> int:
        assert self._puzzle is not None
        for position, round_ in enumerate(self._puzzle.rounds):
            if round_.index == round_index:
                return position
        return 0
