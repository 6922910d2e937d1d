"""Per-session record of the user's answers."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Optional, Union

from .puzzle import Choice, Puzzle

LOGGER = logging.getLogger(__name__)

EditablePredicate = Callable[[int], bool]


class AnswerLedger:
    """Map round index to :class:`Choice`, accepting writes only for editable rounds.

    The ledger does not decide editability itself; it asks the navigator's
    predicate on every write so the rule lives in exactly one place.
    """

    def __init__(self, round_indexes: Iterable[int], editable: EditablePredicate) -> None:
        self._round_indexes = frozenset(round_indexes)
        self._editable = editable
        self._answers: Dict[int, Choice] = {}

    def record(self, round_index: int, choice: Union[Choice, str]) -> bool:
        """Store ``choice`` for ``round_index``; return ``False`` if the round is locked."""
        choice = Choice.parse(choice)
        if round_index not in self._round_indexes:
            LOGGER.debug("Ignoring answer for unknown round %s", round_index)
            return False
        if not self._editable(round_index):
            LOGGER.debug("Round %s is locked; answer %s ignored", round_index, choice.value)
            return False
        self._answers[round_index] = choice
        return True

    def get(self, round_index: int) -> Optional[Choice]:
        return self._answers.get(round_index)

    def __contains__(self, round_index: object) -> bool:
        return round_index in self._answers

    def __len__(self) -> int:
        return len(self._answers)

    def is_complete(self, puzzle: Puzzle) -> bool:
        return all(index in self._answers for index in puzzle.round_indexes)

    def missing(self, puzzle: Puzzle) -> list[int]:
        return [index for index in puzzle.round_indexes if index not in self._answers]

    def to_submission_payload(self) -> Dict[str, str]:
        """Return ``{"<roundIndex>": "real"|"ai"}`` ordered by round index."""
        return {str(index): self._answers[index].value for index in sorted(self._answers)}
