from real_or_ai.ledger import AnswerLedger
from real_or_ai.puzzle import Choice

from conftest import make_puzzle


def test_ledger_records_only_editable_rounds() -> None:
    unlocked = {"round": 1}
    ledger = AnswerLedger([1, 2], lambda index: index == unlocked["round"])

    assert ledger.record(1, "ai") is True
    assert ledger.record(2, Choice.REAL) is False
    assert ledger.get(1) is Choice.AI
    assert 2 not in ledger


def test_ledger_ignores_rounds_outside_the_puzzle() -> None:
    ledger = AnswerLedger([1, 2], lambda index: True)

    assert ledger.record(9, Choice.AI) is False
    assert len(ledger) == 0


def test_ledger_completeness_and_payload() -> None:
    puzzle = make_puzzle(1, 2, 3)
    ledger = AnswerLedger(puzzle.round_indexes, lambda index: True)
    ledger.record(3, Choice.AI)
    ledger.record(1, Choice.AI)

    assert ledger.is_complete(puzzle) is False
    assert ledger.missing(puzzle) == [2]

    ledger.record(2, Choice.REAL)

    assert ledger.is_complete(puzzle) is True
    assert ledger.to_submission_payload() == {"1": "ai", "2": "real", "3": "ai"}
