import asyncio
import logging

import pytest

from real_or_ai.errors import LeaderboardError, TransportError, ValidationError
from real_or_ai.leaderboard import LeaderboardFetcher
from real_or_ai.ledger import AnswerLedger
from real_or_ai.puzzle import Accepted, ErrorKind, Rejected
from real_or_ai.submission import SubmissionCoordinator

from conftest import FakeBoard, FakeScorer, make_puzzle


def _complete_ledger(puzzle, answers):
    ledger = AnswerLedger(puzzle.round_indexes, lambda index: True)
    for index, choice in answers.items():
        ledger.record(index, choice)
    return ledger


def _coordinator(scorer, board, **kwargs):
    return SubmissionCoordinator(scorer, LeaderboardFetcher(board), leaderboard_limit=5, **kwargs)


def test_incomplete_ledger_is_rejected_without_a_request(scorer, board) -> None:
    puzzle = make_puzzle(1, 2, 3)
    ledger = _complete_ledger(puzzle, {1: "ai", 2: "real"})
    coordinator = _coordinator(scorer, board)

    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(coordinator.submit(puzzle, ledger, "user-1"))

    assert excinfo.value.reason == "incomplete"
    assert "2/3" in str(excinfo.value)
    assert scorer.requests == []
    assert board.limits == []


def test_accepted_submission_triggers_exactly_one_leaderboard_fetch(scorer, board) -> None:
    puzzle = make_puzzle(1, 2, 3)
    ledger = _complete_ledger(puzzle, {1: "ai", 2: "real", 3: "ai"})
    coordinator = _coordinator(scorer, board)

    outcome = asyncio.run(coordinator.submit(puzzle, ledger, "user-1"))

    assert scorer.requests == [("2026-10-18", {"1": "ai", "2": "real", "3": "ai"}, "user-1")]
    assert outcome.result == Accepted(False, "2026-10-18", 2, 3)
    assert board.limits == [5]
    assert [e.user for e in outcome.leaderboard] == ["alice"]
    assert outcome.leaderboard_error is None


def test_repeat_submissions_report_the_original_score(scorer, board) -> None:
    puzzle = make_puzzle(1, 2, 3)
    coordinator = _coordinator(scorer, board)
    first = asyncio.run(
        coordinator.submit(puzzle, _complete_ledger(puzzle, {1: "ai", 2: "ai", 3: "real"}), "user-1")
    )

    second = asyncio.run(
        coordinator.submit(puzzle, _complete_ledger(puzzle, {1: "ai", 2: "ai", 3: "ai"}), "user-1")
    )
    third = asyncio.run(
        coordinator.submit(puzzle, _complete_ledger(puzzle, {1: "real", 2: "real", 3: "real"}), "user-1")
    )

    assert first.result.already_submitted is False
    assert second.result.already_submitted is True
    assert third.result.already_submitted is True
    assert first.result.score == second.result.score == third.result.score == 2


def test_server_rejection_skips_the_leaderboard(board) -> None:
    puzzle = make_puzzle(1)
    scorer = FakeScorer({"1": "ai"})
    scorer.result = Rejected(kind=ErrorKind.SERVER, message="puzzle_closed")
    coordinator = _coordinator(scorer, board)

    outcome = asyncio.run(coordinator.submit(puzzle, _complete_ledger(puzzle, {1: "ai"}), "user-1"))

    assert outcome.accepted is False
    assert outcome.result.message == "puzzle_closed"
    assert board.limits == []


def test_transport_failure_becomes_a_rejected_result(board) -> None:
    puzzle = make_puzzle(1)
    scorer = FakeScorer({"1": "ai"}, error=TransportError("connection reset"))
    coordinator = _coordinator(scorer, board)

    outcome = asyncio.run(coordinator.submit(puzzle, _complete_ledger(puzzle, {1: "ai"}), "user-1"))

    assert isinstance(outcome.result, Rejected)
    assert outcome.result.kind is ErrorKind.TRANSPORT
    assert isinstance(outcome.result.to_error(), TransportError)
    assert coordinator.in_flight is False


def test_leaderboard_failure_keeps_the_accepted_result(scorer) -> None:
    puzzle = make_puzzle(1)
    board = FakeBoard(error=LeaderboardError("boom"))
    coordinator = _coordinator(scorer, board)

    outcome = asyncio.run(coordinator.submit(puzzle, _complete_ledger(puzzle, {1: "ai"}), "user-1"))

    assert isinstance(outcome.result, Accepted)
    assert isinstance(outcome.leaderboard_error, LeaderboardError)
    assert outcome.leaderboard is None


def test_leaderboard_for_another_day_is_reported_as_an_error(scorer) -> None:
    puzzle = make_puzzle(1)
    board = FakeBoard(date="2026-10-17")
    coordinator = _coordinator(scorer, board)

    outcome = asyncio.run(coordinator.submit(puzzle, _complete_ledger(puzzle, {1: "ai"}), "user-1"))

    assert outcome.accepted is True
    assert "2026-10-17" in str(outcome.leaderboard_error)


def test_second_submission_while_one_is_in_flight_is_refused(scorer, board) -> None:
    puzzle = make_puzzle(1)
    ledger = _complete_ledger(puzzle, {1: "ai"})
    coordinator = _coordinator(scorer, board)

    async def scenario():
        scorer.gate = asyncio.Event()
        first = asyncio.create_task(coordinator.submit(puzzle, ledger, "user-1"))
        await asyncio.sleep(0)
        assert coordinator.in_flight is True
        with pytest.raises(ValidationError) as excinfo:
            await coordinator.submit(puzzle, ledger, "user-1")
        scorer.gate.set()
        return excinfo.value, await first

    error, outcome = asyncio.run(scenario())

    assert error.reason == "in_flight"
    assert outcome.accepted is True
    assert len(scorer.requests) == 1


def test_stale_result_listener_suppresses_leaderboard(scorer, board) -> None:
    puzzle = make_puzzle(1)
    coordinator = _coordinator(scorer, board)
    seen = []

    def listener(result):
        seen.append(result)
        return False

    outcome = asyncio.run(
        coordinator.submit(puzzle, _complete_ledger(puzzle, {1: "ai"}), "user-1", on_result=listener)
    )

    assert seen == [outcome.result]
    assert board.limits == []


def test_accepted_submission_is_logged(scorer, board, caplog: pytest.LogCaptureFixture) -> None:
    puzzle = make_puzzle(1, 2, 3)
    coordinator = _coordinator(scorer, board, logger=logging.getLogger("tests.submission"))

    with caplog.at_level(logging.INFO):
        asyncio.run(coordinator.submit(puzzle, _complete_ledger(puzzle, {1: "ai", 2: "ai", 3: "ai"}), "u"))

    messages = [record.getMessage() for record in caplog.records]
    assert any("2026-10-18" in m and "3/3" in m for m in messages)
    assert any("elapsed" in m for m in messages)
