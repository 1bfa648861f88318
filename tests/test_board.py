import pytest

from conftest import make_participant
from funrun.client.board import ParticipantBoard, UnknownParticipant
from funrun.models import PaymentStatus

PAID = PaymentStatus.PAID
UNPAID = PaymentStatus.UNPAID


def _board(*specs):
    board = ParticipantBoard()
    board.load([make_participant(pid, status) for pid, status in specs])
    return board


def test_empty_load_has_zero_buckets():
    board = ParticipantBoard()
    board.load([])
    assert board.tally == {PAID: 0, UNPAID: 0}
    assert sum(board.tally.values()) == 0
    assert len(board) == 0


def test_load_counts_and_keeps_server_order():
    board = _board(("c", PAID), ("a", UNPAID), ("b", UNPAID))
    assert [p.id for p in board] == ["c", "a", "b"]
    assert board.tally == {PAID: 1, UNPAID: 2}
    assert board.summary() == {"total": 3, "paid": 1, "unpaid": 2}


def test_load_twice_is_idempotent():
    people = [make_participant("a", PAID), make_participant("b", UNPAID)]
    board = ParticipantBoard()
    board.load(people)
    first = (dict(board.collection), dict(board.tally))
    board.load(people)
    assert (dict(board.collection), dict(board.tally)) == first


def test_load_replaces_previous_collection():
    board = _board(("a", PAID))
    board.load([make_participant("z", UNPAID)])
    assert list(board.collection) == ["z"]
    assert board.tally == {PAID: 0, UNPAID: 1}


def test_apply_moves_one_count_and_keeps_position():
    board = _board(("a", UNPAID), ("b", UNPAID), ("c", PAID))
    before = board.get("b")

    updated = board.apply_confirmed_mutation("b", PAID)

    assert updated.payment_status is PAID
    assert [p.id for p in board] == ["a", "b", "c"]
    assert board.tally == {PAID: 2, UNPAID: 1}
    assert updated.name == before.name and updated.email == before.email
    assert updated.created_at == before.created_at
    # the loaded object itself is not mutated
    assert before.payment_status is UNPAID


def test_apply_does_not_recount(monkeypatch):
    board = _board(("a", UNPAID), ("b", PAID))
    monkeypatch.setattr(board, "load", lambda *_: pytest.fail("recount"))
    board.apply_confirmed_mutation("a", PAID)
    assert board.tally[PAID] == 2


def test_apply_same_value_leaves_tally_alone():
    board = _board(("a", PAID))
    board.apply_confirmed_mutation("a", PAID)
    assert board.tally == {PAID: 1, UNPAID: 0}


def test_apply_unknown_id_fails_loudly():
    board = _board(("a", PAID))
    with pytest.raises(UnknownParticipant):
        board.apply_confirmed_mutation("ghost", UNPAID)
    with pytest.raises(AssertionError):
        board.apply_confirmed_mutation("ghost", UNPAID)
    assert board.tally == {PAID: 1, UNPAID: 0}


def test_interleaved_applies_keep_tally_consistent():
    board = _board(("a", UNPAID), ("b", UNPAID), ("c", PAID), ("d", UNPAID))
    for pid, status in [("a", PAID), ("c", UNPAID), ("b", PAID), ("a", UNPAID), ("d", PAID)]:
        board.apply_confirmed_mutation(pid, status)
        assert sum(board.tally.values()) == len(board)

    expected = {PAID: 0, UNPAID: 0}
    for p in board:
        expected[p.payment_status] += 1
    assert board.tally == expected


def test_apply_takes_server_updated_at():
    board = _board(("a", UNPAID))
    stamp = make_participant("x").updated_at.replace(year=2027)
    assert board.apply_confirmed_mutation("a", PAID, stamp).updated_at == stamp
