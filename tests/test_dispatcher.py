from guessroom.game import Dispatcher, Outcome, Room
from guessroom.game.dispatcher import CLOSE_KICKED, broadcast

from .conftest import FakeConnection


def connections(*ids, **capacities):
    return {cid: FakeConnection(cid, capacities.get(cid)) for cid in ids}


def test_broadcast_recipients_are_fixed_at_creation():
    room = Room("ABCXYZ")
    room.add_player("A", "c1")
    room.add_player("B", "c2")

    notification = broadcast(room, {"type": "x"}, exclude="c2")
    room.add_player("C", "c3")

    assert notification.recipients == ["c1"]
    assert broadcast(None, {"type": "x"}).recipients == []


def test_outcome_truthiness():
    outcome = Outcome()
    assert not outcome
    outcome.close("c1")
    assert outcome


def test_deliver_in_order_then_close():
    conns = connections("c1", "c2")
    outcome = Outcome()
    outcome.send("c1", {"type": "first"})
    outcome.close("c1", CLOSE_KICKED, "Kicked by host")
    outcome.send("c1", {"type": "second"})
    outcome.send("c2", {"type": "other"})

    Dispatcher(conns).deliver(outcome)

    assert conns["c1"].types() == ["first", "second"]
    assert conns["c1"].closed_with == (CLOSE_KICKED, "Kicked by host")
    assert conns["c2"].types() == ["other"]
    assert conns["c2"].closed_with is None


def test_missing_dead_and_stopped_connections_are_skipped():
    conns = connections("c1", "c2", "c3")
    conns["c2"].alive = False
    conns["c3"].stopped = True

    outcome = Outcome()
    outcome.send("gone", {"type": "x"})
    outcome.send("c2", {"type": "x"})
    outcome.send("c3", {"type": "x"})
    outcome.send("c1", {"type": "x"})
    outcome.close("gone")

    Dispatcher(conns).deliver(outcome)

    assert conns["c1"].types() == ["x"]
    assert conns["c2"].sent == []
    assert conns["c3"].sent == []
    assert not conns["c3"].aborted


def test_full_outbox_aborts_only_that_connection():
    conns = connections("slow", "fast", slow=1)

    outcome = Outcome()
    for n in range(3):
        outcome.send("slow", {"type": "tick", "n": n})
        outcome.send("fast", {"type": "tick", "n": n})
    outcome.close("slow")

    Dispatcher(conns).deliver(outcome)

    assert conns["slow"].aborted
    assert [m["n"] for m in conns["slow"].sent] == [0]
    assert conns["slow"].closed_with is None
    assert [m["n"] for m in conns["fast"].sent] == [0, 1, 2]
    assert not conns["fast"].aborted
