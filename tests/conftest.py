import anyio
import pytest
from fastapi.testclient import TestClient

from guessroom.game import MessageRouter, RoomManager, RoundRule
from guessroom.game.dispatcher import Closing
from guessroom.main import app


class FakeConnection:
    """In-memory stand-in for a WebSocket connection's outbox"""

    def __init__(self, connection_id: str, capacity: int | None = None):
        self.id = connection_id
        self.sent: list[dict] = []
        self.closed_with: tuple[int, str | None] | None = None
        self.alive = True
        self.aborted = False
        self.stopped = False
        self.capacity = capacity

    @property
    def is_alive(self) -> bool:
        return self.alive and not self.aborted and self.closed_with is None

    def post(self, item) -> None:
        if self.stopped:
            raise anyio.BrokenResourceError
        if self.capacity is not None and len(self.sent) >= self.capacity:
            raise anyio.WouldBlock
        if isinstance(item, Closing):
            self.closed_with = (item.code, item.reason)
        else:
            self.sent.append(item)

    def abort(self) -> None:
        self.aborted = True

    def types(self) -> list[str]:
        return [m["type"] for m in self.sent]


@pytest.fixture
def manager():
    return RoomManager(rule=RoundRule.AVERAGE_ELIMINATION)


@pytest.fixture
def sum_manager():
    return RoomManager(rule=RoundRule.SUM_CLOSEST)


@pytest.fixture
def router(manager):
    return MessageRouter(manager)


@pytest.fixture
def sum_router(sum_manager):
    return MessageRouter(sum_manager)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def recv_until(ws, msg_type, max_messages=20):
    """Receive WS messages until we get the expected type."""
    for _ in range(max_messages):
        data = ws.receive_json()
        if data.get("type") == msg_type:
            return data
    raise AssertionError(f"Never received {msg_type} after {max_messages} messages")
