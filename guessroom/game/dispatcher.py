"""
Outbound side of the room manager.

Handlers never touch sockets: they describe what should be sent in an
``Outcome`` and the ``Dispatcher`` hands it to the recipients' outboxes
afterwards. Recipient lists are captured when a notification is created, so
every broadcast reflects the roster as it was at that point of the handler.

Delivery only queues. It never waits on a client, so it is safe to run while
holding the room manager lock; a connection whose outbox is full is aborted
instead of slowing everyone else down.
"""
from dataclasses import dataclass, field
from typing import Mapping, Protocol

import anyio

import logging

log = logging.getLogger(__name__)

CLOSE_KICKED = 4001
CLOSE_ELIMINATED = 4002


@dataclass
class Notification:
    recipients: list[str]
    message: dict


@dataclass
class Closing:
    connection_id: str
    code: int = 1000
    reason: str | None = None


class Connection(Protocol):
    id: str

    @property
    def is_alive(self) -> bool: ...

    def post(self, item: dict | Closing) -> None: ...

    def abort(self) -> None: ...


def broadcast(room, message: dict, exclude: str | None = None) -> Notification:
    """Address ``message`` to every member of ``room`` except ``exclude``."""
    if room is None:
        return Notification(recipients=[], message=message)
    recipients = [cid for cid in room.connection_ids if cid != exclude]
    return Notification(recipients=recipients, message=message)


@dataclass
class Outcome:
    notifications: list[Notification] = field(default_factory=list)
    closing: list[Closing] = field(default_factory=list)

    def send(self, connection_id: str, message: dict) -> None:
        self.notifications.append(Notification([connection_id], message))

    def broadcast(self, room, message: dict, exclude: str | None = None) -> None:
        self.notifications.append(broadcast(room, message, exclude))

    def close(self, connection_id: str, code: int = 1000, reason: str | None = None) -> None:
        self.closing.append(Closing(connection_id, code, reason))

    def extend(self, other: "Outcome") -> None:
        self.notifications.extend(other.notifications)
        self.closing.extend(other.closing)

    def messages_for(self, connection_id: str) -> list[dict]:
        return [n.message for n in self.notifications if connection_id in n.recipients]

    def __bool__(self) -> bool:
        return bool(self.notifications or self.closing)


class Dispatcher:
    def __init__(self, connections: Mapping[str, Connection]):
        self.connections = connections

    def post_to(self, connection_id: str, item: dict | Closing) -> None:
        conn = self.connections.get(connection_id)
        if conn is None or not conn.is_alive:
            return
        try:
            conn.post(item)
        except anyio.WouldBlock:
            log.warning(f"Outbox full for connection {connection_id}, dropping the connection")
            conn.abort()
        except (anyio.BrokenResourceError, anyio.ClosedResourceError):
            log.warning(f"Connection {connection_id} stopped writing, skipping {item!r}")

    def deliver(self, outcome: Outcome) -> None:
        """Queue every notification, then every close, preserving order per recipient."""
        for notification in outcome.notifications:
            for connection_id in notification.recipients:
                self.post_to(connection_id, notification.message)

        for closing in outcome.closing:
            self.post_to(closing.connection_id, closing)
