import logging
import uuid
from typing import Awaitable, Callable

import anyio
from fastapi import WebSocket
from fastapi.websockets import WebSocketState

from .dispatcher import Closing

log = logging.getLogger(__name__)

DEFAULT_OUTBOX_SIZE = 256


class WebSocketConnection:
    """
    One client's channel. The room manager only knows connections by ``id``.

    Outgoing frames are queued on a bounded outbox with ``post`` and written
    by a separate task, so queuing never waits on the client. A ``Closing``
    item closes the socket once everything queued before it is written.
    """

    def __init__(
        self,
        websocket: WebSocket,
        connection_id: str | None = None,
        outbox_size: int = DEFAULT_OUTBOX_SIZE,
    ):
        self.websocket = websocket
        self.id = connection_id or uuid.uuid4().hex
        self._outbox, self._pending = anyio.create_memory_object_stream(outbox_size)
        self._scope: anyio.CancelScope | None = None
        self._closing = False
        self._aborted = False

    @property
    def is_alive(self) -> bool:
        return (
            not self._closing
            and not self._aborted
            and self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    def post(self, item: dict | Closing) -> None:
        """Queue a frame or a close; raises ``anyio.WouldBlock`` when the outbox is full."""
        self._outbox.send_nowait(item)
        if isinstance(item, Closing):
            self._closing = True

    def abort(self) -> None:
        """Stop serving this connection: pending frames are dropped, the reader is cancelled."""
        self._aborted = True
        if self._scope is not None:
            self._scope.cancel()

    async def serve(self, reader: Callable[[], Awaitable[None]]) -> None:
        """Run ``reader`` next to the outbox writer until the reader returns or the connection is aborted."""
        try:
            async with anyio.create_task_group() as task_group:
                self._scope = task_group.cancel_scope
                task_group.start_soon(self._write)
                await reader()
                task_group.cancel_scope.cancel()
        finally:
            self._outbox.close()

    async def _write(self) -> None:
        async with self._pending:
            async for item in self._pending:
                try:
                    if isinstance(item, Closing):
                        await self.close(item.code, item.reason)
                        break
                    await self.websocket.send_json(item)
                except Exception as e:
                    log.warning(f"Error writing to connection {self.id}: {e}")
                    break
        self.abort()

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        if self.websocket.application_state == WebSocketState.CONNECTED:
            await self.websocket.close(code=code, reason=reason)

    def __repr__(self) -> str:
        return f"<WebSocketConnection {self.id}>"
