import json
import logging

import anyio

from ..game import MessageRouter, RoomManager
from ..game.connection import WebSocketConnection

log = logging.getLogger(__name__)


class WebSocketHandler:
    """Pumps frames from one connection into the message router"""

    @staticmethod
    def decode(raw: str | bytes | None, connection_id: str) -> dict | None:
        """Decode one frame; anything that is not a JSON object is logged and dropped."""
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log.error(f"Error parsing message from {connection_id}: {e}")
            return None
        if not isinstance(data, dict):
            log.error(f"Ignoring non-object message from {connection_id}: {data!r}")
            return None
        return data

    @staticmethod
    async def handle_messages(
            connection: WebSocketConnection,
            manager: RoomManager,
    ) -> None:
        """Main message handling loop for one connection"""
        router = MessageRouter(manager)
        manager.register_connection(connection)

        async def read_frames() -> None:
            while True:
                message = await connection.websocket.receive()
                if message["type"] == "websocket.disconnect":
                    return

                data = WebSocketHandler.decode(
                    message.get("text") or message.get("bytes"), connection.id
                )
                if data is None:
                    continue

                # deliver only queues, so the lock is never held across socket writes
                async with manager.lock:
                    outcome = router.dispatch(connection.id, data)
                    manager.dispatcher.deliver(outcome)

        try:
            await connection.serve(read_frames)
        finally:
            # cleanup must finish even if this task is being cancelled
            with anyio.CancelScope(shield=True):
                async with manager.lock:
                    outcome = router.disconnect(connection.id)
                    manager.unregister_connection(connection.id)
                    manager.dispatcher.deliver(outcome)
