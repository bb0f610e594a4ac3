import logging

from fastapi import APIRouter, WebSocket

from ..config import OUTBOX_SIZE
from ..dependencies import RoomManagerDep
from ..game.connection import WebSocketConnection
from .websocket_handler import WebSocketHandler

log = logging.getLogger(__name__)
router = APIRouter()


@router.websocket("/ws")
@router.websocket("/")
async def websocket_endpoint(websocket: WebSocket, manager: RoomManagerDep) -> None:
    """Main WebSocket endpoint; rooms are chosen by messages, not by URL"""
    await websocket.accept()
    connection = WebSocketConnection(websocket, outbox_size=OUTBOX_SIZE)
    log.info(f"New client connected: {connection.id}")

    try:
        await WebSocketHandler.handle_messages(connection=connection, manager=manager)
    except Exception as e:
        log.error(f"WebSocket error for connection {connection.id}: {e}")
        raise
    finally:
        log.info(f"Client disconnected: {connection.id}")
