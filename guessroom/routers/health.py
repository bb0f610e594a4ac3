import time
from datetime import datetime, timezone

from fastapi import APIRouter

from ..dependencies import RoomManagerDep

router = APIRouter()

STARTED_AT = time.monotonic()


@router.get("/health")
def health(manager: RoomManagerDep):
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": time.monotonic() - STARTED_AT,
        "webSocketConnections": manager.connection_count,
        "rooms": len(manager),
    }
