from .health import router as health_router
from .websocket import router as websocket_router

__all__ = ["health_router", "websocket_router"]
