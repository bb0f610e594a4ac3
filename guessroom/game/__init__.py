from .room import Room
from .room_manager import RoomManager
from .resolver import RoundResult, RoundRule, resolve_round
from .message_router import MessageRouter
from .dispatcher import Dispatcher, Outcome

__all__ = [
    "Room",
    "RoomManager",
    "RoundResult",
    "RoundRule",
    "resolve_round",
    "MessageRouter",
    "Dispatcher",
    "Outcome",
]
