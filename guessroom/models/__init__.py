from .game import Phase, Player
from .messages import (
    ChooseNumberMessage,
    CreateRoomMessage,
    JoinRoomMessage,
    KickPlayerMessage,
    RoomActionMessage,
    parse_message,
)

__all__ = [
    "Phase",
    "Player",
    "ChooseNumberMessage",
    "CreateRoomMessage",
    "JoinRoomMessage",
    "KickPlayerMessage",
    "RoomActionMessage",
    "parse_message",
]
