from typing import Annotated

from fastapi import Depends

from .config import MAX_PLAYERS, MIN_PLAYERS, ROOM_CODE_LENGTH, ROUND_RULE
from .game import RoomManager, RoundRule

# singleton pattern
_manager_instance: RoomManager | None = None


def init_room_manager(manager: RoomManager | None = None) -> RoomManager:
    """(Re)create the process-wide RoomManager, from settings unless one is given."""
    global _manager_instance
    if manager is None:
        manager = RoomManager(
            rule=RoundRule(ROUND_RULE),
            max_players=MAX_PLAYERS,
            min_players=MIN_PLAYERS,
            code_length=ROOM_CODE_LENGTH,
        )
    _manager_instance = manager
    return manager


def get_room_manager() -> RoomManager:
    """Get the singleton RoomManager instance."""
    if _manager_instance is None:
        return init_room_manager()
    return _manager_instance


# convenience type alias for dependency injection
RoomManagerDep = Annotated[RoomManager, Depends(get_room_manager)]
