import secrets
import string

import anyio

from ..exceptions import RoomNotFound
from .dispatcher import Connection, Dispatcher
from .resolver import RoundRule
from .room import Room

import logging

log = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_room_code(length: int = 6) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class RoomManager:
    """
    Owns every room, every live connection and the membership index
    between them. All mutation goes through ``lock``.
    """

    def __init__(
        self,
        rule: RoundRule = RoundRule.AVERAGE_ELIMINATION,
        max_players: int = 0,
        min_players: int = 1,
        code_length: int = 6,
    ):
        self.rule = RoundRule(rule)
        self.max_players = max_players
        self.min_players = min_players
        self.code_length = code_length

        self.rooms: dict[str, Room] = {}
        self.connections: dict[str, Connection] = {}
        # connection id -> (room code, player id)
        self._memberships: dict[str, tuple[str, str]] = {}

        self.lock = anyio.Lock()
        self.dispatcher = Dispatcher(self.connections)

    def __len__(self) -> int:
        return len(self.rooms)

    # ---- registry ----

    def create_room(self) -> Room:
        code = generate_room_code(self.code_length)
        while code in self.rooms:
            log.warning(f"Room code collision detected, regenerating: {code}")
            code = generate_room_code(self.code_length)

        room = Room(code, max_players=self.max_players, min_players=self.min_players)
        self.rooms[code] = room
        log.info(f"Room {code} created")
        return room

    def get_room(self, code: str) -> Room | None:
        return self.rooms.get(normalize_code(code))

    def require_room(self, code: str) -> Room:
        room = self.get_room(code)
        if room is None:
            raise RoomNotFound(code)
        return room

    def destroy_room(self, code: str) -> None:
        room = self.rooms.pop(code, None)
        if room is not None:
            log.info(f"Room {code} deleted (empty)")

    # ---- connections ----

    @property
    def connection_count(self) -> int:
        return len(self.connections)

    def register_connection(self, connection: Connection) -> None:
        self.connections[connection.id] = connection

    def unregister_connection(self, connection_id: str) -> None:
        self.connections.pop(connection_id, None)

    # ---- membership ----

    def membership(self, connection_id: str) -> tuple[Room, str] | None:
        entry = self._memberships.get(connection_id)
        if entry is None:
            return None
        code, player_id = entry
        room = self.rooms.get(code)
        if room is None or player_id not in room:
            self._memberships.pop(connection_id, None)
            return None
        return room, player_id

    def add_member(self, room: Room, name: str, connection_id: str):
        player = room.add_player(name, connection_id)
        self._memberships[connection_id] = (room.code, player.id)
        return player

    def remove_member(self, room: Room, player_id: str):
        """Remove a player and destroy the room if that emptied it."""
        player = room.remove_player(player_id)
        if player is not None:
            self._memberships.pop(player.connection_id, None)
        if room.is_empty:
            self.destroy_room(room.code)
        return player
