import uuid

from ..models import Phase, Player
from ..exceptions import (
    InvalidNumber,
    NameTaken,
    NotAdmin,
    NotEnoughPlayers,
    PlayerNotFound,
    RoomFull,
    RoundNotActive,
)

import logging

log = logging.getLogger(__name__)


def new_player_id() -> str:
    return f"player_{uuid.uuid4().hex[:12]}"


class Room:

    def __init__(self, code: str, max_players: int = 0, min_players: int = 1):
        log.info(f"Creating new room state for room {code}")
        self.code = code
        self.max_players = max_players
        self.min_players = min_players

        self.phase = Phase.WAITING
        self.admin_id: str | None = None
        self.round_number = 0
        # insertion order is roster order: admin succession and tie-breaks rely on it
        self._players: dict[str, Player] = {}

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._players

    @property
    def is_full(self) -> bool:
        return self.max_players > 0 and len(self._players) >= self.max_players

    @property
    def is_empty(self) -> bool:
        return not self._players

    @property
    def players(self) -> list[Player]:
        return list(self._players.values())

    @property
    def connection_ids(self) -> list[str]:
        return [p.connection_id for p in self._players.values()]

    def get_player(self, player_id: str) -> Player:
        player = self._players.get(player_id)
        if player is None:
            raise PlayerNotFound(player_id)
        return player

    def is_admin(self, player_id: str | None) -> bool:
        return player_id is not None and player_id == self.admin_id

    def require_admin(self, player_id: str | None, message: str | None = None) -> None:
        if not self.is_admin(player_id):
            raise NotAdmin(message)

    def check_can_join(self, name: str) -> None:
        if self.is_full:
            raise RoomFull()
        # exact, case-sensitive match
        if any(p.name == name for p in self._players.values()):
            raise NameTaken()

    def add_player(self, name: str, connection_id: str) -> Player:
        self.check_can_join(name)

        player = Player(id=new_player_id(), name=name, connection_id=connection_id)
        self._players[player.id] = player
        if self.admin_id is None:
            self.admin_id = player.id

        log.info(f"Adding player {player.id} ({name}) to room {self.code}")
        return player

    def remove_player(self, player_id: str) -> Player | None:
        player = self._players.pop(player_id, None)
        if player is None:
            return None

        log.info(f"Removing player {player_id} from room {self.code}")

        if self.admin_id == player_id:
            self.admin_id = next(iter(self._players), None)
            if self.admin_id is not None:
                log.info(f"Admin of room {self.code} passed to {self.admin_id}")
        return player

    def start_round(self) -> None:
        if len(self._players) < self.min_players:
            raise NotEnoughPlayers()

        for player in self._players.values():
            player.reset_number()
            player.is_ready = False
        self.phase = Phase.PLAYING
        self.round_number += 1

    def reset_round(self) -> None:
        for player in self._players.values():
            player.reset_number()
        self.phase = Phase.WAITING

    def set_ready(self, player_id: str, ready: bool = True) -> None:
        if self.phase is not Phase.WAITING:
            raise RoundNotActive("Round already in progress")
        self.get_player(player_id).is_ready = ready

    def all_ready(self) -> bool:
        return (
            len(self._players) >= self.min_players
            and all(p.is_ready for p in self._players.values())
        )

    def submit_number(self, player_id: str, number: int) -> None:
        player = self.get_player(player_id)
        if self.phase is not Phase.PLAYING:
            raise RoundNotActive()
        if isinstance(number, bool) or not isinstance(number, int) or not 0 <= number <= 100:
            raise InvalidNumber()
        player.number = number

    def all_submitted(self) -> bool:
        return bool(self._players) and all(
            p.number is not None for p in self._players.values()
        )

    def round_complete(self) -> bool:
        return self.phase is Phase.PLAYING and self.all_submitted()

    def submissions(self) -> list[tuple[str, int | None]]:
        return [(p.id, p.number) for p in self._players.values()]

    def roster(self) -> dict[str, dict]:
        return {pid: p.public() for pid, p in self._players.items()}

    def snapshot(self) -> dict:
        return {
            "roomCode": self.code,
            "phase": self.phase.value,
            "round": self.round_number,
            "adminId": self.admin_id,
            "players": self.roster(),
        }
