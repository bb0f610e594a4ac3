"""
Inbound side of the room manager.

``MessageRouter.dispatch`` maps a decoded frame to its handler by ``type``.
Handlers check their preconditions (room exists, sender is a member, sender
is admin) before mutating anything, then return an ``Outcome`` listing what
must be sent and which connections must be closed. A ``GuessRoomError``
raised anywhere in a handler becomes an ``error`` reply for the sender only.
"""
from typing import Callable

from ..models import (
    ChooseNumberMessage,
    CreateRoomMessage,
    JoinRoomMessage,
    KickPlayerMessage,
    Player,
    RoomActionMessage,
    parse_message,
)
from ..exceptions import AlreadyInRoom, GuessRoomError, NotInRoom, PlayerNotFound, SelfKickForbidden
from .dispatcher import CLOSE_ELIMINATED, CLOSE_KICKED, Outcome
from .resolver import resolve_round
from .room import Room
from .room_manager import RoomManager

import logging

log = logging.getLogger(__name__)

Handler = Callable[[str, dict], Outcome]


def error_message(message: str) -> dict:
    return {"type": "error", "message": message}


def roster_fields(room: Room) -> dict:
    return {"adminId": room.admin_id, "players": room.roster()}


class MessageRouter:

    def __init__(self, manager: RoomManager):
        self.manager = manager
        self._handlers: dict[str, Handler] = {
            "create_room": self.create_room,
            "join_room": self.join_room,
            "start_round": self.start_round,
            "player_ready": self.player_ready,
            "choose_number": self.choose_number,
            "number_chosen": self.choose_number,
            "play_again": self.play_again,
            "reset_round": self.play_again,
            "kick_player": self.kick_player,
        }

    def dispatch(self, connection_id: str, data: dict) -> Outcome:
        msg_type = data.get("type")
        handler = self._handlers.get(msg_type) if isinstance(msg_type, str) else None
        if handler is None:
            log.warning(f"Ignoring message with unknown type {msg_type!r} from {connection_id}")
            return Outcome()

        try:
            return handler(connection_id, data)
        except GuessRoomError as e:
            log.info(f"Rejected {msg_type} from {connection_id}: {e.message}")
            outcome = Outcome()
            outcome.send(connection_id, error_message(e.message))
            return outcome

    def disconnect(self, connection_id: str) -> Outcome:
        """Departure path shared by socket close and switching rooms."""
        membership = self.manager.membership(connection_id)
        if membership is None:
            return Outcome()
        room, player_id = membership
        return self._depart(room, player_id)

    # ---- helpers ----

    def _member(self, connection_id: str, room_code: str) -> tuple[Room, Player]:
        room = self.manager.require_room(room_code)
        membership = self.manager.membership(connection_id)
        if membership is None or membership[0] is not room:
            raise NotInRoom()
        return room, room.get_player(membership[1])

    def _depart(self, room: Room, player_id: str) -> Outcome:
        outcome = Outcome()
        self.manager.remove_member(room, player_id)
        if room.is_empty:
            return outcome

        if room.round_complete():
            outcome.extend(self._resolve(room))
        else:
            outcome.broadcast(
                room, {"type": "player_left", "playerId": player_id, **roster_fields(room)}
            )
        return outcome

    def _resolve(self, room: Room) -> Outcome:
        outcome = Outcome()
        result = resolve_round(room.submissions(), self.manager.rule)

        for winner_id in result.winner_ids:
            room.get_player(winner_id).wins += 1

        log.info(
            f"Round {room.round_number} in room {room.code}: target {result.target:.2f}, "
            f"winners {result.winner_ids}, eliminated {result.eliminated_id}"
        )
        outcome.broadcast(
            room,
            {
                "type": "round_result",
                "round": room.round_number,
                "result": result.to_message(),
                **roster_fields(room),
            },
        )

        eliminated_id = result.eliminated_id
        if eliminated_id is None:
            room.reset_round()
            return outcome

        eliminated = room.get_player(eliminated_id)
        outcome.send(
            eliminated.connection_id,
            {
                "type": "eliminated",
                "message": "You were eliminated: your number was the farthest from the target",
                "target": result.target,
            },
        )
        self.manager.remove_member(room, eliminated_id)
        outcome.close(eliminated.connection_id, CLOSE_ELIMINATED, "Eliminated")

        room.reset_round()
        if not room.is_empty:
            outcome.broadcast(
                room,
                {"type": "player_eliminated", "playerId": eliminated_id, **roster_fields(room)},
            )
        return outcome

    # ---- handlers ----

    def create_room(self, connection_id: str, data: dict) -> Outcome:
        msg = parse_message(CreateRoomMessage, data)

        outcome = self.disconnect(connection_id)
        room = self.manager.create_room()
        player = self.manager.add_member(room, msg.player_name, connection_id)

        log.info(f"Room {room.code} created by player {player.id} named {player.name}")
        outcome.send(
            connection_id,
            {
                "type": "room_created",
                **room.snapshot(),
                "playerId": player.id,
                "playerName": player.name,
            },
        )
        return outcome

    def join_room(self, connection_id: str, data: dict) -> Outcome:
        msg = parse_message(JoinRoomMessage, data)
        room = self.manager.require_room(msg.room_code)

        current = self.manager.membership(connection_id)
        if current is not None and current[0] is room:
            raise AlreadyInRoom()
        room.check_can_join(msg.player_name)

        outcome = self.disconnect(connection_id)
        player = self.manager.add_member(room, msg.player_name, connection_id)

        log.info(f"Player {player.id} named {player.name} joined room {room.code}")
        outcome.broadcast(
            room,
            {"type": "player_joined", "player": player.public(), **roster_fields(room)},
            exclude=connection_id,
        )
        outcome.send(
            connection_id,
            {
                "type": "room_joined",
                **room.snapshot(),
                "playerId": player.id,
                "playerName": player.name,
            },
        )
        return outcome

    def start_round(self, connection_id: str, data: dict) -> Outcome:
        msg = parse_message(RoomActionMessage, data)
        room, player = self._member(connection_id, msg.room_code)
        room.require_admin(player.id, "Only admin can start the round")

        room.start_round()
        log.info(f"Round {room.round_number} started in room {room.code}")

        outcome = Outcome()
        outcome.broadcast(
            room, {"type": "round_started", "round": room.round_number, **roster_fields(room)}
        )
        return outcome

    def player_ready(self, connection_id: str, data: dict) -> Outcome:
        msg = parse_message(RoomActionMessage, data)
        room, player = self._member(connection_id, msg.room_code)

        room.set_ready(player.id)

        outcome = Outcome()
        outcome.broadcast(
            room, {"type": "player_ready_update", "playerId": player.id, **roster_fields(room)}
        )
        if room.all_ready():
            room.start_round()
            log.info(f"Everyone ready, round {room.round_number} started in room {room.code}")
            outcome.broadcast(
                room, {"type": "game_starting", "round": room.round_number, **roster_fields(room)}
            )
        return outcome

    def choose_number(self, connection_id: str, data: dict) -> Outcome:
        msg = parse_message(ChooseNumberMessage, data)
        room, player = self._member(connection_id, msg.room_code)
        if msg.player_id is not None and msg.player_id != player.id:
            raise PlayerNotFound(msg.player_id)

        room.submit_number(player.id, msg.number)

        if room.round_complete():
            return self._resolve(room)

        outcome = Outcome()
        outcome.broadcast(
            room, {"type": "number_submitted", "playerId": player.id, **roster_fields(room)}
        )
        return outcome

    def play_again(self, connection_id: str, data: dict) -> Outcome:
        msg = parse_message(RoomActionMessage, data)
        room, player = self._member(connection_id, msg.room_code)
        room.require_admin(player.id, "Only admin can start the next round")

        room.reset_round()
        log.info(f"Play again initiated in room {room.code}")

        outcome = Outcome()
        outcome.broadcast(room, {"type": "play_again", **roster_fields(room)})
        if data.get("type") == "reset_round":
            outcome.broadcast(room, {"type": "round_reset", **roster_fields(room)})
        return outcome

    def kick_player(self, connection_id: str, data: dict) -> Outcome:
        msg = parse_message(KickPlayerMessage, data)
        room, player = self._member(connection_id, msg.room_code)
        room.require_admin(player.id, "Only admin can kick players")
        if msg.player_id == player.id:
            raise SelfKickForbidden()
        target = room.get_player(msg.player_id)

        outcome = Outcome()
        outcome.send(
            target.connection_id,
            {"type": "kicked", "message": "You have been kicked from the room", "roomCode": room.code},
        )
        self.manager.remove_member(room, target.id)
        outcome.close(target.connection_id, CLOSE_KICKED, "Kicked by host")
        log.info(f"Player {target.id} was kicked from room {room.code}")

        outcome.broadcast(
            room, {"type": "player_kicked", "playerId": target.id, **roster_fields(room)}
        )
        if room.round_complete():
            outcome.extend(self._resolve(room))
        return outcome
