"""
Game exceptions

Every rule violation a client can trigger is raised as one of these and
turned into an ``error`` reply for the sender by the message router.
"""


class GuessRoomError(Exception):
    """Base class for all game errors"""

    message = "Something went wrong"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ============ Room ============

class RoomNotFound(GuessRoomError):
    message = "Room does not exist"

    def __init__(self, room_code: str):
        self.room_code = room_code
        super().__init__()


class RoomFull(GuessRoomError):
    message = "Room is full"


class NameTaken(GuessRoomError):
    message = "Name already taken in this room"


class NotInRoom(GuessRoomError):
    message = "You are not in this room"


class AlreadyInRoom(GuessRoomError):
    message = "You are already in this room"


# ============ Authorization ============

class NotAdmin(GuessRoomError):
    """Privileged action attempted by a non-admin member"""
    message = "Only admin can do that"


class SelfKickForbidden(GuessRoomError):
    message = "Admin cannot kick themselves"


# ============ Player ============

class PlayerNotFound(GuessRoomError):
    message = "Player not found in this room"

    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__()


# ============ Round ============

class RoundNotActive(GuessRoomError):
    message = "Round is not in progress"


class InvalidNumber(GuessRoomError):
    message = "Number must be between 0 and 100"


class NotEnoughPlayers(GuessRoomError):
    message = "Not enough players to start the round"


# ============ Message ============

class InvalidMessage(GuessRoomError):
    message = "Invalid message format"
