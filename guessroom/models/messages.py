from typing import Annotated, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    field_validator,
)

from ..exceptions import InvalidMessage, InvalidNumber

PlayerName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)]
RoomCode = Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True, min_length=1)]


class InboundMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreateRoomMessage(InboundMessage):
    player_name: PlayerName = Field(alias="playerName")


class JoinRoomMessage(InboundMessage):
    room_code: RoomCode = Field(alias="roomCode")
    player_name: PlayerName = Field(alias="playerName")


class RoomActionMessage(InboundMessage):
    room_code: RoomCode = Field(alias="roomCode")


class ChooseNumberMessage(InboundMessage):
    room_code: RoomCode = Field(alias="roomCode")
    player_id: str | None = Field(default=None, alias="playerId")
    number: int = Field(ge=0, le=100)

    @field_validator("number", mode="before")
    @classmethod
    def reject_bool(cls, value):
        if isinstance(value, bool):
            raise ValueError("number must be numeric")
        return value


class KickPlayerMessage(InboundMessage):
    room_code: RoomCode = Field(alias="roomCode")
    player_id: str = Field(alias="playerId", min_length=1)


M = TypeVar("M", bound=InboundMessage)


def parse_message(model: type[M], data: dict) -> M:
    """Validate ``data`` against ``model``, translating failures to game errors."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        fields = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        if "number" in fields:
            raise InvalidNumber() from e
        if fields & {"playerName", "player_name"}:
            raise InvalidMessage("Player name must be 1-20 characters") from e
        raise InvalidMessage() from e
