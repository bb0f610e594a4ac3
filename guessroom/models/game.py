from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Phase(str, Enum):
    WAITING = "waiting"
    PLAYING = "playing"


class Player(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    connection_id: str = Field(exclude=True)
    number: int | None = None
    wins: int = 0
    is_ready: bool = Field(default=False, serialization_alias="isReady")

    def public(self) -> dict:
        return self.model_dump(by_alias=True)

    def reset_number(self) -> None:
        self.number = None
