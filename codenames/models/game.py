"""
Models / game.py
Role:
- Closed enumerations for card labels and teams.
- `Game`: the stored record (dataclass, owned by the game store).
- Pydantic request/response models exchanged by the `/game` routes.

Wire format:
- camelCase keys (`startingPlayer`, `createdAt`, `aiTeam`) are produced through
  aliases; Python code uses snake_case.
- `createdAt` is epoch milliseconds.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

BOARD_SIZE = 25
MAJORITY_COUNT = 9
MINORITY_COUNT = 8
NEUTRAL_COUNT = 7
ASSASSIN_COUNT = 1


class Team(str, Enum):
    BLUE = "blue"
    RED = "red"

    @property
    def opponent(self) -> "Team":
        return Team.RED if self is Team.BLUE else Team.BLUE


class CardType(str, Enum):
    BLUE = "blue"
    RED = "red"
    NEUTRAL = "neutral"
    ASSASSIN = "assassin"

    @classmethod
    def for_team(cls, team: Team) -> "CardType":
        return cls.BLUE if team is Team.BLUE else cls.RED


@dataclass
class Game:
    """A live game as kept by the store. Never handed out without `snapshot()`."""

    id: str
    words: List[str]
    types: List[CardType]
    starting_player: Team
    created_at: int  # epoch ms
    revealed: List[bool] = field(default_factory=lambda: [False] * BOARD_SIZE)
    ai_team: Optional[Team] = None

    def snapshot(self) -> "Game":
        return Game(
            id=self.id,
            words=list(self.words),
            types=list(self.types),
            starting_player=self.starting_player,
            created_at=self.created_at,
            revealed=list(self.revealed),
            ai_team=self.ai_team,
        )


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ai_team: Optional[Team] = Field(default=None, alias="aiTeam")


class RevealRequest(BaseModel):
    index: int


class HintRequest(BaseModel):
    """`words`/`types`/`revealed` are accepted from older clients and ignored: the stored board wins."""

    team: str
    words: Optional[List[str]] = None
    types: Optional[List[str]] = None
    revealed: Optional[List[bool]] = None


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    words: List[str]
    types: List[CardType]
    revealed: List[bool]
    starting_player: Team = Field(alias="startingPlayer")
    created_at: int = Field(alias="createdAt")
    ai_team: Optional[Team] = Field(default=None, alias="aiTeam")


class OperativeViewResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    words: List[str]
    # None until the card is revealed
    types: List[Optional[CardType]]
    revealed: List[bool]
    starting_player: Team = Field(alias="startingPlayer")


class SpymasterViewResponse(BaseModel):
    id: str
    words: List[str]
    types: List[CardType]
    revealed: List[bool]
    team: Team
