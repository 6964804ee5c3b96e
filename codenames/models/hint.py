"""
Models / hint.py
- `HintContext`: everything the hint generator needs to know about the board
  for one team (partitions of the unrevealed cards + full board words).
- `Hint`: the validated answer, never persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel

from codenames.models.game import Team


@dataclass(frozen=True)
class WordRequest:
    """Constraints sent to the word generator."""

    count: int = 25
    temperature: float = 1.5


@dataclass(frozen=True)
class HintContext:
    team: Team
    my_words: List[str]
    opponent_words: List[str]
    neutral_words: List[str]
    assassin: Optional[str]
    # every word on the board, revealed or not (forbidden as clues)
    board_words: List[str] = field(default_factory=list)


class Hint(BaseModel):
    clue: str
    count: int
    targets: Optional[List[str]] = None
