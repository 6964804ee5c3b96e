"""
Service: board_generator.py
Role:
- Build a fresh 25-card board: words from the text generator, labels drawn locally.

Behaviour:
- Words: one call to `TextGenerator.generate_words`; the answer is normalised
  (strip + lowercase) then checked: exactly 25 non-empty, pairwise distinct
  strings. Anything else fails with `GenerationError`, no retry.
- Labels: coin flip for the team holding 9 cards, pool of 9 + 8 team cards,
  7 neutral and 1 assassin, shuffled (Fisher-Yates via `Random.shuffle`).
- The starting player is the team holding 9 cards.

Implementation notes:
- `rng` is injectable; a seeded `random.Random` gives reproducible boards in tests.
  The default `SystemRandom` keeps successive boards uncorrelated.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from codenames.config.settings import settings
from codenames.models.game import (
    ASSASSIN_COUNT,
    BOARD_SIZE,
    MAJORITY_COUNT,
    MINORITY_COUNT,
    NEUTRAL_COUNT,
    CardType,
    Team,
)
from codenames.models.hint import WordRequest
from codenames.services.errors import GenerationError
from codenames.services.llm_engine import GENERATOR, LLMServiceError, TextGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Board:
    words: List[str]
    types: List[CardType]
    starting_player: Team


def validate_words(raw: Any, expected: int = BOARD_SIZE) -> List[str]:
    """Normalise the generator output and enforce count, non-emptiness and uniqueness."""
    if not isinstance(raw, list):
        raise GenerationError("Word generator did not return a list")
    if len(raw) != expected:
        raise GenerationError(f"Expected {expected} words, got {len(raw)}")

    words: List[str] = []
    for item in raw:
        if not isinstance(item, str) or not item.strip():
            raise GenerationError(f"Invalid board word: {item!r}")
        words.append(item.strip().lower())

    if len(set(words)) != expected:
        raise GenerationError("Word generator returned duplicate words")
    return words


def generate_types(rng: Optional[random.Random] = None) -> Tuple[List[CardType], Team]:
    """
    Draw the secret labels of a board.

    Returns:
        (types, starting_player) with 9/8 team cards, 7 neutral, 1 assassin.
    """
    rng = rng or random
    starting = Team.BLUE if rng.random() < 0.5 else Team.RED
    pool = (
        [CardType.for_team(starting)] * MAJORITY_COUNT
        + [CardType.for_team(starting.opponent)] * MINORITY_COUNT
        + [CardType.NEUTRAL] * NEUTRAL_COUNT
        + [CardType.ASSASSIN] * ASSASSIN_COUNT
    )
    rng.shuffle(pool)
    return pool, starting


class BoardGenerator:
    def __init__(
        self,
        generator: TextGenerator,
        *,
        rng: Optional[random.Random] = None,
        temperature: float = settings.LLM_WORDS_TEMPERATURE,
    ) -> None:
        self.generator = generator
        self.rng = rng or random.SystemRandom()
        self.temperature = temperature

    def generate(self) -> Board:
        try:
            raw = self.generator.generate_words(WordRequest(count=BOARD_SIZE, temperature=self.temperature))
        except LLMServiceError as exc:
            logger.error("Word generation failed", extra={"operation": "generate_board"})
            raise GenerationError("Word generator unavailable") from exc

        try:
            words = validate_words(raw)
        except GenerationError:
            logger.error("Word generator returned an invalid board", extra={"operation": "generate_board"})
            raise

        types, starting_player = generate_types(self.rng)
        return Board(words=words, types=types, starting_player=starting_player)


BOARD_GENERATOR = BoardGenerator(GENERATOR)
