"""
Service: hint_advisor.py
Role:
- Ask the text generator for a spymaster clue (one word + count) and refuse any
  answer that is malformed or unsafe. Advisory only: the board is never touched.

Validation (`parse_hint`):
- `clue` (or the legacy `hint` key): non-empty single word, not equal to any
  board word (revealed or not, case-insensitive).
- `count`: non-negative integer, at most the number of own unrevealed words.
- `targets` (optional): list of own unrevealed words.
Any failure raises `HintError`. There is no fallback hint.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from codenames.models.game import CardType, Game, Team
from codenames.models.hint import Hint, HintContext
from codenames.services.errors import HintError
from codenames.services.llm_engine import GENERATOR, LLMServiceError, TextGenerator

logger = logging.getLogger(__name__)


def build_hint_context(
    words: Sequence[str],
    types: Sequence[CardType],
    revealed: Sequence[bool],
    team: Team,
) -> HintContext:
    """Partition the unrevealed cards from `team`'s point of view."""
    own = CardType.for_team(team)
    opponent = CardType.for_team(team.opponent)
    hidden = [(w, t) for w, t, shown in zip(words, types, revealed) if not shown]
    return HintContext(
        team=team,
        my_words=[w for w, t in hidden if t == own],
        opponent_words=[w for w, t in hidden if t == opponent],
        neutral_words=[w for w, t in hidden if t == CardType.NEUTRAL],
        assassin=next((w for w, t in hidden if t == CardType.ASSASSIN), None),
        board_words=list(words),
    )


def _parse_count(value: Any) -> int:
    # bool is an int subclass: reject it explicitly
    if isinstance(value, bool):
        raise HintError("Hint count must be an integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise HintError("Hint count must be an integer")
    if value < 0:
        raise HintError("Hint count must not be negative")
    return value


def parse_hint(payload: Any, context: HintContext) -> Hint:
    if not isinstance(payload, dict):
        raise HintError("Hint payload must be an object")

    clue = payload.get("clue", payload.get("hint"))
    if not isinstance(clue, str) or not clue.strip():
        raise HintError("Hint clue must be a non-empty string")
    clue = clue.strip()
    if len(clue.split()) != 1:
        raise HintError("Hint clue must be a single word")

    forbidden = {w.lower() for w in context.board_words}
    forbidden.update(w.lower() for w in context.my_words + context.opponent_words + context.neutral_words)
    if context.assassin:
        forbidden.add(context.assassin.lower())
    if clue.lower() in forbidden:
        raise HintError(f"Hint clue {clue!r} is a board word")

    count = _parse_count(payload.get("count"))
    if count > len(context.my_words):
        raise HintError("Hint count exceeds the team's remaining words")

    targets: Optional[List[str]] = None
    raw_targets = payload.get("targets")
    if raw_targets is not None:
        if not isinstance(raw_targets, list) or not all(isinstance(t, str) for t in raw_targets):
            raise HintError("Hint targets must be a list of words")
        mine = {w.lower() for w in context.my_words}
        targets = [t.strip().lower() for t in raw_targets]
        if any(t not in mine for t in targets):
            raise HintError("Hint targets must be the team's own unrevealed words")

    return Hint(clue=clue, count=count, targets=targets)


class HintAdvisor:
    def __init__(self, generator: TextGenerator) -> None:
        self.generator = generator

    def suggest_hint(self, game: Game, team: Team, revealed: Optional[Sequence[bool]] = None) -> Hint:
        """
        Clue for `team` on `game`. `revealed` defaults to the stored reveal state.
        """
        context = build_hint_context(game.words, game.types, revealed if revealed is not None else game.revealed, team)
        log_extra: Dict[str, Any] = {"game_id": game.id, "operation": "hint", "team": team.value}

        try:
            payload = self.generator.generate_hint(context)
        except LLMServiceError as exc:
            logger.error("Hint generation failed", extra=log_extra)
            raise HintError("Hint generator unavailable") from exc

        try:
            hint = parse_hint(payload, context)
        except HintError as exc:
            logger.warning("Hint rejected: %s", exc, extra=log_extra)
            raise

        logger.info("Hint generated", extra=log_extra)
        return hint


HINT_ADVISOR = HintAdvisor(GENERATOR)
