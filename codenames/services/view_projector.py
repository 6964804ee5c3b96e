"""
Service: view_projector.py
Role:
- Project a stored `Game` for a given audience. Pure functions, no side effects.

Views:
- full_view(game): host board, every field.
- operative_view(game): labels only for revealed cards (None elsewhere).
- spymaster_view(game, team): own labels and the assassin kept, every other
  label collapsed to "neutral" so opponent cards cannot be told apart from true
  neutrals. Reveal state never changes the masking decision.
"""
from __future__ import annotations

from typing import List, Sequence

from codenames.models.game import (
    CardType,
    Game,
    GameResponse,
    OperativeViewResponse,
    SpymasterViewResponse,
    Team,
)
from codenames.services.errors import ValidationError


def parse_team(value: object) -> Team:
    """Accept exactly "blue" or "red" (case and surrounding spaces ignored)."""
    if isinstance(value, Team):
        return value
    normalized = str(value or "").strip().lower()
    try:
        return Team(normalized)
    except ValueError:
        raise ValidationError(f"Unknown team: {value!r}") from None


def mask_types(types: Sequence[CardType], team: Team) -> List[CardType]:
    own = CardType.for_team(team)
    return [t if t in (own, CardType.ASSASSIN) else CardType.NEUTRAL for t in types]


def full_view(game: Game) -> GameResponse:
    return GameResponse(
        id=game.id,
        words=list(game.words),
        types=list(game.types),
        revealed=list(game.revealed),
        starting_player=game.starting_player,
        created_at=game.created_at,
        ai_team=game.ai_team,
    )


def operative_view(game: Game) -> OperativeViewResponse:
    return OperativeViewResponse(
        id=game.id,
        words=list(game.words),
        types=[t if shown else None for t, shown in zip(game.types, game.revealed)],
        revealed=list(game.revealed),
        starting_player=game.starting_player,
    )


def spymaster_view(game: Game, team: Team) -> SpymasterViewResponse:
    return SpymasterViewResponse(
        id=game.id,
        words=list(game.words),
        types=mask_types(game.types, team),
        revealed=list(game.revealed),
        team=team,
    )
