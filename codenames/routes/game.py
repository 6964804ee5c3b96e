"""
Module routes/game.py
Role:
- Game lifecycle endpoints: creation, host board, operative and spymaster
  views, reveal, AI hint.

Integrations:
- GameStore (via `get_store`): authoritative board and reveal state.
- BoardGenerator / HintAdvisor: the only endpoints calling the text generator.
  They are plain `def` routes, so FastAPI runs them in its thread pool and the
  blocking LLM call never holds the store lock.

Errors are raised as domain exceptions and translated by the handlers
registered in `codenames.main` (404 not found, 400 validation, 500 generation).
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from codenames.deps.services import get_board_generator, get_hint_advisor, get_store
from codenames.models.game import (
    GameResponse,
    HintRequest,
    NewGameRequest,
    OperativeViewResponse,
    RevealRequest,
    SpymasterViewResponse,
)
from codenames.models.hint import Hint
from codenames.services.board_generator import BoardGenerator
from codenames.services.game_store import GameStore
from codenames.services.hint_advisor import HintAdvisor
from codenames.services.view_projector import (
    full_view,
    operative_view,
    parse_team,
    spymaster_view,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/game", tags=["game"])


@router.post("/new", response_model=GameResponse, status_code=201)
def new_game(
    payload: Optional[NewGameRequest] = None,
    store: GameStore = Depends(get_store),
    boards: BoardGenerator = Depends(get_board_generator),
):
    """
    Create a game: words from the generator first, then a single store insert.
    Returns the full record (the creator hosts the board).
    """
    board = boards.generate()
    game = store.create(
        board.words,
        board.types,
        board.starting_player,
        ai_team=payload.ai_team if payload else None,
    )
    return full_view(game)


@router.get("/{game_id}", response_model=GameResponse)
async def get_game(game_id: str, store: GameStore = Depends(get_store)):
    """Full record for the host board."""
    return full_view(store.get(game_id))


@router.get("/{game_id}/operative", response_model=OperativeViewResponse)
async def get_operative_view(game_id: str, store: GameStore = Depends(get_store)):
    """Operative board: labels only for revealed cards."""
    return operative_view(store.get(game_id))


@router.get("/{game_id}/spymaster/{team}", response_model=SpymasterViewResponse)
async def get_spymaster_view(game_id: str, team: str, store: GameStore = Depends(get_store)):
    """Spymaster board for `team` ("blue" or "red"); opponent cards are shown as neutral."""
    side = parse_team(team)
    return spymaster_view(store.get(game_id), side)


@router.post("/{game_id}/reveal", response_model=GameResponse)
async def reveal_card(game_id: str, payload: RevealRequest, store: GameStore = Depends(get_store)):
    """Reveal one card (idempotent)."""
    return full_view(store.reveal(game_id, payload.index))


@router.post("/{game_id}/hint", response_model=Hint, response_model_exclude_none=True)
def get_hint(
    game_id: str,
    payload: HintRequest,
    store: GameStore = Depends(get_store),
    advisor: HintAdvisor = Depends(get_hint_advisor),
):
    """
    AI clue for a spymaster. Board and reveal state come from the store; the
    arrays optionally sent by the client are ignored.
    """
    side = parse_team(payload.team)
    game = store.get(game_id)
    if payload.revealed is not None and list(payload.revealed) != game.revealed:
        logger.debug("Client reveal state differs from store", extra={"game_id": game_id})
    return advisor.suggest_hint(game, side)
