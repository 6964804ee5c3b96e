"""
Module routes/health.py
Role:
- Health endpoints (service OK + live game count, LLM check).

Integrations:
- settings: service name + LLM parameters.
- GameStore.count(): the store has no eviction beyond TTL, so its size is the
  figure to watch under sustained load.
- BoardGenerator: word-generation check (latency, sample).
"""
import time

from fastapi import APIRouter, Depends

from codenames.config.settings import settings
from codenames.deps.services import get_board_generator, get_store
from codenames.services.board_generator import BoardGenerator
from codenames.services.errors import GenerationError
from codenames.services.game_store import GameStore

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(store: GameStore = Depends(get_store)):
    return {"ok": True, "service": settings.APP_NAME, "games": store.count()}


@router.get("/llm")
def health_llm(boards: BoardGenerator = Depends(get_board_generator)):
    """
    Check the text generator by asking for a full board.
    Never raises: failures are reported with `ok: False`.
    """
    t0 = time.perf_counter()
    try:
        board = boards.generate()
        return {
            "ok": True,
            "provider": settings.LLM_PROVIDER,
            "model": settings.LLM_WORDS_MODEL,
            "latency_s": round(time.perf_counter() - t0, 3),
            "sample": board.words[:5],
        }
    except GenerationError as e:
        return {
            "ok": False,
            "provider": settings.LLM_PROVIDER,
            "model": settings.LLM_WORDS_MODEL,
            "latency_s": round(time.perf_counter() - t0, 3),
            "error": str(e),
        }
