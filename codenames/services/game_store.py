"""
Game store registry
===================

Keyed, time-limited in-memory registry of games. Only `create`, `get`,
`reveal`, `sweep_expired` and `count` are exposed, so no caller can bypass the
TTL rules.

Rules:
- A game is logically expired once `now - created_at >= ttl`. Reads and reveals
  check the TTL themselves: the sweep only compacts memory.
- Unknown and expired ids both raise `GameNotFound` (no hint about TTL timing).
- Every access goes through a single `RLock`; callers get snapshots, never the
  stored object.
- Capacity is unbounded. `count()` and the size warning in `sweep_expired` are
  the monitoring hooks for sustained load.

`GameSweeper` runs `sweep_expired` periodically on the event loop (in a worker
thread) and survives individual failures.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from threading import RLock
from typing import Callable, Dict, Optional, Sequence
from uuid import uuid4

import anyio

from codenames.config.settings import settings
from codenames.models.game import (
    ASSASSIN_COUNT,
    BOARD_SIZE,
    MAJORITY_COUNT,
    MINORITY_COUNT,
    NEUTRAL_COUNT,
    CardType,
    Game,
    Team,
)
from codenames.services.errors import GameNotFound, ValidationError

logger = logging.getLogger(__name__)


def new_game_id() -> str:
    return f"g_{uuid4().hex}"


def now_ms() -> int:
    return int(time.time() * 1000)


def check_board(words: Sequence[str], types: Sequence[CardType], starting_player: Team) -> None:
    """Raise `ValidationError` unless the board satisfies the size and composition invariants."""
    if len(words) != BOARD_SIZE or len(types) != BOARD_SIZE:
        raise ValidationError(f"A board needs exactly {BOARD_SIZE} words and {BOARD_SIZE} types")
    if len(set(words)) != BOARD_SIZE:
        raise ValidationError("Board words must be distinct")
    if any(not isinstance(t, CardType) for t in types):
        raise ValidationError("Unknown card type on board")

    counts = Counter(types)
    majority = CardType.for_team(starting_player)
    minority = CardType.for_team(starting_player.opponent)
    expected = {
        majority: MAJORITY_COUNT,
        minority: MINORITY_COUNT,
        CardType.NEUTRAL: NEUTRAL_COUNT,
        CardType.ASSASSIN: ASSASSIN_COUNT,
    }
    if dict(counts) != expected:
        raise ValidationError(f"Invalid board composition for starting player {starting_player.value}")


class GameStore:
    def __init__(
        self,
        *,
        ttl_ms: int = settings.GAME_TTL_SECONDS * 1000,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_game_id,
        warn_size: int = settings.GAME_STORE_WARN_SIZE,
    ) -> None:
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._id_factory = id_factory
        self._warn_size = warn_size
        self._games: Dict[str, Game] = {}
        self._lock = RLock()

    def _is_expired(self, game: Game, now: int) -> bool:
        return now - game.created_at >= self.ttl_ms

    def _live(self, game_id: str) -> Game:
        """Stored game for `game_id`; caller holds the lock."""
        game = self._games.get(game_id)
        if game is None or self._is_expired(game, self._clock()):
            raise GameNotFound(game_id)
        return game

    def create(
        self,
        words: Sequence[str],
        types: Sequence[CardType],
        starting_player: Team,
        ai_team: Optional[Team] = None,
    ) -> Game:
        check_board(words, types, starting_player)
        with self._lock:
            game = Game(
                id=self._id_factory(),
                words=list(words),
                types=list(types),
                starting_player=starting_player,
                created_at=self._clock(),
                ai_team=ai_team,
            )
            self._games[game.id] = game
            logger.info("Game created", extra={"game_id": game.id, "operation": "create"})
            return game.snapshot()

    def get(self, game_id: str) -> Game:
        with self._lock:
            return self._live(game_id).snapshot()

    def reveal(self, game_id: str, index: int) -> Game:
        """Flip `revealed[index]` to True. Revealing twice is a no-op."""
        with self._lock:
            game = self._live(game_id)
            if not 0 <= index < len(game.revealed):
                raise ValidationError(f"Card index {index} out of range")
            if not game.revealed[index]:
                game.revealed[index] = True
                logger.info(
                    "Card revealed",
                    extra={"game_id": game_id, "operation": "reveal", "index": index},
                )
            return game.snapshot()

    def sweep_expired(self) -> int:
        """Physically drop every expired game. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired = [gid for gid, game in self._games.items() if self._is_expired(game, now)]
            for gid in expired:
                self._games.pop(gid, None)
            remaining = len(self._games)

        if expired:
            logger.info("Expired games swept", extra={"removed": len(expired), "remaining": remaining})
        if remaining > self._warn_size:
            logger.warning(
                "Game store above warning size",
                extra={"remaining": remaining, "warn_size": self._warn_size},
            )
        return len(expired)

    def count(self) -> int:
        with self._lock:
            return len(self._games)


class GameSweeper:
    """Recurring background sweep of a `GameStore`."""

    def __init__(self, store: GameStore, interval_s: float = settings.SWEEP_INTERVAL_SECONDS) -> None:
        self.store = store
        self.interval_s = interval_s
        self._task: Optional[asyncio.Task] = None

    async def run_once(self) -> Optional[int]:
        try:
            return await anyio.to_thread.run_sync(self.store.sweep_expired)
        except Exception:
            logger.exception("Game sweep failed", extra={"operation": "sweep"})
            return None

    def start(self) -> None:
        if self._task and not self._task.done():
            return

        async def _runner():
            while True:
                await asyncio.sleep(self.interval_s)
                await self.run_once()

        self._task = asyncio.create_task(_runner())

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None


STORE = GameStore()
SWEEPER = GameSweeper(STORE)
