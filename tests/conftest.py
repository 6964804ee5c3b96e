from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

import pytest

from codenames.models.game import CardType, Team
from codenames.models.hint import HintContext, WordRequest
from codenames.services.board_generator import BoardGenerator
from codenames.services.game_store import GameStore
from codenames.services.hint_advisor import HintAdvisor

WORDS = [
    "apple", "bridge", "castle", "dragon", "engine",
    "forest", "garden", "harbor", "island", "jungle",
    "kettle", "ladder", "magnet", "needle", "orange",
    "pirate", "quartz", "rocket", "saddle", "temple",
    "umbrella", "violin", "wallet", "yogurt", "zipper",
]

# blue=9 / red=8 / neutral=7 / assassin=1, blue starts
BLUE_FIRST_TYPES = (
    [CardType.BLUE] * 9
    + [CardType.RED] * 8
    + [CardType.NEUTRAL] * 7
    + [CardType.ASSASSIN]
)


class FakeGenerator:
    """In-memory `TextGenerator`: returns canned answers and records the requests."""

    def __init__(self, words: Optional[List[Any]] = None, hint: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.words = list(WORDS) if words is None else words
        self.hint = hint if hint is not None else {"clue": "fruit", "count": 1}
        self.error = error
        self.word_requests: List[WordRequest] = []
        self.hint_contexts: List[HintContext] = []

    def generate_words(self, request: WordRequest) -> List[Any]:
        self.word_requests.append(request)
        if self.error:
            raise self.error
        return self.words

    def generate_hint(self, context: HintContext) -> Dict[str, Any]:
        self.hint_contexts.append(context)
        if self.error:
            raise self.error
        return self.hint


class FakeClock:
    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> GameStore:
    ids = iter(f"g_test{i}" for i in range(1000))
    return GameStore(ttl_ms=6 * 60 * 60 * 1000, clock=clock, id_factory=lambda: next(ids))


@pytest.fixture
def board_generator(fake_generator) -> BoardGenerator:
    return BoardGenerator(fake_generator, rng=random.Random(42))


@pytest.fixture
def hint_advisor(fake_generator) -> HintAdvisor:
    return HintAdvisor(fake_generator)


@pytest.fixture
def blue_game(store):
    return store.create(WORDS, BLUE_FIRST_TYPES, Team.BLUE)
