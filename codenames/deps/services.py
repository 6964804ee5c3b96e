"""
FastAPI dependencies for the game services
==========================================

Routes never import the module-level singletons directly: they receive them
through these providers so tests can swap any of them with
`app.dependency_overrides[get_store] = lambda: my_store`.
"""
from codenames.services.account_store import ACCOUNTS, AccountStore
from codenames.services.board_generator import BOARD_GENERATOR, BoardGenerator
from codenames.services.game_store import STORE, GameStore
from codenames.services.hint_advisor import HINT_ADVISOR, HintAdvisor


def get_store() -> GameStore:
    return STORE


def get_board_generator() -> BoardGenerator:
    return BOARD_GENERATOR


def get_hint_advisor() -> HintAdvisor:
    return HINT_ADVISOR


def get_accounts() -> AccountStore:
    return ACCOUNTS
