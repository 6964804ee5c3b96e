"""
Domain errors shared by the services and translated to HTTP by `codenames.main`.

- GenerationError    -> 500 (word generator returned unusable data or failed)
- HintError          -> 500 (hint generator returned unusable data or failed)
- GameNotFound       -> 404 (unknown or expired id, deliberately indistinguishable)
- ValidationError    -> 400 (bad team label, out-of-range index, bad board...)
- AccountExists      -> 409
- InvalidCredentials -> 401
- AccountStoreError  -> 500
"""


class CodenamesError(Exception):
    """Base class for every error raised by the game services."""


class GenerationError(CodenamesError):
    """The word generator did not produce a valid 25-word board."""


class HintError(CodenamesError):
    """The hint generator failed or answered with an unusable hint."""


class GameNotFound(CodenamesError):
    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game {game_id!r} not found")
        self.game_id = game_id


class ValidationError(CodenamesError, ValueError):
    """Input rejected before touching any state."""


class AccountExists(CodenamesError):
    pass


class InvalidCredentials(CodenamesError):
    pass


class AccountStoreError(CodenamesError):
    """The account file could not be read or written."""
