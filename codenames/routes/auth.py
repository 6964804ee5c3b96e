"""
Module routes/auth.py
Role:
- Account registration and login (`{username, password}` -> `{id, username}`).
- Independent from the games: an account failure never affects a game.

Status codes (through the handlers in `codenames.main`):
- 400 missing username/password, 409 name taken, 401 bad credentials,
  500 account storage unavailable.
"""
from fastapi import APIRouter, Depends

from codenames.deps.services import get_accounts
from codenames.models.account import AccountOut, CredentialsIn
from codenames.services.account_store import AccountStore

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AccountOut)
def register(data: CredentialsIn, accounts: AccountStore = Depends(get_accounts)):
    """Create an account (bcrypt hashing runs in the thread pool)."""
    return accounts.register(data.username, data.password)


@router.post("/login", response_model=AccountOut)
def login(data: CredentialsIn, accounts: AccountStore = Depends(get_accounts)):
    return accounts.authenticate(data.username, data.password)
