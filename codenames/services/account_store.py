"""
Service: account_store.py
Role:
- Username/password accounts, persisted to `<DATA_DIR>/accounts.json`.
- Completely independent from the game store: a failure here never touches games.

Security:
- bcrypt password hashes only; the hash never leaves this module.
- Unknown user and wrong password raise the same `InvalidCredentials`.
- Usernames are stripped and compared case-insensitively.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Optional
from uuid import uuid4

import bcrypt
import orjson

from codenames.config.settings import settings
from codenames.services.errors import (
    AccountExists,
    AccountStoreError,
    InvalidCredentials,
    ValidationError,
)
from codenames.services.io_utils import read_json, write_json

logger = logging.getLogger(__name__)

ACCOUNTS_FILENAME = "accounts.json"


def hash_password(pw: str) -> str:
    return bcrypt.hashpw(pw.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def _public(account: Dict[str, Any]) -> Dict[str, str]:
    return {"id": account["id"], "username": account["username"]}


class AccountStore:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = RLock()
        self._accounts: Optional[Dict[str, Dict[str, Any]]] = None

    def _load(self) -> Dict[str, Dict[str, Any]]:
        """Accounts keyed by lowercase username; lazily read once. Caller holds the lock."""
        if self._accounts is None:
            try:
                data = read_json(self.path)
            except (OSError, orjson.JSONDecodeError) as exc:
                logger.error("Account file unreadable", exc_info=True, extra={"path": str(self.path)})
                raise AccountStoreError("Account storage unavailable") from exc
            if data is None:
                data = {}
            if not isinstance(data, dict):
                logger.error("Account file is not a JSON object", extra={"path": str(self.path)})
                raise AccountStoreError("Account storage unavailable")
            self._accounts = {str(k): v for k, v in data.items()}
        return self._accounts

    def _save(self) -> None:
        try:
            write_json(self.path, self._accounts or {})
        except OSError as exc:
            logger.error("Account file not written", exc_info=True, extra={"path": str(self.path)})
            raise AccountStoreError("Account storage unavailable") from exc

    @staticmethod
    def _clean(username: str, password: str) -> str:
        name = (username or "").strip()
        if not name:
            raise ValidationError("Missing username.")
        if not password:
            raise ValidationError("Missing password.")
        return name

    def register(self, username: str, password: str) -> Dict[str, str]:
        name = self._clean(username, password)
        key = name.lower()
        with self._lock:
            accounts = self._load()
            if key in accounts:
                raise AccountExists("Username already taken.")
            account = {
                "id": uuid4().hex,
                "username": name,
                "password_hash": hash_password(password),
                "created_at": time.time(),
            }
            accounts[key] = account
            try:
                self._save()
            except AccountStoreError:
                accounts.pop(key, None)
                raise
        logger.info("Account registered", extra={"account_id": account["id"]})
        return _public(account)

    def authenticate(self, username: str, password: str) -> Dict[str, str]:
        name = self._clean(username, password)
        with self._lock:
            account = self._load().get(name.lower())
        hashed = account.get("password_hash") if account else None
        if not (isinstance(hashed, str) and verify_password(password, hashed)):
            raise InvalidCredentials("Invalid credentials.")
        return _public(account)


ACCOUNTS = AccountStore(Path(settings.DATA_DIR) / ACCOUNTS_FILENAME)
