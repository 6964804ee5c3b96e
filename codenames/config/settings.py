"""
Application settings
====================

Role
----
- Centralise the service parameters (name, host/port, LLM, TTLs, paths...).
- Defaults are suitable for a local development environment.
- Every value can be overridden through the environment or a `.env` file.

Integrations
------------
- `pydantic-settings` loads the environment variables and `.env` automatically.
- Services and routers import `from codenames.config.settings import settings`.

Notes
-----
- *Never commit* a real `LLM_API_KEY`. Use `.env` (the usual `OPENAI_API_KEY`
  variable is accepted as well).
- `LLM_PROVIDER` selects the payload/response shape: `openai` for any
  chat-completions compatible endpoint, `ollama` for a local `/api/chat`.
- `DATA_DIR` defaults to `<repo>/codenames/data` (account file only, games are
  kept in memory).

Example `.env`
--------------
PORT=8080
ENV="production"
LLM_PROVIDER="ollama"
LLM_ENDPOINT="http://localhost:11434/api/chat"
LLM_WORDS_MODEL="llama3.1"
LLM_HINT_MODEL="llama3.1"
GAME_TTL_SECONDS=3600
"""
import os
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Service name (shown by /health)
    APP_NAME: str = "Codenames Backend"
    # Network bind (uvicorn)
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # "production" serves the prebuilt front from STATIC_DIR
    ENV: str = "development"
    STATIC_DIR: str = "dist/client"
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]
    LOG_LEVEL: str = "INFO"

    # Text generator (OpenAI compatible by default)
    LLM_PROVIDER: str = "openai"
    LLM_ENDPOINT: str = "https://api.openai.com/v1/chat/completions"
    LLM_API_KEY: str = Field(default="", validation_alias=AliasChoices("LLM_API_KEY", "OPENAI_API_KEY"))
    LLM_WORDS_MODEL: str = "gpt-4o-mini"
    LLM_HINT_MODEL: str = "gpt-4o"
    LLM_WORDS_TEMPERATURE: float = 1.5
    LLM_HINT_TEMPERATURE: float = 0.7
    LLM_CONNECT_TIMEOUT: float = 5.0
    LLM_READ_TIMEOUT: float = 45.0

    # Game store
    GAME_TTL_SECONDS: int = 6 * 60 * 60
    SWEEP_INTERVAL_SECONDS: int = 5 * 60
    GAME_STORE_WARN_SIZE: int = 10_000

    # Persisted files (accounts)
    DATA_DIR: str = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENV.strip().lower() == "production"


# Single importable instance: `settings`
settings = Settings()
