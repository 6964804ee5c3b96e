"""
FastAPI application — entry point
=================================

Role
----
- Instantiate the FastAPI app, configure CORS for the front,
- Mount the routers (game, auth, health),
- Translate domain errors into `{"error": ...}` JSON responses,
- Start/stop the background game sweeper,
- In production, serve the prebuilt front from `STATIC_DIR`.

Notes
-----
- Router imports are explicit (no auto-discovery).
- The CORS middleware is added BEFORE the routers are included.
- Keep `settings.ALLOWED_ORIGINS` in line with the front URLs.
"""
import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from codenames.config.settings import settings
from codenames.routes.auth import router as auth_router
from codenames.routes.game import router as game_router
from codenames.routes.health import router as health_router
from codenames.services.errors import (
    AccountExists,
    AccountStoreError,
    GameNotFound,
    GenerationError,
    HintError,
    InvalidCredentials,
    ValidationError,
)
from codenames.services.game_store import SWEEPER

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(game_router)
app.include_router(auth_router)
app.include_router(health_router)


# ===========================
# Domain errors -> HTTP
# ===========================
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(GameNotFound)
async def on_game_not_found(request: Request, exc: GameNotFound):
    logger.info("Game not found", extra={"game_id": exc.game_id, "path": request.url.path})
    return _error(404, "not found")


@app.exception_handler(ValidationError)
async def on_validation_error(request: Request, exc: ValidationError):
    logger.info("Rejected request: %s", exc, extra={"path": request.url.path})
    return _error(400, str(exc))


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body") or "body"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


@app.exception_handler(RequestValidationError)
async def on_request_validation_error(request: Request, exc: RequestValidationError):
    details = _describe_validation(exc)
    logger.info("Malformed request: %s", details, extra={"path": request.url.path})
    return _error(422, f"Invalid request: {details}")


@app.exception_handler(GenerationError)
async def on_generation_error(request: Request, exc: GenerationError):
    logger.error("New game error: %s", exc, extra={"path": request.url.path})
    return _error(500, "Failed to create game")


@app.exception_handler(HintError)
async def on_hint_error(request: Request, exc: HintError):
    logger.error("AI hint error: %s", exc, extra={"path": request.url.path})
    return _error(500, "Failed to get AI hint")


@app.exception_handler(AccountExists)
async def on_account_exists(request: Request, exc: AccountExists):
    return _error(409, str(exc))


@app.exception_handler(InvalidCredentials)
async def on_invalid_credentials(request: Request, exc: InvalidCredentials):
    logger.info("Failed login", extra={"path": request.url.path})
    return _error(401, str(exc))


@app.exception_handler(AccountStoreError)
async def on_account_store_error(request: Request, exc: AccountStoreError):
    logger.error("Account storage error: %s", exc, extra={"path": request.url.path})
    return _error(500, "Account storage unavailable")


async def root():
    """Basic ping (no LLM dependency)."""
    return {"ok": True, "service": "codenames-backend"}


def install_front(application: FastAPI, static_dir: Optional[str]) -> None:
    """
    `/` serves the prebuilt front when `static_dir` exists (production), the ping otherwise.
    `/ping` always answers. Call after the API routers: the static mount catches everything.
    """
    application.add_api_route("/ping", root, methods=["GET"])
    if static_dir and Path(static_dir).is_dir():
        application.mount("/", StaticFiles(directory=static_dir, html=True), name="front")
    else:
        application.add_api_route("/", root, methods=["GET"])


install_front(app, settings.STATIC_DIR if settings.is_production else None)


@app.on_event("startup")
async def on_startup():
    """
    - log the LLM configuration and the registered routes,
    - start the periodic sweep of expired games.
    """
    logger.info(
        "LLM config: provider=%s words_model=%s hint_model=%s endpoint=%s",
        settings.LLM_PROVIDER,
        settings.LLM_WORDS_MODEL,
        settings.LLM_HINT_MODEL,
        settings.LLM_ENDPOINT,
    )
    for r in app.routes:
        logger.debug("Route %s %s", getattr(r, "path", "?"), sorted(getattr(r, "methods", None) or []))
    SWEEPER.start()


@app.on_event("shutdown")
async def on_shutdown():
    await SWEEPER.stop()
