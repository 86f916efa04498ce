"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from openstory.config import settings
from openstory.db.redis import close_redis
from openstory.errors import ChatError
from openstory.schemas.chat import ApiError
from openstory.schemas.game import CatalogLoadFailed
from openstory.services.game_catalog import GameCatalog
from openstory.services.history_service import HistoryService
from openstory.services.llm_service import DashScopeProvider
from openstory.storage import build_record_store

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("openstory")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: the game catalog must be valid before we serve anything
    catalog = GameCatalog(settings.GAMES_FILE)
    result = catalog.load()
    if isinstance(result, CatalogLoadFailed):
        raise RuntimeError(f"Failed to load games configuration: {result.error}")

    if not settings.DASHSCOPE_API_KEY:
        logger.warning("DASHSCOPE_API_KEY is not set; chat replies will fail")

    store = build_record_store(settings)
    app.state.catalog = catalog
    app.state.history = HistoryService(store)
    app.state.provider = DashScopeProvider(settings)
    logger.info("OpenStory ready: %d games, %s storage", len(catalog.list_games()), settings.STORAGE_BACKEND)
    yield
    # Shutdown: close connections
    await store.close()
    await close_redis()


app = FastAPI(
    title="OpenStory API",
    description="Backend API for OpenStory - per-game conversations with an AI storyteller",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    session_cookie="openstory_session",
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
    https_only=not settings.DEBUG,
)


# --- Error handlers ---

@app.exception_handler(ChatError)
async def chat_error_handler(request: Request, exc: ChatError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    body = ApiError(error=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()))
    body = ApiError(
        error="Invalid request",
        details=f"{where}: {first.get('msg', 'malformed request')}" if where else None,
    )
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        body = ApiError(
            error="Not found",
            details=f"Route {request.method} {request.url.path} does not exist",
        )
    else:
        body = ApiError(error=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


# --- Routes ---
from openstory.api.routes import chat, games  # noqa: E402

app.include_router(games.router, prefix="/api/games", tags=["games"])
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])


@app.get("/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


def run() -> None:
    """Serve the app with uvicorn (``openstory`` console script)."""
    import uvicorn

    uvicorn.run("openstory.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
