"""
FastAPI app entrypoint.

Rooms (read views), board sessions (editing with debounced saves) and the Discord bot hook.
"""
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from guildboard.api.deps import get_registry
from guildboard.api.routes import discord, rooms, sessions
from guildboard.config import settings
from guildboard.scheduler.runner import shutdown_scheduler, start_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Runs debounced session saves
    app.state.scheduler = start_scheduler()
    logger.info("Backend ready; default room %s", settings.default_room)
    yield
    get_registry().close_all()
    shutdown_scheduler()


app = FastAPI(title="Guild Board", version="0.1.0", lifespan=lifespan)

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for the production frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_cors_extra = settings.cors_origins or os.getenv("CORS_ORIGINS", "")
if _cors_extra:
    _cors_origins.extend(o.strip() for o in _cors_extra.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
app.include_router(discord.router, prefix="/api", tags=["discord"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Guild Board API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
