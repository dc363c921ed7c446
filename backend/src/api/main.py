"""FastAPI application main entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from .middleware import register_error_handlers
from .routes import bookmarks, system
from .routes.system import install_memory_handler
from ..services.config import get_config
from ..services.seed import init_and_seed

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler to run startup tasks."""
    config = get_config()
    logger.info("Running startup: initializing bookmark database...")
    init_and_seed(seed_demo=config.seed_demo_bookmarks)
    logger.info("Startup complete: bookmark database ready")
    yield


config = get_config()
install_memory_handler(config.log_level)

app = FastAPI(
    title="Dashboard API",
    description="Personal dashboard backend: bookmark tree with folders, links and ordering",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(bookmarks.router)
app.include_router(system.router, tags=["system"])


__all__ = ["app"]
