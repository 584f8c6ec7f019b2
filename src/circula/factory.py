"""Dependency injection factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from circula.config import Config
from circula.storage.local_store import LocalTaskRepository
from circula.storage.remote_store import RemoteTaskRepository
from circula.storage.repository import TaskRepository

logger = logging.getLogger(__name__)

# Global config instance for dependency injection
_config: Config | None = None

# Repository selected once per process
_repository: TaskRepository | None = None


def get_config() -> Config:
    """Get or create Config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def create_repository(config: Config) -> TaskRepository:
    """Build the repository for the configured backend.

    Raises:
        ValueError: If the remote backend is selected but not configured
    """
    if config.backend == "remote":
        missing = [
            name
            for name in ("remote_url", "remote_api_key", "remote_user_id")
            if not getattr(config, name)
        ]
        if missing:
            raise ValueError(f"Remote backend requires {', '.join(missing)}")
        return RemoteTaskRepository(
            base_url=config.remote_url,  # type: ignore[arg-type]
            api_key=config.remote_api_key,  # type: ignore[arg-type]
            user_id=config.remote_user_id,  # type: ignore[arg-type]
            table=config.remote_table,
            timeout=config.remote_timeout,
        )
    return LocalTaskRepository(config.get_tasks_path())


def get_repository() -> TaskRepository:
    """Get or create the TaskRepository singleton."""
    global _repository
    if _repository is None:
        config = get_config()
        _repository = create_repository(config)
        logger.info(f"[Factory] Using {config.backend} task storage")
    return _repository


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle - select storage on startup."""
    logger.info("[Lifespan] Selecting task storage...")
    get_repository()
    yield
    logger.info("[Lifespan] Shutting down")


def create_app() -> FastAPI:
    """Create FastAPI application (composition root)."""
    from circula.api.tasks import router as tasks_router

    app = FastAPI(
        title="Circula",
        description="Daily schedule manager on a 24-hour circular timeline",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(tasks_router, prefix="/api")

    return app
