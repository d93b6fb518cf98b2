import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from workflow_embargo.api.deps import get_context, get_settings
from workflow_embargo.api.routes import admin_workflow

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load rules and migrate the database on startup (fail-fast)."""
    settings = get_settings()
    try:
        get_context()
    except (FileNotFoundError, ValueError, RuntimeError):
        logger.critical("Startup failed (rules at %s)", settings.rules_path, exc_info=True)
        raise
    logger.info("Rules loaded from %s", settings.rules_path)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Workflow Embargo & Expiry API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(
        admin_workflow.router, prefix="/api/admin/workflow", tags=["Admin Workflow"]
    )
    return app


app = create_app()
