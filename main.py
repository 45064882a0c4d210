"""
Inflecto Readiness service

Serves the persona-based AI readiness quiz: the assessment WebSocket at
/ws/ai-readiness, the question preview and metadata endpoints under /api,
and a health check at /health. The question catalog is loaded before the
first connection is accepted, so a broken catalog stops the process at boot.

Run locally with `python main.py`.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import cleanup, get_question_bank, get_state_machine
from src.api.router import api_router, ws_router
from src.config.settings import Settings, get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the catalog before serving and release singletons on shutdown."""
    bank = get_question_bank()
    get_state_machine()
    logger.info(
        f"{app.title} {app.version} ready, personas: {', '.join(bank.personas())}"
    )

    yield

    await cleanup()
    logger.info(f"{app.title} stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Assemble the application from settings."""
    settings = settings or get_settings()

    application = FastAPI(
        title=settings.app_name,
        description="AI readiness assessment backend",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router, prefix="/api")
    application.include_router(ws_router)

    @application.get("/health")
    async def health_check():
        return {"status": "healthy", "version": settings.app_version}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_settings()
    uvicorn.run("main:app", host=config.host, port=config.port, reload=config.debug)
