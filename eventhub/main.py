# eventhub/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from eventhub.api.v1.api import api_router
from eventhub.core.config import Settings, get_settings
from eventhub.core.exceptions import (
    EventHubError,
    eventhub_error_handler,
    validation_error_handler,
)
from eventhub.db.base import EventStore
from eventhub.db.factory import build_event_store
from eventhub.db.seed import seed_store
from eventhub.services.ai_assistant import EventAssistant

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[EventStore] = None,
    assistant: Optional[EventAssistant] = None,
) -> FastAPI:
    """
    Builds the application.

    ``store`` and ``assistant`` can be injected (tests do); otherwise they are
    built from settings when the app starts and the store is closed on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})...")
        app.state.store = store or build_event_store(settings)
        app.state.assistant = assistant or EventAssistant(
            api_key=settings.ANTHROPIC_API_KEY,
            model=settings.ANTHROPIC_MODEL,
            max_tokens=settings.AI_MAX_TOKENS,
        )
        if settings.SEED_DEMO_DATA:
            seed_store(app.state.store, settings)
        yield
        logger.info("Shutting down...")
        app.state.store.close()

    app = FastAPI(
        title=f"{settings.PROJECT_NAME} API",
        version="1.0.0",
        description="""
        **EventHub** lets people discover hackathons, workshops, seminars,
        conferences and networking events, register for them, and ask an AI
        assistant about what's on.

        ## Authentication

        Log in via `/api/login` and send the token as `Authorization: Bearer <token>`.
        Browsing events and chatting work without a token.
        """,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(EventHubError, eventhub_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    def read_root():
        return {"status": f"{settings.PROJECT_NAME} service is running"}

    return app


configure_logging(get_settings().LOG_LEVEL)
app = create_app()
