# eventhub/db/factory.py
import logging

from eventhub.core.config import Settings
from eventhub.db.base import EventStore
from eventhub.db.memory import MemoryEventStore
from eventhub.db.mongo import MongoEventStore
from eventhub.db.session_store import SessionStore

logger = logging.getLogger(__name__)


def build_event_store(settings: Settings) -> EventStore:
    """Builds the backend selected by ``STORAGE_BACKEND``."""
    session_store = SessionStore(
        ttl_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        check_period=settings.SESSION_CHECK_PERIOD_SECONDS,
    )

    if settings.STORAGE_BACKEND == "mongo":
        if not settings.MONGODB_URI:
            raise ValueError("MONGODB_URI is required when STORAGE_BACKEND=mongo")
        store = MongoEventStore.from_uri(
            settings.MONGODB_URI, settings.MONGODB_DB, session_store=session_store
        )
        store.ensure_indexes()
        return store

    logger.info("Using in-memory event store")
    return MemoryEventStore(session_store=session_store)
