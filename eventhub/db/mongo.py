# eventhub/db/mongo.py
import logging
import re
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from eventhub.core.exceptions import AlreadyRegisteredError, EventFullError
from eventhub.db.base import EventPatch, EventStore, filter_events, patch_fields
from eventhub.db.session_store import SessionStore
from eventhub.schemas.chat import ChatMessage, ChatMessageCreate
from eventhub.schemas.event import Event, EventCreate, EventFilters
from eventhub.schemas.registration import EventRegistration
from eventhub.schemas.user import User, UserCreate

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

USERS = "users"
EVENTS = "events"
REGISTRATIONS = "registrations"
CHAT_MESSAGES = "chat_messages"
COUNTERS = "counters"


def _exact_ci(value: str) -> Dict[str, Any]:
    # \z, not $: $ would also match before a trailing newline
    return {"$regex": f"^{re.escape(value)}\\z", "$options": "i"}


def _contains_ci(value: str) -> Dict[str, Any]:
    return {"$regex": re.escape(value), "$options": "i"}


def _to_doc(model: BaseModel) -> Dict[str, Any]:
    # camelCase keys like the JSON API, enums as their plain values
    doc = model.model_dump(by_alias=True)
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in doc.items()}


def _from_doc(model: Type[ModelT], doc: Optional[Dict[str, Any]]) -> Optional[ModelT]:
    if doc is None:
        return None
    doc = {k: v for k, v in doc.items() if k != "_id"}
    return model.model_validate(doc)


class MongoEventStore(EventStore):
    """
    Document-database backend with the same contract as ``MemoryEventStore``.

    Integer ids come from a ``counters`` collection incremented with ``$inc``,
    which MongoDB applies atomically per document.
    """

    def __init__(
        self,
        db: Database,
        *,
        client: Optional[MongoClient] = None,
        session_store: Optional[SessionStore] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.client = client
        self.session_store = session_store or SessionStore(ttl_seconds=86400)
        self.clock = clock

    @classmethod
    def from_uri(cls, uri: str, db_name: str, **kwargs) -> "MongoEventStore":
        client = MongoClient(uri, tz_aware=False)
        logger.info(f"Connecting to MongoDB database '{db_name}'")
        return cls(client[db_name], client=client, **kwargs)

    def ensure_indexes(self) -> None:
        for name in (USERS, EVENTS, REGISTRATIONS, CHAT_MESSAGES):
            self.db[name].create_index([("id", ASCENDING)], unique=True)
        self.db[REGISTRATIONS].create_index(
            [("eventId", ASCENDING), ("userId", ASCENDING)], unique=True
        )
        self.db[CHAT_MESSAGES].create_index(
            [("userId", ASCENDING), ("createdAt", ASCENDING)]
        )

    def close(self) -> None:
        if self.client is not None:
            self.client.close()

    def _next_id(self, collection: str) -> int:
        counter = self.db[COUNTERS].find_one_and_update(
            {"_id": collection},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

    # --- Users ---

    def create_user(self, data: UserCreate) -> User:
        user = User(**data.model_dump(), id=self._next_id(USERS), created_at=self.clock())
        self.db[USERS].insert_one(_to_doc(user))
        return user

    def get_user(self, user_id: int) -> Optional[User]:
        return _from_doc(User, self.db[USERS].find_one({"id": user_id}))

    def get_user_by_username(self, username: str) -> Optional[User]:
        return _from_doc(User, self.db[USERS].find_one({"username": _exact_ci(username)}))

    def get_user_by_email(self, email: str) -> Optional[User]:
        return _from_doc(User, self.db[USERS].find_one({"email": _exact_ci(email)}))

    def get_users(self) -> List[User]:
        return [_from_doc(User, d) for d in self.db[USERS].find().sort("id", ASCENDING)]

    # --- Events ---

    def create_event(self, data: EventCreate) -> Event:
        event = Event(**data.model_dump(), id=self._next_id(EVENTS), created_at=self.clock())
        self.db[EVENTS].insert_one(_to_doc(event))
        logger.info(f"Created event {event.id} '{event.title}'")
        return event

    def get_event(self, event_id: int) -> Optional[Event]:
        return _from_doc(Event, self.db[EVENTS].find_one({"id": event_id}))

    def get_events(self, filters: Optional[EventFilters] = None) -> List[Event]:
        query: Dict[str, Any] = {}
        if filters is not None:
            if filters.category:
                query["category"] = str(getattr(filters.category, "value", filters.category))
            if filters.organizer_id is not None:
                query["organizerId"] = filters.organizer_id
            if filters.search:
                pattern = _contains_ci(filters.search)
                query["$or"] = [
                    {"title": pattern},
                    {"description": pattern},
                    {"location": pattern},
                ]
        events = [
            _from_doc(Event, d)
            for d in self.db[EVENTS].find(query).sort("id", ASCENDING)
        ]
        # Date buckets depend on "now" and the local calendar, so they run here.
        date_only = EventFilters(date=filters.date) if filters and filters.date else None
        return filter_events(events, date_only, self.clock())

    def update_event(self, event_id: int, patch: EventPatch) -> Optional[Event]:
        changes = patch_fields(patch)
        if not changes:
            return self.get_event(event_id)
        current = self.get_event(event_id)
        if current is None:
            return None
        merged = current.model_copy(update=changes)
        doc = _to_doc(merged)
        update = {to_camel(field): doc[to_camel(field)] for field in changes}
        result = self.db[EVENTS].update_one({"id": event_id}, {"$set": update})
        if result.matched_count == 0:
            return None
        return merged

    def delete_event(self, event_id: int) -> bool:
        result = self.db[EVENTS].delete_one({"id": event_id})
        deleted = result.deleted_count == 1
        if deleted:
            logger.info(f"Deleted event {event_id}")
        return deleted

    # --- Registrations ---

    def register_for_event(self, event_id: int, user_id: int) -> EventRegistration:
        registration = EventRegistration(
            id=self._next_id(REGISTRATIONS),
            event_id=event_id,
            user_id=user_id,
            registered_at=self.clock(),
        )
        self.db[REGISTRATIONS].insert_one(_to_doc(registration))
        return registration

    def register_if_open(
        self, event_id: int, user_id: int, capacity: int
    ) -> EventRegistration:
        if self.is_user_registered(event_id, user_id):
            raise AlreadyRegisteredError(event_id, user_id)
        # Best effort: two concurrent requests can still both see a free seat.
        if self.count_event_registrations(event_id) >= capacity:
            raise EventFullError(event_id, user_id, capacity)
        try:
            return self.register_for_event(event_id, user_id)
        except DuplicateKeyError:
            raise AlreadyRegisteredError(event_id, user_id)

    def get_event_registrations(self, event_id: int) -> List[EventRegistration]:
        cursor = self.db[REGISTRATIONS].find({"eventId": event_id}).sort("id", ASCENDING)
        return [_from_doc(EventRegistration, d) for d in cursor]

    def get_user_registrations(self, user_id: int) -> List[EventRegistration]:
        cursor = self.db[REGISTRATIONS].find({"userId": user_id}).sort("id", ASCENDING)
        return [_from_doc(EventRegistration, d) for d in cursor]

    def count_event_registrations(self, event_id: int) -> int:
        return self.db[REGISTRATIONS].count_documents({"eventId": event_id})

    def cancel_registration(self, event_id: int, user_id: int) -> bool:
        result = self.db[REGISTRATIONS].delete_one({"eventId": event_id, "userId": user_id})
        return result.deleted_count == 1

    def is_user_registered(self, event_id: int, user_id: int) -> bool:
        return (
            self.db[REGISTRATIONS].find_one({"eventId": event_id, "userId": user_id})
            is not None
        )

    # --- Chat ---

    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessage:
        message = ChatMessage(
            **data.model_dump(),
            id=self._next_id(CHAT_MESSAGES),
            created_at=self.clock(),
        )
        self.db[CHAT_MESSAGES].insert_one(_to_doc(message))
        return message

    def get_user_chat_history(self, user_id: int) -> List[ChatMessage]:
        cursor = (
            self.db[CHAT_MESSAGES]
            .find({"userId": user_id})
            .sort([("createdAt", ASCENDING), ("id", ASCENDING)])
        )
        return [_from_doc(ChatMessage, d) for d in cursor]
