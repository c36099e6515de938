# eventhub/db/memory.py
import itertools
import logging
import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional

from eventhub.core.exceptions import AlreadyRegisteredError, EventFullError
from eventhub.db.base import EventPatch, EventStore, filter_events, patch_fields
from eventhub.db.session_store import SessionStore
from eventhub.schemas.chat import ChatMessage, ChatMessageCreate
from eventhub.schemas.event import Event, EventCreate, EventFilters
from eventhub.schemas.registration import EventRegistration
from eventhub.schemas.user import User, UserCreate

logger = logging.getLogger(__name__)


class MemoryEventStore(EventStore):
    """
    Keeps the four collections in dicts keyed by id, for the lifetime of the
    process. Each collection has its own id counter starting at 1.

    All reads return copies so callers can't mutate stored records.
    """

    def __init__(
        self,
        session_store: Optional[SessionStore] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.session_store = session_store or SessionStore(ttl_seconds=86400)
        self.clock = clock

        self._users: Dict[int, User] = {}
        self._events: Dict[int, Event] = {}
        self._registrations: Dict[int, EventRegistration] = {}
        self._chat_messages: Dict[int, ChatMessage] = {}

        self._user_ids = itertools.count(1)
        self._event_ids = itertools.count(1)
        self._registration_ids = itertools.count(1)
        self._chat_message_ids = itertools.count(1)

        # Guards every mutation, and the check-and-insert of register_if_open.
        self._lock = threading.RLock()

    # --- Users ---

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            user = User(
                **data.model_dump(), id=next(self._user_ids), created_at=self.clock()
            )
            self._users[user.id] = user
        return user.model_copy()

    def get_user(self, user_id: int) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        wanted = username.lower()
        for user in list(self._users.values()):
            if user.username.lower() == wanted:
                return user.model_copy()
        return None

    def get_user_by_email(self, email: str) -> Optional[User]:
        wanted = email.lower()
        for user in list(self._users.values()):
            if user.email.lower() == wanted:
                return user.model_copy()
        return None

    def get_users(self) -> List[User]:
        return [u.model_copy() for u in list(self._users.values())]

    # --- Events ---

    def create_event(self, data: EventCreate) -> Event:
        with self._lock:
            event = Event(
                **data.model_dump(), id=next(self._event_ids), created_at=self.clock()
            )
            self._events[event.id] = event
        logger.info(f"Created event {event.id} '{event.title}'")
        return event.model_copy()

    def get_event(self, event_id: int) -> Optional[Event]:
        event = self._events.get(event_id)
        return event.model_copy() if event else None

    def get_events(self, filters: Optional[EventFilters] = None) -> List[Event]:
        events = filter_events(list(self._events.values()), filters, self.clock())
        return [e.model_copy() for e in events]

    def update_event(self, event_id: int, patch: EventPatch) -> Optional[Event]:
        changes = patch_fields(patch)
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                return None
            updated = event.model_copy(update=changes)
            self._events[event_id] = updated
        return updated.model_copy()

    def delete_event(self, event_id: int) -> bool:
        with self._lock:
            deleted = self._events.pop(event_id, None) is not None
        if deleted:
            logger.info(f"Deleted event {event_id}")
        return deleted

    # --- Registrations ---

    def register_for_event(self, event_id: int, user_id: int) -> EventRegistration:
        with self._lock:
            registration = EventRegistration(
                id=next(self._registration_ids),
                event_id=event_id,
                user_id=user_id,
                registered_at=self.clock(),
            )
            self._registrations[registration.id] = registration
        return registration.model_copy()

    def register_if_open(
        self, event_id: int, user_id: int, capacity: int
    ) -> EventRegistration:
        with self._lock:
            if self.is_user_registered(event_id, user_id):
                raise AlreadyRegisteredError(event_id, user_id)
            if self.count_event_registrations(event_id) >= capacity:
                raise EventFullError(event_id, user_id, capacity)
            return self.register_for_event(event_id, user_id)

    def get_event_registrations(self, event_id: int) -> List[EventRegistration]:
        return [
            r.model_copy()
            for r in list(self._registrations.values())
            if r.event_id == event_id
        ]

    def get_user_registrations(self, user_id: int) -> List[EventRegistration]:
        return [
            r.model_copy()
            for r in list(self._registrations.values())
            if r.user_id == user_id
        ]

    def count_event_registrations(self, event_id: int) -> int:
        return sum(
            1 for r in list(self._registrations.values()) if r.event_id == event_id
        )

    def cancel_registration(self, event_id: int, user_id: int) -> bool:
        with self._lock:
            for reg_id, r in self._registrations.items():
                if r.event_id == event_id and r.user_id == user_id:
                    del self._registrations[reg_id]
                    return True
        return False

    def is_user_registered(self, event_id: int, user_id: int) -> bool:
        return any(
            r.event_id == event_id and r.user_id == user_id
            for r in list(self._registrations.values())
        )

    # --- Chat ---

    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessage:
        with self._lock:
            message = ChatMessage(
                **data.model_dump(),
                id=next(self._chat_message_ids),
                created_at=self.clock(),
            )
            self._chat_messages[message.id] = message
        return message.model_copy()

    def get_user_chat_history(self, user_id: int) -> List[ChatMessage]:
        history = [
            m for m in list(self._chat_messages.values()) if m.user_id == user_id
        ]
        # sorted() is stable, so equal timestamps keep insertion order
        return [m.model_copy() for m in sorted(history, key=lambda m: m.created_at)]
