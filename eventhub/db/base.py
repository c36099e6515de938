# eventhub/db/base.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from eventhub.db.session_store import SessionStore
from eventhub.schemas.chat import ChatMessage, ChatMessageCreate
from eventhub.schemas.event import Event, EventCreate, EventFilters, EventUpdate
from eventhub.schemas.registration import EventRegistration
from eventhub.schemas.user import User, UserCreate
from eventhub.utils.date_buckets import date_predicate

EventPatch = Union[EventUpdate, Dict[str, Any]]


def matches_search(event: Event, search: str) -> bool:
    """Case-insensitive substring match on title, description or location."""
    needle = search.lower()
    return (
        needle in event.title.lower()
        or needle in event.description.lower()
        or needle in event.location.lower()
    )


def filter_events(
    events: Iterable[Event], filters: Optional[EventFilters], now: datetime
) -> List[Event]:
    """
    Applies every set filter dimension (AND across dimensions).
    Order of ``events`` is preserved.
    """
    result = list(events)
    if filters is None:
        return result

    if filters.category:
        result = [e for e in result if e.category == filters.category]
    if filters.search:
        result = [e for e in result if matches_search(e, filters.search)]
    if filters.date:
        predicate = date_predicate(filters.date, now)
        if predicate is not None:
            result = [e for e in result if predicate(e.start_date)]
    if filters.organizer_id is not None:
        result = [e for e in result if e.organizer_id == filters.organizer_id]
    return result


def patch_fields(patch: EventPatch) -> Dict[str, Any]:
    """Fields explicitly provided in ``patch``, keyed by attribute name."""
    if isinstance(patch, EventUpdate):
        return patch.model_dump(exclude_unset=True)
    return EventUpdate.model_validate(patch).model_dump(exclude_unset=True)


class EventStore(ABC):
    """
    Storage interface the route layer depends on.

    Lookups signal absence with ``None``, ``False`` or an empty list; they never
    raise for a missing record. Uniqueness of usernames/emails and of
    (event, user) registrations is the caller's job, except through
    ``register_if_open`` which checks and inserts in one step.
    """

    session_store: SessionStore
    clock: Callable[[], datetime]

    # --- Users ---

    @abstractmethod
    def create_user(self, data: UserCreate) -> User:
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_users(self) -> List[User]:
        pass

    # --- Events ---

    @abstractmethod
    def create_event(self, data: EventCreate) -> Event:
        pass

    @abstractmethod
    def get_event(self, event_id: int) -> Optional[Event]:
        pass

    @abstractmethod
    def get_events(self, filters: Optional[EventFilters] = None) -> List[Event]:
        """Events matching ``filters``, in insertion order."""
        pass

    @abstractmethod
    def update_event(self, event_id: int, patch: EventPatch) -> Optional[Event]:
        """Shallow-merges the provided fields; fields not sent are kept."""
        pass

    @abstractmethod
    def delete_event(self, event_id: int) -> bool:
        """Registrations of the deleted event are left in place."""
        pass

    # --- Registrations ---

    @abstractmethod
    def register_for_event(self, event_id: int, user_id: int) -> EventRegistration:
        """Inserts unconditionally; capacity and duplicates are not checked."""
        pass

    @abstractmethod
    def register_if_open(
        self, event_id: int, user_id: int, capacity: int
    ) -> EventRegistration:
        """
        Checks for a duplicate and for a free seat, then inserts.

        Raises ``AlreadyRegisteredError`` or ``EventFullError``.
        """
        pass

    @abstractmethod
    def get_event_registrations(self, event_id: int) -> List[EventRegistration]:
        pass

    @abstractmethod
    def get_user_registrations(self, user_id: int) -> List[EventRegistration]:
        pass

    @abstractmethod
    def count_event_registrations(self, event_id: int) -> int:
        pass

    @abstractmethod
    def cancel_registration(self, event_id: int, user_id: int) -> bool:
        pass

    @abstractmethod
    def is_user_registered(self, event_id: int, user_id: int) -> bool:
        pass

    # --- Chat ---

    @abstractmethod
    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessage:
        pass

    @abstractmethod
    def get_user_chat_history(self, user_id: int) -> List[ChatMessage]:
        """Oldest first."""
        pass

    def close(self) -> None:
        """Releases backend resources. Nothing to do by default."""
        return None
