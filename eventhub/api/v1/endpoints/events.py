# eventhub/api/v1/endpoints/events.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import ValidationError

from eventhub.api import deps
from eventhub.core.exceptions import EventNotFoundError
from eventhub.db.base import EventStore
from eventhub.schemas.event import (
    Event,
    EventCreate,
    EventFilters,
    EventIn,
    EventUpdate,
)
from eventhub.schemas.token import TokenPayload
from eventhub.schemas.user import UserRole

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Events"])


def get_event_or_404(store: EventStore, event_id: int) -> Event:
    event = store.get_event(event_id)
    if not event:
        raise EventNotFoundError(event_id)
    return event


def get_managed_event(store: EventStore, event_id: int, user: TokenPayload, action: str) -> Event:
    event = get_event_or_404(store, event_id)
    if not deps.can_manage_event(user, event.organizer_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You don't have permission to {action} this event",
        )
    return event


@router.get("/events", response_model=List[Event])
def list_events(
    category: Optional[str] = Query(None, description="Category, or 'all'"),
    search: Optional[str] = Query(None, description="Matches title, description or location"),
    date: Optional[str] = Query(None, description="today, tomorrow, this-week, ..., or 'all'"),
    organizer_id: Optional[int] = Query(None, alias="organizerId"),
    store: EventStore = Depends(deps.get_store),
):
    """Lists events, optionally filtered. Results are in creation order."""
    filters = EventFilters(
        category=category if category and category != "all" else None,
        search=search or None,
        date=date if date and date != "all" else None,
        organizer_id=organizer_id,
    )
    logger.debug(f"Event filters: {filters.model_dump(exclude_none=True)}")
    return store.get_events(filters)


@router.get("/events/{event_id}", response_model=Event)
def get_event(event_id: int, store: EventStore = Depends(deps.get_store)):
    return get_event_or_404(store, event_id)


@router.post("/events", response_model=Event, status_code=status.HTTP_201_CREATED)
def create_event(
    event_in: EventIn,
    store: EventStore = Depends(deps.get_store),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Creates an event owned by the current user (organizers and admins only)."""
    if current_user.role not in (UserRole.admin, UserRole.organizer):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only organizers can create events",
        )
    event = store.create_event(
        EventCreate(**event_in.model_dump(), organizer_id=current_user.user_id)
    )
    return event


@router.put("/events/{event_id}", response_model=Event)
def update_event(
    event_id: int,
    event_in: EventUpdate,
    store: EventStore = Depends(deps.get_store),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Partially updates an event. Fields that are not sent are left unchanged."""
    event = get_managed_event(store, event_id, current_user, "update")

    changes = event_in.model_dump(exclude_unset=True)
    try:
        # the merged record must still be a valid event
        EventIn.model_validate({**event.model_dump(), **changes})
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="; ".join(err["msg"] for err in e.errors()),
        )

    updated = store.update_event(event_id, event_in)
    if updated is None:
        # deleted between the lookup and the update
        raise EventNotFoundError(event_id)
    return updated


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: int,
    store: EventStore = Depends(deps.get_store),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    get_managed_event(store, event_id, current_user, "delete")
    store.delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/user/organized-events", response_model=List[Event])
def list_organized_events(
    store: EventStore = Depends(deps.get_store),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return store.get_events(EventFilters(organizer_id=current_user.user_id))
