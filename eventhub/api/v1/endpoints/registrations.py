# eventhub/api/v1/endpoints/registrations.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from eventhub.api import deps
from eventhub.api.v1.endpoints.events import get_event_or_404, get_managed_event
from eventhub.db.base import EventStore
from eventhub.schemas.event import Event
from eventhub.schemas.registration import EventRegistration, RegistrationStatus
from eventhub.schemas.token import TokenPayload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Registrations"])


@router.get("/events/{event_id}/registrations", response_model=List[EventRegistration])
def list_registrations(
    event_id: int,
    store: EventStore = Depends(deps.get_store),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Registrations for an event; visible to its organizer and to admins."""
    get_managed_event(store, event_id, current_user, "view registrations for")
    return store.get_event_registrations(event_id)


@router.post(
    "/events/{event_id}/register",
    response_model=EventRegistration,
    status_code=status.HTTP_201_CREATED,
)
def register_for_event(
    event_id: int,
    store: EventStore = Depends(deps.get_store),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Registers the current user for an event.

    Duplicate and capacity checks happen together with the insert, so two
    requests racing for the last seat can't both get it. Either failure is
    reported as 400 by the ``RegistrationError`` handler.
    """
    event = get_event_or_404(store, event_id)
    registration = store.register_if_open(
        event_id, current_user.user_id, capacity=event.capacity
    )
    logger.info(f"User {current_user.user_id} registered for event {event_id}")
    return registration


@router.delete("/events/{event_id}/register", status_code=status.HTTP_204_NO_CONTENT)
def cancel_registration(
    event_id: int,
    store: EventStore = Depends(deps.get_store),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    if not store.cancel_registration(event_id, current_user.user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/events/{event_id}/is-registered", response_model=RegistrationStatus)
def is_registered(
    event_id: int,
    store: EventStore = Depends(deps.get_store),
    current_user: Optional[TokenPayload] = Depends(deps.get_current_user_optional),
):
    if current_user is None:
        return RegistrationStatus(is_registered=False)
    return RegistrationStatus(
        is_registered=store.is_user_registered(event_id, current_user.user_id)
    )


@router.get("/user/events", response_model=List[Event])
def list_my_events(
    store: EventStore = Depends(deps.get_store),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Events the current user registered for. Deleted events are skipped."""
    events = []
    for registration in store.get_user_registrations(current_user.user_id):
        event = store.get_event(registration.event_id)
        if event is not None:
            events.append(event)
    return events
