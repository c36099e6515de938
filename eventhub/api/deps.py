# eventhub/api/deps.py
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from eventhub.core.security import decode_access_token
from eventhub.db.base import EventStore
from eventhub.schemas.token import TokenPayload
from eventhub.schemas.user import UserRole
from eventhub.services.ai_assistant import EventAssistant

# Tokens come from /api/login and are sent as `Authorization: Bearer <token>`.
# auto_error is off so a missing header is reported as 401 below.
bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> EventStore:
    """The store built in the app lifespan."""
    return request.app.state.store


def get_assistant(request: Request) -> EventAssistant:
    return request.app.state.assistant


def _resolve_token(token: str, store: EventStore) -> Optional[TokenPayload]:
    try:
        token_data = TokenPayload(**decode_access_token(token))
    except (JWTError, ValueError):
        return None
    # A logged-out session invalidates the token before it expires.
    if store.session_store.get(token_data.sid) != token_data.user_id:
        return None
    return token_data


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: EventStore = Depends(get_store),
) -> TokenPayload:
    token_data = _resolve_token(creds.credentials, store) if creds else None
    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token_data


def get_current_user_optional(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: EventStore = Depends(get_store),
) -> Optional[TokenPayload]:
    if creds is None:
        return None
    return _resolve_token(creds.credentials, store)


def can_manage_event(user: TokenPayload, organizer_id: int) -> bool:
    """Admins manage every event, organizers only their own."""
    return user.role == UserRole.admin or organizer_id == user.user_id
