# eventhub/api/v1/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from eventhub.api import deps
from eventhub.core.security import create_access_token, get_password_hash, verify_password
from eventhub.db.base import EventStore
from eventhub.schemas.token import Token, TokenPayload
from eventhub.schemas.user import UserCreate, UserLogin, UserPublic, UserRegister, UserRole

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _issue_token(store: EventStore, user) -> Token:
    session_id = store.session_store.create(user.id)
    access_token = create_access_token(
        user_id=user.id, role=user.role.value, session_id=session_id
    )
    return Token(access_token=access_token, user=UserPublic.model_validate(user))


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(user_in: UserRegister, store: EventStore = Depends(deps.get_store)):
    """
    Create an account and log it in.

    The store does not enforce uniqueness, so usernames and emails are
    checked here before the user is created.
    """
    if user_in.role == UserRole.admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin accounts cannot be self-registered",
        )
    if store.get_user_by_username(user_in.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists"
        )
    if store.get_user_by_email(user_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )

    user = store.create_user(
        UserCreate(
            username=user_in.username,
            password=get_password_hash(user_in.password),
            first_name=user_in.first_name,
            last_name=user_in.last_name,
            email=str(user_in.email),
            role=user_in.role,
        )
    )
    logger.info(f"Registered user {user.id} ({user.role.value})")
    return _issue_token(store, user)


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, store: EventStore = Depends(deps.get_store)):
    user = store.get_user_by_username(credentials.username)
    if not user or not verify_password(credentials.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    return _issue_token(store, user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    current_user: TokenPayload = Depends(deps.get_current_user),
    store: EventStore = Depends(deps.get_store),
):
    store.session_store.destroy(current_user.sid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/user", response_model=UserPublic)
def read_current_user(
    current_user: TokenPayload = Depends(deps.get_current_user),
    store: EventStore = Depends(deps.get_store),
):
    user = store.get_user(current_user.user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="User no longer exists"
        )
    return UserPublic.model_validate(user)
