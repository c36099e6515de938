# eventhub/core/security.py
"""
Password hashing and access token helpers.

Passwords are stored as bcrypt hashes; the storage layer treats the value as an
opaque string.
"""

import time
from typing import Optional

from jose import jwt
from passlib.context import CryptContext

from eventhub.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # not a hash passlib recognises
        return False


def create_access_token(
    *, user_id: int, role: str, session_id: str, expires_minutes: Optional[int] = None
) -> str:
    settings = get_settings()
    now = int(time.time())
    payload = {
        "sub": str(user_id),
        "role": role,
        "sid": session_id,
        "iat": now,
        "exp": now + 60 * (expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Raises ``jose.JWTError`` on a bad signature or an expired token."""
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
