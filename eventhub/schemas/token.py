# eventhub/schemas/token.py
from pydantic import BaseModel

from .common import APIModel
from .user import UserPublic, UserRole


class TokenPayload(BaseModel):
    sub: str  # "sub" is the standard claim for subject (user ID)
    role: UserRole
    sid: str  # server-side session id, must be live in the SessionStore
    exp: int

    model_config = {"from_attributes": True}

    @property
    def user_id(self) -> int:
        return int(self.sub)


class Token(APIModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic
