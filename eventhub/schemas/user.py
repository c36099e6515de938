# eventhub/schemas/user.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field, model_validator

from .common import APIModel


class UserRole(str, Enum):
    admin = "admin"
    organizer = "organizer"
    attendee = "attendee"


class UserCreate(APIModel):
    """What the store needs to create a user. ``password`` is already hashed."""

    username: str
    password: str
    first_name: str
    last_name: str
    email: str
    role: UserRole = UserRole.attendee


class User(UserCreate):
    id: int
    created_at: datetime


class UserPublic(APIModel):
    id: int
    username: str
    first_name: str
    last_name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None


class UserRegister(APIModel):
    username: str = Field(..., min_length=1, json_schema_extra={"example": "jdoe"})
    password: str = Field(..., min_length=6)
    confirm_password: str
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    role: UserRole = UserRole.attendee

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class UserLogin(APIModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
