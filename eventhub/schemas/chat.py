# eventhub/schemas/chat.py
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import APIModel


class ChatMessageCreate(APIModel):
    user_id: Optional[int] = None
    message: str
    response: Optional[str] = None


class ChatMessage(ChatMessageCreate):
    id: int
    created_at: datetime


class ChatRequest(APIModel):
    message: str = Field(..., max_length=4000)

    @field_validator("message")
    @classmethod
    def message_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message is required")
        return v


class ChatResponse(APIModel):
    message: str
    response: str
