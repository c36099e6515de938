# eventhub/schemas/event.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator

from eventhub.utils.date_buckets import to_local_naive

from .common import APIModel


class EventCategory(str, Enum):
    hackathon = "hackathon"
    workshop = "workshop"
    seminar = "seminar"
    conference = "conference"
    networking = "networking"


class EventIn(APIModel):
    """Request body for creating an event; the organizer comes from the token."""

    title: str = Field(..., min_length=1, json_schema_extra={"example": "Tech Innovation Hackathon"})
    description: str = Field(..., min_length=1)
    category: EventCategory
    location: str = Field(..., min_length=1, json_schema_extra={"example": "New York, NY"})
    start_date: datetime
    end_date: datetime
    image_url: Optional[str] = None
    capacity: int = Field(..., gt=0, json_schema_extra={"example": 250})

    # Clients mix "...Z" and zone-less timestamps; everything is stored as naive local time.
    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class EventCreate(EventIn):
    organizer_id: int


class Event(EventCreate):
    id: int
    created_at: datetime


# All fields are optional; only the ones sent are merged over the stored event.
class EventUpdate(APIModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[EventCategory] = None
    location: Optional[str] = Field(None, min_length=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    image_url: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(v) if v is not None else v


class EventFilters(APIModel):
    category: Optional[str] = None
    search: Optional[str] = None
    date: Optional[str] = None
    organizer_id: Optional[int] = None
