# eventhub/schemas/registration.py
from datetime import datetime

from .common import APIModel


class EventRegistration(APIModel):
    id: int
    event_id: int
    user_id: int
    registered_at: datetime


class RegistrationStatus(APIModel):
    is_registered: bool
