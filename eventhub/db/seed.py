# eventhub/db/seed.py
import logging
from datetime import datetime

from eventhub.core.config import Settings
from eventhub.core.security import get_password_hash
from eventhub.db.base import EventStore
from eventhub.schemas.event import EventCategory, EventCreate
from eventhub.schemas.user import UserCreate, UserRole

logger = logging.getLogger(__name__)


def get_seed_events(organizer_id: int) -> list[EventCreate]:
    """The demo events every fresh install starts with."""
    return [
        EventCreate(
            title="Tech Innovation Hackathon 2023",
            description=(
                "Join us for a 48-hour coding competition where talented developers, "
                "designers, and entrepreneurs collaborate to build innovative solutions."
            ),
            category=EventCategory.hackathon,
            location="New York, NY",
            start_date=datetime(2023, 8, 15),
            end_date=datetime(2023, 8, 16),
            image_url="https://images.unsplash.com/photo-1505373877841-8d25f7d46678",
            organizer_id=organizer_id,
            capacity=250,
        ),
        EventCreate(
            title="AI for Beginners Workshop",
            description=(
                "A hands-on workshop for beginners to learn the fundamentals of "
                "artificial intelligence and machine learning concepts."
            ),
            category=EventCategory.workshop,
            location="San Francisco, CA",
            start_date=datetime(2023, 7, 28),
            end_date=datetime(2023, 7, 28),
            image_url="https://images.unsplash.com/photo-1515187029135-18ee286d815b",
            organizer_id=organizer_id,
            capacity=120,
        ),
        EventCreate(
            title="Future of Web Development",
            description=(
                "Industry experts share insights on the latest trends and future of "
                "web development technologies and best practices."
            ),
            category=EventCategory.seminar,
            location="Chicago, IL",
            start_date=datetime(2023, 9, 5),
            end_date=datetime(2023, 9, 5),
            image_url="https://images.unsplash.com/photo-1475721027785-f74ec9c2d4cb",
            organizer_id=organizer_id,
            capacity=180,
        ),
    ]


def seed_store(store: EventStore, settings: Settings) -> None:
    """Adds the admin user and the demo events, unless the admin already exists."""
    if store.get_user_by_username(settings.ADMIN_USERNAME):
        logger.info("Store already seeded, skipping.")
        return

    admin = store.create_user(
        UserCreate(
            username=settings.ADMIN_USERNAME,
            password=get_password_hash(settings.ADMIN_PASSWORD),
            first_name="Admin",
            last_name="User",
            email=settings.ADMIN_EMAIL,
            role=UserRole.admin,
        )
    )
    for event_in in get_seed_events(admin.id):
        store.create_event(event_in)
    logger.info("Seeded admin user and demo events.")
