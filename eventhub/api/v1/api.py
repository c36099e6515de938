# eventhub/api/v1/api.py

from fastapi import APIRouter

from eventhub.api.v1.endpoints import auth, chat, events, registrations

# This is the main router for the API.
# It includes all the specific endpoint routers.
api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(events.router)
api_router.include_router(registrations.router)
api_router.include_router(chat.router)


@api_router.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy"}
