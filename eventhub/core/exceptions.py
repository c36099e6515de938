# eventhub/core/exceptions.py
"""
Exception hierarchy for the EventHub service.

Store-level absence is never an exception (lookups return ``None``/``False``).
These errors cover the few domain failures that do need to propagate, and the
handlers below turn them into JSON responses.
"""

import logging
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class EventHubError(Exception):
    """Base exception for all EventHub errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "EVENTHUB_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class EventNotFoundError(EventHubError):
    def __init__(self, event_id: int):
        self.event_id = event_id
        super().__init__(
            message="Event not found",
            error_code="EVENT_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"event_id": event_id},
        )


# ===========================================
# Registration Exceptions
# ===========================================


class RegistrationError(EventHubError):
    """Base exception for registration failures."""

    def __init__(self, message: str, event_id: int, user_id: int, error_code: str):
        self.event_id = event_id
        self.user_id = user_id
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"event_id": event_id, "user_id": user_id},
        )


class AlreadyRegisteredError(RegistrationError):
    def __init__(self, event_id: int, user_id: int):
        super().__init__(
            "You are already registered for this event",
            event_id=event_id,
            user_id=user_id,
            error_code="ALREADY_REGISTERED",
        )


class EventFullError(RegistrationError):
    def __init__(self, event_id: int, user_id: int, capacity: int):
        self.capacity = capacity
        super().__init__(
            "This event has reached its capacity",
            event_id=event_id,
            user_id=user_id,
            error_code="EVENT_FULL",
        )
        self.details["capacity"] = capacity


# ===========================================
# External Service Exceptions
# ===========================================


class AssistantUnavailableError(EventHubError):
    """Chat assistant is not configured (missing API key)."""

    def __init__(self):
        super().__init__(
            message="Chat assistant is disabled. Configure ANTHROPIC_API_KEY.",
            error_code="ASSISTANT_UNAVAILABLE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


# ===========================================
# Handlers
# ===========================================


async def eventhub_error_handler(request: Request, exc: EventHubError) -> JSONResponse:
    logger.warning(
        f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.error_code, **exc.details},
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Validation failures are reported as 400 with a readable message."""
    errors = []
    for err in exc.errors():
        # drop the leading 'body'/'query' segment from the location
        loc = [str(part) for part in err["loc"][1:]] or [str(err["loc"][0])]
        errors.append({"field": ".".join(loc), "message": err["msg"]})

    message = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
    logger.warning(f"Validation error on {request.url.path}: {message}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message or "Invalid request", "errors": errors},
    )
