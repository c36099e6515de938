# eventhub/services/ai_assistant.py
"""
Chat assistant backed by the Anthropic API.

The assistant only turns a prompt into text. Building the prompt from the
current event listing lives in ``build_chat_prompt``, and deciding what to
store when the call fails is up to the chat endpoint.
"""

import logging
from typing import Iterable, Optional

from anthropic import Anthropic

from eventhub.core.exceptions import AssistantUnavailableError
from eventhub.schemas.event import Event

logger = logging.getLogger(__name__)

ASSISTANT_CONTEXT = (
    "You are an AI assistant for EventHub, an event management platform for "
    "hackathons, workshops, seminars, and conferences. "
    "You help users with information about events, registration process, "
    "creating events, and general queries about the platform. "
    "Keep your responses concise, helpful, and related to event management.\n\n"
)

FALLBACK_RESPONSE = (
    "I'm sorry, I'm having trouble processing your request right now. "
    "Please try again later or contact support if you need immediate assistance."
)

DESCRIPTION_PREVIEW_CHARS = 100


def _format_day(value) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def describe_event_dates(event: Event) -> str:
    if event.start_date == event.end_date:
        return _format_day(event.start_date)
    return f"{_format_day(event.start_date)} - {_format_day(event.end_date)}"


def build_chat_prompt(events: Iterable[Event], message: str) -> str:
    """Assistant context, then the numbered event listing, then the user's message."""
    prompt = ASSISTANT_CONTEXT
    prompt += "Here are the current events on the platform:\n"
    for index, event in enumerate(events, start=1):
        prompt += (
            f"{index}. {event.title} - A {event.category.value} in {event.location} "
            f"({describe_event_dates(event)})\n"
        )
        prompt += f"   Description: {event.description[:DESCRIPTION_PREVIEW_CHARS]}...\n"
    return f"{prompt}\n\nUser: {message}"


class EventAssistant:
    """Service for answering chat messages using Claude."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 1024,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        if not self.api_key:
            logger.warning("ANTHROPIC_API_KEY not configured. Chat assistant will use the fallback response.")
            self.client = None
        else:
            self.client = Anthropic(api_key=self.api_key)

    def is_available(self) -> bool:
        return self.client is not None

    def generate_response(self, prompt: str) -> str:
        """
        Sends ``prompt`` as a single user turn and returns the text reply.

        Raises:
            AssistantUnavailableError: no API key configured.
            anthropic.APIError: the API call failed.
        """
        if not self.is_available():
            raise AssistantUnavailableError()

        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text:
            raise ValueError("Assistant returned an empty response")
        return text
