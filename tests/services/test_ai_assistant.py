# tests/services/test_ai_assistant.py
from datetime import datetime
from types import SimpleNamespace

import pytest

from eventhub.core.exceptions import AssistantUnavailableError
from eventhub.schemas.event import Event
from eventhub.services.ai_assistant import (
    ASSISTANT_CONTEXT,
    EventAssistant,
    build_chat_prompt,
    describe_event_dates,
)


def make_event(**overrides) -> Event:
    fields = dict(
        id=1,
        title="AI for Beginners Workshop",
        description="Learn the basics",
        category="workshop",
        location="San Francisco, CA",
        start_date=datetime(2023, 7, 28),
        end_date=datetime(2023, 7, 28),
        capacity=120,
        organizer_id=1,
        created_at=datetime(2023, 7, 1),
    )
    fields.update(overrides)
    return Event(**fields)


def test_single_day_event_shows_one_date():
    assert describe_event_dates(make_event()) == "7/28/2023"


def test_multi_day_event_shows_range():
    event = make_event(start_date=datetime(2023, 8, 15), end_date=datetime(2023, 8, 16))
    assert describe_event_dates(event) == "8/15/2023 - 8/16/2023"


def test_build_chat_prompt_lists_events_then_message():
    events = [
        make_event(),
        make_event(id=2, title="Hack Night", category="hackathon", location="Austin, TX",
                   description="x" * 150),
    ]

    prompt = build_chat_prompt(events, "What's on?")

    assert prompt.startswith(ASSISTANT_CONTEXT)
    assert "Here are the current events on the platform:\n" in prompt
    assert "1. AI for Beginners Workshop - A workshop in San Francisco, CA (7/28/2023)\n" in prompt
    assert "   Description: Learn the basics...\n" in prompt
    assert "2. Hack Night - A hackathon in Austin, TX" in prompt
    assert f"   Description: {'x' * 100}...\n" in prompt
    assert prompt.endswith("\n\nUser: What's on?")


def test_build_chat_prompt_without_events():
    prompt = build_chat_prompt([], "hello")
    assert prompt == (
        ASSISTANT_CONTEXT
        + "Here are the current events on the platform:\n"
        + "\n\nUser: hello"
    )


def test_assistant_without_api_key_is_unavailable():
    assistant = EventAssistant(api_key=None)
    assert assistant.is_available() is False
    with pytest.raises(AssistantUnavailableError):
        assistant.generate_response("hi")


def test_generate_response_calls_messages_api(mocker):
    mock_anthropic = mocker.patch("eventhub.services.ai_assistant.Anthropic")
    client = mock_anthropic.return_value
    client.messages.create.return_value = SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text="Three events "),
            SimpleNamespace(type="tool_use", text="ignored"),
            SimpleNamespace(type="text", text="are coming up."),
        ]
    )

    assistant = EventAssistant(api_key="sk-test", model="claude-test", max_tokens=256)
    reply = assistant.generate_response("prompt text")

    assert reply == "Three events are coming up."
    mock_anthropic.assert_called_once_with(api_key="sk-test")
    client.messages.create.assert_called_once_with(
        model="claude-test",
        max_tokens=256,
        messages=[{"role": "user", "content": "prompt text"}],
    )


def test_empty_reply_raises(mocker):
    mock_anthropic = mocker.patch("eventhub.services.ai_assistant.Anthropic")
    mock_anthropic.return_value.messages.create.return_value = SimpleNamespace(content=[])

    assistant = EventAssistant(api_key="sk-test")
    with pytest.raises(ValueError):
        assistant.generate_response("prompt")
