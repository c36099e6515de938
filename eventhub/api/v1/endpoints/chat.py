# eventhub/api/v1/endpoints/chat.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from eventhub.api import deps
from eventhub.db.base import EventStore
from eventhub.schemas.chat import ChatMessage, ChatMessageCreate, ChatRequest, ChatResponse
from eventhub.schemas.token import TokenPayload
from eventhub.services.ai_assistant import FALLBACK_RESPONSE, EventAssistant, build_chat_prompt

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])


@router.post("/chat", response_model=ChatResponse)
def chat(
    chat_in: ChatRequest,
    store: EventStore = Depends(deps.get_store),
    assistant: EventAssistant = Depends(deps.get_assistant),
    current_user: Optional[TokenPayload] = Depends(deps.get_current_user_optional),
):
    """
    Answers a question about the platform using the current event listing as
    context. Anonymous users may chat; their messages are stored without a user.

    If the assistant fails, the fallback response is returned and stored.
    """
    prompt = build_chat_prompt(store.get_events(), chat_in.message)

    try:
        response = assistant.generate_response(prompt)
    except Exception as e:
        logger.error(f"Chat assistant failed, using fallback response: {e}")
        response = FALLBACK_RESPONSE

    store.create_chat_message(
        ChatMessageCreate(
            user_id=current_user.user_id if current_user else None,
            message=chat_in.message,
            response=response,
        )
    )
    return ChatResponse(message=chat_in.message, response=response)


@router.get("/chat/history", response_model=List[ChatMessage])
def chat_history(
    store: EventStore = Depends(deps.get_store),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return store.get_user_chat_history(current_user.user_id)
