"""API routes for the chatbot."""

from typing import Annotated

from fastapi import APIRouter, Depends

from citizen_alerts.context import AppContext, get_context
from citizen_alerts.schemas.chat import ChatMessage, ChatRequest

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/messages", response_model=list[ChatMessage])
async def list_messages(
    context: Annotated[AppContext, Depends(get_context)],
) -> list[ChatMessage]:
    return context.chat_service.messages


@router.post("/messages", response_model=ChatMessage)
async def send_message(
    body: ChatRequest,
    context: Annotated[AppContext, Depends(get_context)],
) -> ChatMessage:
    """Send a message and get the bot's reply."""
    return await context.chat_service.send_message(body.text, image_count=body.image_count)


@router.delete("/messages", response_model=list[ChatMessage])
async def clear_messages(
    context: Annotated[AppContext, Depends(get_context)],
) -> list[ChatMessage]:
    context.chat_service.clear()
    return context.chat_service.messages
