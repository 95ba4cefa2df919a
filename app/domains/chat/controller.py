"""Chat API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Response, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_current_user_id, get_db, get_optional_user_id
from app.domains.chat.service import ChatService
from app.domains.chat.sse import SSE_HEADERS, relay_events
from app.schemas.chat import (
    ChatAnswerResponse,
    ChatListResponse,
    ChatOptions,
    ChatRenameRequest,
    ChatRenameResponse,
    ChatRequest,
    ChatSummary,
    MessageListResponse,
    MessageOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/chat", tags=["chat"])


def _options(chat_request: ChatRequest, user_id: UUID | None) -> ChatOptions:
    return ChatOptions(
        model=chat_request.model or settings.openai_default_model,
        user_id=user_id,
        chat_id=chat_request.chat_id,
    )


@router.get("", response_model=ChatListResponse)
async def list_chats(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Return the signed-in user's chats, newest first."""
    service = ChatService(db)
    chats = await service.list_chats(user_id)
    return ChatListResponse(chats=[ChatSummary.model_validate(chat) for chat in chats])


@router.get("/{chat_id}/messages", response_model=MessageListResponse)
async def list_messages(
    chat_id: UUID = Path(..., description="Chat ID"),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Return the messages of a chat, oldest first."""
    service = ChatService(db)
    messages = await service.list_messages(chat_id, user_id)
    return MessageListResponse(messages=[MessageOut.model_validate(msg) for msg in messages])


@router.post("", response_model=ChatAnswerResponse)
async def send_chat(
    chat_request: ChatRequest = Body(...),
    user_id: UUID | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Relay the conversation and return the whole assistant reply.

    Anonymous callers get an answer but nothing is stored.
    """
    service = ChatService(db)
    answer = await service.chat(chat_request.messages, _options(chat_request, user_id))
    return ChatAnswerResponse(answer=answer)


@router.post("/stream")
async def stream_chat(
    chat_request: ChatRequest = Body(...),
    user_id: UUID | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Relay the conversation as Server-Sent Events.

    Each token is sent as its own ``data:`` event, followed by ``data:[DONE]``
    on success or an ``event: error`` frame on failure.
    """
    service = ChatService(db)
    tokens = service.chat_stream(chat_request.messages, _options(chat_request, user_id))
    return StreamingResponse(
        relay_events(tokens),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.patch("/{chat_id}", response_model=ChatRenameResponse)
async def rename_chat(
    chat_id: UUID = Path(..., description="Chat ID"),
    rename_request: ChatRenameRequest = Body(...),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Rename one of the signed-in user's chats."""
    service = ChatService(db)
    chat = await service.rename_chat(chat_id, user_id, rename_request.title)
    return ChatRenameResponse(id=chat.id, title=chat.title)


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chat(
    chat_id: UUID = Path(..., description="Chat ID"),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete a chat and all of its messages."""
    service = ChatService(db)
    await service.delete_chat(chat_id, user_id)
    logger.info("Deleted chat %s for user %s", chat_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
