"""Chat schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator

from app.core.config import settings
from models.message import MessageRole

from .base import BaseSchema

ChatModel = Literal["gpt-4o", "o3"]


class ChatMessageIn(BaseSchema):
    """One turn of the conversation as sent by the client."""

    role: MessageRole = Field(..., description="Speaker of the message")
    content: str = Field(..., description="Message text")


class ChatRequest(BaseSchema):
    """Schema for both the buffered and the streaming chat endpoints."""

    messages: list[ChatMessageIn] = Field(
        ..., min_length=1, description="Conversation so far, newest user message last"
    )
    model: ChatModel | None = Field(
        None, description="Upstream model, OPENAI_DEFAULT_MODEL when omitted"
    )
    chat_id: UUID | None = Field(None, alias="chatId", description="Existing chat to continue")


class ChatOptions(BaseSchema):
    """Options controlling a single relay call."""

    model: str = Field(default_factory=lambda: settings.openai_default_model)
    user_id: UUID | None = None
    chat_id: UUID | None = None


class ChatAnswerResponse(BaseSchema):
    """Schema for the buffered chat reply."""

    answer: str


class ChatSummary(BaseSchema):
    """A chat as shown in the sidebar."""

    id: UUID
    title: str | None
    created_at: datetime


class ChatListResponse(BaseSchema):
    chats: list[ChatSummary]


class MessageOut(BaseSchema):
    """A persisted message as returned to clients."""

    role: MessageRole
    content: str
    model: str | None
    created_at: datetime


class MessageListResponse(BaseSchema):
    messages: list[MessageOut]


class ChatRenameRequest(BaseSchema):
    """Schema for renaming a chat."""

    title: str = Field(..., min_length=1, max_length=255, description="New chat title")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


class ChatRenameResponse(BaseSchema):
    id: UUID
    title: str
