"""
Message model: a single turn within a chat.
"""

import enum

from sqlalchemy import Column, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class MessageRole(str, enum.Enum):
    """Message role enumeration."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel):
    """
    Represents one chat message. Messages are append-only and ordered by ``created_at``.
    """

    __tablename__ = "messages"
    __table_args__ = (Index("idx_messages_chat_created", "chat_id", "created_at"),)

    chat_id = Column(UUID(), ForeignKey("chats.id", ondelete="CASCADE"), nullable=False)
    role = Column(
        Enum(MessageRole, name="message_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    content = Column(Text, nullable=False, default="")
    model = Column(String(64), nullable=True)

    # Relationships
    chat = relationship("Chat", back_populates="messages")
