"""
Chat model: one conversation thread owned by a single user.
"""

from sqlalchemy import Column, Index, String
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class Chat(BaseModel):
    """
    Represents a conversation thread.

    ``user_id`` is the Supabase auth subject of the owner. The title is derived
    from the first user message when the chat is created and only changes
    through an explicit rename.
    """

    __tablename__ = "chats"
    __table_args__ = (Index("idx_chats_user_created", "user_id", "created_at"),)

    user_id = Column(UUID(), nullable=False)
    title = Column(String(255), nullable=True)

    # Relationships
    messages = relationship(
        "Message",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )
