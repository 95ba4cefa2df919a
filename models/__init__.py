"""
Models package initialization.
"""

from .base import Base, BaseModel
from .chat import Chat
from .message import Message, MessageRole
from .profile import Profile, ProfileRole

__all__ = [
    "Base",
    "BaseModel",
    "Chat",
    "Message",
    "MessageRole",
    "Profile",
    "ProfileRole",
]
