"""
Provides the Profile model, the authorization record for a user.

Attributes
----------
id : sqlalchemy.Column
    Mirrors the Supabase auth subject (``sub`` claim) of the user.
email : sqlalchemy.Column
    The email address of the user.
role : sqlalchemy.Column
    Either ``user`` or ``admin``. Changed only by the admin promote/demote actions.
"""

import enum

from sqlalchemy import Column, Enum, String

from .base import BaseModel


class ProfileRole(str, enum.Enum):
    """Closed set of roles a profile can hold."""

    USER = "user"
    ADMIN = "admin"


class Profile(BaseModel):
    """
    Represents the authorization record of a user.

    :ivar email: Email address of the user.
    :type email: str
    :ivar role: Current role of the user.
    :type role: ProfileRole
    """

    __tablename__ = "profile"

    email = Column(String(255), nullable=True)
    role = Column(
        Enum(ProfileRole, name="profile_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ProfileRole.USER,
    )
