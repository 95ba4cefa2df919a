"""Admin schemas for request/response serialization."""

from uuid import UUID

from pydantic import Field

from models.profile import ProfileRole

from .base import BaseSchema


class RoleChangeRequest(BaseSchema):
    """Body of the promote and demote endpoints."""

    user_id: UUID = Field(..., alias="userId", description="Profile to update")


class ProfileResponse(BaseSchema):
    id: UUID
    email: str | None
    role: ProfileRole


class RoleChangeResponse(BaseSchema):
    message: str
    data: ProfileResponse | None = None


class UserListResponse(BaseSchema):
    users: list[ProfileResponse]
