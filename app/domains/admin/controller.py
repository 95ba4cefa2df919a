"""Admin API controller. Every route requires the ``admin`` role."""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_db, require_roles, validate_token
from app.domains.admin.service import AdminService
from app.schemas.admin import (
    ProfileResponse,
    RoleChangeRequest,
    RoleChangeResponse,
    UserListResponse,
)
from app.schemas.chat import ChatListResponse, ChatSummary, MessageListResponse, MessageOut
from models.profile import ProfileRole

router = APIRouter(
    prefix=f"{settings.api_prefix}/admin",
    tags=["admin"],
    dependencies=[Depends(validate_token), Depends(require_roles(ProfileRole.ADMIN))],
)


@router.post("/promote", response_model=RoleChangeResponse)
async def promote_user(
    role_request: RoleChangeRequest = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Promote a user to admin."""
    profile = await AdminService(db).promote(role_request.user_id)
    return RoleChangeResponse(
        message=f"User {role_request.user_id} promoted to admin",
        data=ProfileResponse.model_validate(profile),
    )


@router.post("/demote", response_model=RoleChangeResponse)
async def demote_user(
    role_request: RoleChangeRequest = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Demote an admin back to a regular user."""
    profile = await AdminService(db).demote(role_request.user_id)
    return RoleChangeResponse(
        message=f"User {role_request.user_id} demoted to user",
        data=ProfileResponse.model_validate(profile),
    )


@router.get("/users", response_model=UserListResponse)
async def list_users(db: AsyncSession = Depends(get_db)):
    """List all users with their email and role."""
    profiles = await AdminService(db).list_users()
    return UserListResponse(users=[ProfileResponse.model_validate(p) for p in profiles])


@router.get("/users/{user_id}/chats", response_model=ChatListResponse)
async def list_user_chats(
    user_id: UUID = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
):
    """List chats for a given user."""
    chats = await AdminService(db).list_user_chats(user_id)
    return ChatListResponse(chats=[ChatSummary.model_validate(chat) for chat in chats])


@router.get("/chats/{chat_id}/messages", response_model=MessageListResponse)
async def list_chat_messages(
    chat_id: UUID = Path(..., description="Chat ID"),
    db: AsyncSession = Depends(get_db),
):
    """List messages for a chat."""
    messages = await AdminService(db).list_chat_messages(chat_id)
    return MessageListResponse(messages=[MessageOut.model_validate(msg) for msg in messages])
