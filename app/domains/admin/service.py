# app/domains/admin/service.py
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.admin import AdminOperationError
from models import Chat, Message, Profile, ProfileRole

logger = logging.getLogger(__name__)


class AdminService:
    """Direct reads and writes over profiles, chats and messages for administrators.

    Storage errors surface as :class:`AdminOperationError` carrying the
    underlying message.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def set_role(self, user_id: UUID, role: ProfileRole) -> Profile:
        """Set the role of a profile."""
        try:
            result = await self.db.execute(select(Profile).where(Profile.id == user_id))
            profile = result.scalar_one_or_none()
            if not profile:
                raise AdminOperationError(f"Profile {user_id} not found")

            profile.role = role
            await self.db.commit()
            await self.db.refresh(profile)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to set role %s on %s: %s", role.value, user_id, str(e))
            raise AdminOperationError(str(e)) from e

        logger.info("Profile %s is now %s", user_id, role.value)
        return profile

    async def promote(self, user_id: UUID) -> Profile:
        return await self.set_role(user_id, ProfileRole.ADMIN)

    async def demote(self, user_id: UUID) -> Profile:
        return await self.set_role(user_id, ProfileRole.USER)

    async def list_users(self) -> list[Profile]:
        """List all profiles ordered by email."""
        return await self._fetch_all(select(Profile).order_by(Profile.email.asc()))

    async def list_user_chats(self, user_id: UUID) -> list[Chat]:
        """List a user's chats, newest first."""
        return await self._fetch_all(
            select(Chat).where(Chat.user_id == user_id).order_by(Chat.created_at.desc())
        )

    async def list_chat_messages(self, chat_id: UUID) -> list[Message]:
        """List a chat's messages, oldest first."""
        return await self._fetch_all(
            select(Message).where(Message.chat_id == chat_id).order_by(Message.created_at.asc())
        )

    async def _fetch_all(self, query) -> list:
        try:
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Admin query failed: %s", str(e))
            raise AdminOperationError(str(e)) from e
