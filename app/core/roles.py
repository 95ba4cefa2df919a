"""Resolve the role of an authenticated caller."""

import logging
from collections.abc import Collection
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models import Profile

logger = logging.getLogger(__name__)


def role_from_claims(claims: dict) -> str | None:
    """Return the role carried by the token, if any.

    Checks the top-level ``role`` claim first, then ``app_metadata.role``.
    Only non-empty strings count as a role.
    """
    role = claims.get("role")
    if isinstance(role, str) and role:
        return role
    app_metadata = claims.get("app_metadata")
    if isinstance(app_metadata, dict):
        role = app_metadata.get("role")
        if isinstance(role, str) and role:
            return role
    return None


class RoleResolver:
    """Resolves a caller's role from token claims, falling back to the profile table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def lookup_profile_role(self, subject: str) -> str | None:
        """Fetch ``Profile.role`` for ``subject``.

        Lookup failures (bad subject, storage errors) are logged and reported as no role.
        """
        try:
            profile_id = UUID(str(subject))
        except ValueError:
            logger.warning("Role lookup skipped: subject %s is not a UUID", subject)
            return None

        try:
            result = await self.db.execute(select(Profile.role).where(Profile.id == profile_id))
            role = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.warning("Role lookup failed for %s: %s", subject, str(e))
            return None

        return role.value if role is not None else None

    async def resolve(self, claims: dict, required_roles: Collection[str]) -> str | None:
        """Return the caller's effective role for a check against ``required_roles``."""
        role = role_from_claims(claims)

        # Supabase tokens carry role="authenticated", so a claim outside the
        # required set still falls through to the profile table.
        subject = claims.get("sub")
        if (not role or role not in required_roles) and subject:
            role = await self.lookup_profile_role(subject) or role

        return role

    async def has_any_role(self, claims: dict | None, required_roles: Collection[str]) -> bool:
        """Allow when nothing is required, or when the resolved role is in ``required_roles``."""
        if not required_roles:
            return True
        if not claims:
            return False

        role = await self.resolve(claims, required_roles)
        if not role:
            return False
        return role in required_roles
