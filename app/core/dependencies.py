# app/core/dependencies.py
import logging
from enum import Enum
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import InvalidTokenError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.roles import RoleResolver
from app.core.security import JWTAuthenticator
from app.database import get_db

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)
auth = JWTAuthenticator()


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def validate_token(
    request: Request,
    token: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict | None:
    """Validate the bearer token and attach its claims to ``request.state.user``.

    CORS pre-flight (``OPTIONS``) requests pass without a token and yield ``None``.

    Returns:
        dict: Decoded token payload

    Raises:
        HTTPException: 401 on a missing header, a scheme other than ``Bearer``
            or a token that fails verification
    """
    if request.method == "OPTIONS":
        return None

    if not token or token.scheme != "Bearer" or not token.credentials:
        raise _unauthorized()

    try:
        payload = auth.verify_token(token.credentials)
    except InvalidTokenError as e:
        logger.info("Token verification failed: %s", str(e))
        raise _unauthorized() from e

    request.state.user = payload
    return payload


async def validate_optional_token(
    request: Request,
    token: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict | None:
    """Like :func:`validate_token`, but a request without an Authorization header is anonymous.

    A header that is present is always fully verified, so a malformed or
    invalid token is still rejected.
    """
    if not request.headers.get("authorization"):
        return None
    return await validate_token(request, token)


def _subject_id(payload: dict | None) -> UUID | None:
    if not payload:
        return None
    subject = payload.get("sub")
    if not subject:
        return None
    try:
        return UUID(str(subject))
    except ValueError:
        logger.warning("Token subject %s is not a UUID", subject)
        return None


async def get_current_user_id(payload: dict | None = Depends(validate_token)) -> UUID:
    """Return the authenticated caller's id (the ``sub`` claim)."""
    user_id = _subject_id(payload)
    if user_id is None:
        raise _unauthorized()
    return user_id


async def get_optional_user_id(
    payload: dict | None = Depends(validate_optional_token),
) -> UUID | None:
    """Return the caller's id, or ``None`` for anonymous requests."""
    return _subject_id(payload)


def require_roles(*roles: str | Enum):
    """Build a dependency that admits callers holding one of ``roles``.

    The role is resolved by :class:`RoleResolver`. With no roles given every
    request is admitted.
    """
    required = frozenset(role.value if isinstance(role, Enum) else role for role in roles)

    async def role_guard(
        claims: dict | None = Depends(validate_token),
        db: AsyncSession = Depends(get_db),
    ) -> dict | None:
        resolver = RoleResolver(db)
        if not await resolver.has_any_role(claims, required):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return claims

    return role_guard
