"""
Unit tests for Dependencies module.

This module contains unit tests for token verification and the auth, optional
auth and role guard dependencies.
"""

import time
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from jwt import InvalidTokenError

from app.core.dependencies import (
    get_current_user_id,
    get_optional_user_id,
    require_roles,
    validate_optional_token,
    validate_token,
)
from app.core.security import JWTAuthenticator, create_access_token
from models.profile import ProfileRole


def make_request(method: str = "GET", authorization: str | None = None) -> Request:
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request({"type": "http", "method": method, "path": "/", "headers": headers})


def bearer(token: str, scheme: str = "Bearer") -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme=scheme, credentials=token)


class TestJWTAuthenticator:
    """Test cases for token verification."""

    def test_verify_valid_token(self):
        token = create_access_token({"sub": "abc", "aud": "authenticated"})

        payload = JWTAuthenticator().verify_token(token)

        assert payload["sub"] == "abc"

    def test_verify_token_signed_with_other_secret(self):
        token = create_access_token({"sub": "abc"}, secret_key="another-secret-that-is-long-enough!!")

        with pytest.raises(InvalidTokenError):
            JWTAuthenticator().verify_token(token)

    def test_verify_expired_token(self):
        token = create_access_token({"sub": "abc", "exp": int(time.time()) - 60})

        with pytest.raises(InvalidTokenError):
            JWTAuthenticator().verify_token(token)

    def test_verify_without_secret(self):
        with pytest.raises(InvalidTokenError):
            JWTAuthenticator(secret_key="").verify_token("anything")


@pytest.mark.asyncio
class TestValidateToken:
    """Test cases for validate_token dependency."""

    async def test_validate_token_success(self):
        token = create_access_token({"sub": "user_123", "email": "test@example.com"})
        request = make_request(authorization=f"Bearer {token}")

        result = await validate_token(request, bearer(token))

        assert result["sub"] == "user_123"
        assert request.state.user == result

    async def test_validate_token_missing(self):
        with pytest.raises(HTTPException) as exc_info:
            await validate_token(make_request(), None)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Unauthorized"

    async def test_validate_token_wrong_scheme_case(self):
        token = create_access_token({"sub": "user_123"})

        with pytest.raises(HTTPException) as exc_info:
            await validate_token(make_request(), bearer(token, scheme="bearer"))

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_validate_token_verification_failure(self):
        with patch("app.core.dependencies.logger") as mock_logger:
            with pytest.raises(HTTPException) as exc_info:
                await validate_token(make_request(), bearer("not-a-jwt"))

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Unauthorized"
        mock_logger.info.assert_called_once()

    async def test_validate_token_allows_preflight(self):
        assert await validate_token(make_request(method="OPTIONS"), None) is None


@pytest.mark.asyncio
class TestValidateOptionalToken:
    """Test cases for the anonymous-friendly variant."""

    async def test_no_header_is_anonymous(self):
        assert await validate_optional_token(make_request(), None) is None

    async def test_present_header_is_verified(self):
        token = create_access_token({"sub": "user_123"})

        result = await validate_optional_token(make_request(authorization=f"Bearer {token}"), bearer(token))

        assert result["sub"] == "user_123"

    async def test_present_but_invalid_header_is_rejected(self):
        # HTTPBearer hands over nothing for a non-bearer scheme
        with pytest.raises(HTTPException) as exc_info:
            await validate_optional_token(make_request(authorization="Basic dXNlcjpwYXNz"), None)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
class TestUserId:
    """Test cases for extracting the caller id."""

    async def test_current_user_id(self):
        user_id = uuid.uuid4()
        assert await get_current_user_id({"sub": str(user_id)}) == user_id

    async def test_current_user_id_missing_sub(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user_id({"email": "x@example.com"})
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_optional_user_id_anonymous(self):
        assert await get_optional_user_id(None) is None

    async def test_optional_user_id_non_uuid_subject(self):
        assert await get_optional_user_id({"sub": "not-a-uuid"}) is None


@pytest.mark.asyncio
class TestRequireRoles:
    """Test cases for the role guard dependency."""

    async def test_no_required_roles_allows(self):
        guard = require_roles()
        claims = {"sub": str(uuid.uuid4())}

        assert await guard(claims, MagicMock()) == claims

    async def test_matching_claim_allows(self):
        guard = require_roles(ProfileRole.ADMIN)
        db = MagicMock()
        db.execute = AsyncMock()
        claims = {"sub": str(uuid.uuid4()), "role": "admin"}

        assert await guard(claims, db) == claims
        db.execute.assert_not_called()

    async def test_missing_claims_forbidden(self):
        guard = require_roles("admin")

        with pytest.raises(HTTPException) as exc_info:
            await guard(None, MagicMock())

        assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN
