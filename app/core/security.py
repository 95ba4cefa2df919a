"""Security related functions."""

import jwt
from jwt import InvalidTokenError

from app.core.config import settings


class JWTAuthenticator:
    """
    Verifies bearer tokens issued by Supabase Auth.

    Tokens are HS256-signed with the project's shared JWT secret. The signature
    and expiry are checked; the audience claim is not, since Supabase issues
    ``aud: authenticated`` for every signed-in user.

    :ivar secret_key: The shared secret used to verify JWT signatures.
    :type secret_key: str
    :ivar algorithm: The accepted signing algorithm.
    :type algorithm: str
    """

    def __init__(self, secret_key: str | None = None, algorithm: str | None = None):
        self.secret_key = secret_key if secret_key is not None else settings.supabase_jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm

    def verify_token(self, token: str) -> dict:
        """
        Decode ``token`` and return its claims.

        :param token: The raw JWT taken from the ``Authorization`` header.
        :return: The decoded payload.
        :raises InvalidTokenError: If no secret is configured or verification fails.
        """
        if not self.secret_key:
            raise InvalidTokenError("JWT secret is not configured")

        return jwt.decode(
            token,
            key=self.secret_key,
            algorithms=[self.algorithm],
            options={"verify_aud": False},
        )


def create_access_token(claims: dict, secret_key: str | None = None) -> str:
    """Sign ``claims`` with the shared secret. Used by scripts and tests to mint tokens."""
    return jwt.encode(
        claims,
        secret_key if secret_key is not None else settings.supabase_jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
