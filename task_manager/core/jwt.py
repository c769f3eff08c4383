"""
JWT access token helpers.

Tokens carry the username itself as the identity claim; it doubles as the
owner key stored on every task.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from task_manager.core.config import settings


BEARER_PREFIX = "Bearer "


class TokenError(Exception):
    """Raised when a bearer token cannot be turned into a username."""

    reason = "invalid_token"


class MissingTokenError(TokenError):
    reason = "no_token"


class ExpiredTokenError(TokenError):
    reason = "expired"


class MalformedClaimsError(TokenError):
    reason = "malformed_claims"


def create_access_token(username: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token for a user.

    Args:
        username: Value stored in the ``username`` claim
        expires_delta: Token lifetime (defaults to ACCESS_TOKEN_EXPIRE_HOURS)

    Returns:
        Encoded JWT string
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    )
    claims = {"username": username, "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry, returning the raw claims."""
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise ExpiredTokenError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError("Invalid token") from exc


def extract_username(authorization: Optional[str]) -> str:
    """
    Resolve the username from an ``Authorization`` header value.

    A ``Bearer `` prefix is stripped when present; a bare token is accepted too.

    Raises:
        MissingTokenError: header absent or empty
        ExpiredTokenError: token past its ``exp``
        TokenError: bad signature or undecodable token
        MalformedClaimsError: ``username`` claim missing or not a string
    """
    if not authorization:
        raise MissingTokenError("No token provided")

    token = authorization
    if len(token) > len(BEARER_PREFIX) and token.startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX):]

    claims = decode_access_token(token)
    username = claims.get("username")
    if not isinstance(username, str) or not username:
        raise MalformedClaimsError("Invalid claims")
    return username
