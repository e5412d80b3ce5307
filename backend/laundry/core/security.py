"""Security utilities: JWT tokens, password hashing, and session revocation."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt
import redis
from jwt.exceptions import PyJWTError

from laundry.core.config import settings

logger = logging.getLogger(__name__)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hash.

    Uses bcrypt's built-in timing-safe comparison.
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError as e:
        logger.warning(f"Password verification error: {e}")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(),
    ).decode("utf-8")


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token with a unique JTI for revocation support."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({
        "exp": expire,
        "iat": now,
        "jti": secrets.token_urlsafe(16),
    })
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate a JWT token. Returns None for invalid or revoked tokens."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require": ["exp", "sub"]},
        )
    except PyJWTError as e:
        logger.debug(f"JWT decode error: {e}")
        return None

    jti = payload.get("jti")
    if jti and is_token_revoked(jti):
        logger.debug(f"Token {jti} has been revoked")
        return None
    return payload


def revoke_token(token: str) -> bool:
    """Revoke a token (destroy the session) until it would have expired anyway.

    The JTI is stored in Redis with a TTL matching the token's remaining
    lifetime. Without Redis, or when it is unreachable, the in-process list
    is used instead.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"verify_exp": False},
        )
    except PyJWTError:
        return False

    jti = payload.get("jti")
    if not jti:
        return False

    exp = payload.get("exp", 0)
    now = datetime.now(timezone.utc)
    ttl = max(int(exp - now.timestamp()), 60)

    client = _redis_client(timeout=2)
    if client is not None:
        try:
            client.setex(f"{REVOKED_KEY_PREFIX}{jti}", ttl, "1")
            return True
        except redis.RedisError as e:
            logger.warning(f"Redis revocation failed, using in-process list: {e}")

    _purge_expired(now)
    _revoked_tokens[jti] = now + timedelta(seconds=ttl)
    return True


def is_token_revoked(jti: str) -> bool:
    """Check whether a token JTI has been revoked."""
    client = _redis_client(timeout=1)
    if client is not None:
        try:
            return bool(client.get(f"{REVOKED_KEY_PREFIX}{jti}"))
        except redis.RedisError as e:
            logger.warning(f"Redis revocation check failed (token may be allowed through): {e}")

    expiry = _revoked_tokens.get(jti)
    if expiry is None:
        return False
    if datetime.now(timezone.utc) < expiry:
        return True
    del _revoked_tokens[jti]
    return False


def _redis_client(timeout: int) -> redis.Redis | None:
    if not settings.redis_url:
        return None
    return redis.from_url(settings.redis_url, socket_connect_timeout=timeout)


def _purge_expired(now: datetime) -> None:
    """Drop in-process entries whose tokens have expired."""
    for jti in [jti for jti, expiry in _revoked_tokens.items() if expiry <= now]:
        del _revoked_tokens[jti]


REVOKED_KEY_PREFIX = "token_blacklist:"

# In-process fallback, cleared on restart
_revoked_tokens: Dict[str, datetime] = {}


# ---------------------------------------------------------------------------
# Cookie configuration
# ---------------------------------------------------------------------------
COOKIE_ACCESS_NAME = "access_token"
COOKIE_SECURE = not settings.debug
COOKIE_SAMESITE = "lax"
ACCESS_TOKEN_MAX_AGE = settings.access_token_expire_minutes * 60
