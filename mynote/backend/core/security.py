"""
Security Utilities.

Admin authentication, session tokens, and password hashing.

There is exactly one privileged identity, configured through ADMIN_USERNAME
and ADMIN_PASSWORD. A successful login yields a signed JWT that carries
`isAdmin: true`; the token is the whole session (no server-side store, no
revocation, expiry is the only way out).
"""

import secrets
from datetime import timedelta
from enum import StrEnum
from typing import Any

import bcrypt
from jose import JWTError, jwt

from mynote.backend.core.config import get_app_config, get_settings
from mynote.backend.core.exceptions import AuthenticationError
from mynote.backend.core.logging import get_logger
from mynote.backend.core.utils import utc_now

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a secret
_BCRYPT_MAX_BYTES = 72


class Actor(StrEnum):
    """The two kinds of caller the system distinguishes."""

    ANONYMOUS = "anonymous"
    ADMIN = "admin"


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str | None, hashed_password: str) -> bool:
    """Verify a password against its hash. A missing candidate never matches."""
    if plain_password is None:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token")


def verify_token(token: str | None) -> dict[str, Any] | None:
    """Return the token claims, or None when the token is absent or invalid."""
    if not token:
        return None
    try:
        return decode_token(token)
    except AuthenticationError:
        return None


def actor_from_claims(claims: dict[str, Any] | None) -> Actor:
    if claims and claims.get("isAdmin") is True:
        return Actor.ADMIN
    return Actor.ANONYMOUS


def check_admin_credentials(username: str, password: str) -> bool:
    """Constant-time comparison against the configured admin credential pair."""
    settings = get_settings()
    username_ok = secrets.compare_digest(
        username.encode("utf-8"), settings.admin_username.encode("utf-8"),
    )
    password_ok = secrets.compare_digest(
        password.encode("utf-8"), settings.admin_password.encode("utf-8"),
    )
    return username_ok and password_ok


def issue_admin_token(username: str, password: str) -> str:
    """
    Log the admin in and return a session token.

    Raises:
        AuthenticationError: If the credentials do not match
    """
    if not check_admin_credentials(username, password):
        logger.warning("Admin login rejected", extra={"username": username})
        raise AuthenticationError("Invalid credentials")

    logger.info("Admin login succeeded", extra={"username": username})
    return create_access_token({"sub": username, "username": username, "isAdmin": True})
