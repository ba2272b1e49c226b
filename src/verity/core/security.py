"""Security utilities for password hashing and session tokens."""

import base64
import hashlib
import secrets
from datetime import UTC, datetime, timedelta

from passlib.context import CryptContext

from verity.config import Settings

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def generate_random_token(num_bytes: int = 32) -> bytes:
    """Generate a random token of specified byte length."""
    return secrets.token_bytes(num_bytes)


def generate_session_token() -> tuple[str, bytes]:
    """
    Generate a bearer session token.

    Returns:
        tuple: (plaintext_token, token_hash)
            - plaintext_token: Base64URL encoded token (returned to the client once)
            - token_hash: SHA256 hash of plaintext (stored in DB)
    """
    token_bytes = generate_random_token(32)

    # Encode as Base64URL (no padding)
    plaintext_token = base64.urlsafe_b64encode(token_bytes).decode("utf-8").rstrip("=")

    return plaintext_token, hash_session_token(plaintext_token)


def hash_session_token(token: str) -> bytes:
    """Hash a session token using SHA256."""
    return hashlib.sha256(token.encode("utf-8")).digest()


def _token_age(token_created_at: datetime) -> timedelta:
    if token_created_at.tzinfo is None:
        token_created_at = token_created_at.replace(tzinfo=UTC)
    return datetime.now(UTC) - token_created_at


def should_rotate_session_token(token_created_at: datetime, settings: Settings) -> bool:
    """Check if a session token should be rotated."""
    return _token_age(token_created_at) > timedelta(days=settings.session_token_rotation_days)


def is_session_token_expired(token_created_at: datetime, settings: Settings) -> bool:
    """Check if a session token has expired."""
    return _token_age(token_created_at) > timedelta(days=settings.session_token_expire_days)
