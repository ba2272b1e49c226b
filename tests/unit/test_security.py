"""Unit tests for security utilities."""
from datetime import UTC, datetime, timedelta

from verity.config import Settings
from verity.core.security import (
    generate_random_token,
    generate_session_token,
    hash_password,
    hash_session_token,
    is_session_token_expired,
    should_rotate_session_token,
    verify_password,
)


def test_hash_password():
    """Test password hashing."""
    password = "MySecurePassword123!"
    hashed = hash_password(password)
    assert hashed != password
    assert hashed.startswith("$2b$")


def test_verify_password():
    """Test password verification."""
    password = "MySecurePassword123!"
    hashed = hash_password(password)
    assert verify_password(password, hashed)
    assert not verify_password("WrongPassword", hashed)


def test_generate_random_token():
    """Test random token generation."""
    token1 = generate_random_token(32)
    token2 = generate_random_token(32)
    assert len(token1) == 32
    assert len(token2) == 32
    assert token1 != token2


def test_generate_session_token():
    """Test session token generation."""
    plaintext, token_hash = generate_session_token()

    # Base64URL encoded 32 bytes, no padding
    assert isinstance(plaintext, str)
    assert len(plaintext) == 43
    assert "=" not in plaintext

    # SHA256 digest of the plaintext
    assert isinstance(token_hash, bytes)
    assert len(token_hash) == 32
    assert hash_session_token(plaintext) == token_hash

    other, _ = generate_session_token()
    assert other != plaintext


def test_should_rotate_session_token():
    """Test session token rotation check."""
    settings = Settings(session_token_rotation_days=7)

    recent = datetime.now(UTC) - timedelta(days=3)
    assert not should_rotate_session_token(recent, settings)

    old = datetime.now(UTC) - timedelta(days=10)
    assert should_rotate_session_token(old, settings)


def test_is_session_token_expired():
    """Test session token expiration check."""
    settings = Settings(session_token_expire_days=14)

    recent = datetime.now(UTC) - timedelta(days=7)
    assert not is_session_token_expired(recent, settings)

    old = datetime.now(UTC) - timedelta(days=20)
    assert is_session_token_expired(old, settings)


def test_token_age_accepts_naive_timestamps():
    """SQLite hands back naive datetimes; they are treated as UTC."""
    settings = Settings(session_token_expire_days=14)

    naive_old = (datetime.now(UTC) - timedelta(days=20)).replace(tzinfo=None)
    assert is_session_token_expired(naive_old, settings)
