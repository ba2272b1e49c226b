"""Unit tests for authentication, identity lookups and scopes."""
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from verity.core.auth import (
    authenticate_user,
    create_scope,
    create_session_token,
    create_user,
    get_user_by_id,
    get_user_by_username,
    ids_to_usernames,
    is_admin,
    revoke_session_token,
    verify_session_token,
)
from verity.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from verity.core.scope import can_access_request, require_admin
from verity.core.security import hash_session_token
from verity.models import UserToken, VerificationRequest

TEST_PASSWORD = "TestPassword123!"


def _age_token(db: Session, token: str, days: int) -> None:
    stmt = select(UserToken).where(UserToken.token_hash == hash_session_token(token))
    user_token = db.execute(stmt).scalar_one()
    user_token.inserted_at = datetime.now(UTC) - timedelta(days=days)
    db.commit()


def test_create_user(db_session: Session, test_settings):
    """Test regular users are created without privilege."""
    user = create_user(db_session, "alice", TEST_PASSWORD, test_settings)

    assert user.id is not None
    assert user.hashed_password != TEST_PASSWORD
    assert user.is_admin is False
    assert authenticate_user(db_session, "alice", TEST_PASSWORD).id == user.id
    assert authenticate_user(db_session, "alice", "wrong-password") is None
    assert authenticate_user(db_session, "nobody", TEST_PASSWORD) is None


def test_create_admin_user(db_session: Session, test_settings):
    """Test configured usernames become administrators."""
    admin_name = test_settings.admin_usernames[0].upper()
    user = create_user(db_session, admin_name, TEST_PASSWORD, test_settings)

    assert user.is_admin is True
    assert is_admin(db_session, user.id)


def test_create_user_duplicate(db_session: Session, test_settings, make_user):
    """Test usernames are unique."""
    make_user("alice")

    with pytest.raises(ConflictError, match="Username already exists"):
        create_user(db_session, "alice", TEST_PASSWORD, test_settings)


def test_session_token_roundtrip(db_session: Session, test_settings, make_user):
    """Test a fresh token resolves to its user unchanged."""
    user = make_user("alice")
    token = create_session_token(db_session, user)

    result = verify_session_token(db_session, token, test_settings)

    assert result is not None
    verified_user, user_token, current = result
    assert verified_user.id == user.id
    assert user_token.token_hash == hash_session_token(token)
    assert current == token


def test_unknown_session_token(db_session: Session, test_settings):
    """Test an unknown token does not verify."""
    assert verify_session_token(db_session, "not-a-token", test_settings) is None


def test_session_token_rotation(db_session: Session, test_settings, make_user):
    """Test an old token is swapped for a new one."""
    user = make_user("alice")
    token = create_session_token(db_session, user)
    _age_token(db_session, token, test_settings.session_token_rotation_days + 1)

    verified_user, _, current = verify_session_token(db_session, token, test_settings)

    assert verified_user.id == user.id
    assert current != token
    assert verify_session_token(db_session, token, test_settings) is None
    assert verify_session_token(db_session, current, test_settings) is not None


def test_session_token_expiry(db_session: Session, test_settings, make_user):
    """Test an expired token is removed."""
    user = make_user("alice")
    token = create_session_token(db_session, user)
    _age_token(db_session, token, test_settings.session_token_expire_days + 1)

    assert verify_session_token(db_session, token, test_settings) is None
    assert db_session.execute(select(UserToken)).scalars().all() == []


def test_revoke_session_token(db_session: Session, test_settings, make_user):
    """Test revocation ends the session and ignores unknown tokens."""
    user = make_user("alice")
    token = create_session_token(db_session, user)

    revoke_session_token(db_session, token)
    revoke_session_token(db_session, "never-issued")

    assert verify_session_token(db_session, token, test_settings) is None


def test_user_lookups(db_session: Session, make_user):
    """Test resolving users by ID and username."""
    alice = make_user("alice")

    assert get_user_by_id(db_session, alice.id).username == "alice"
    assert get_user_by_id(db_session, alice.id + 100) is None
    assert get_user_by_username(db_session, "alice").id == alice.id

    with pytest.raises(NotFoundError, match="nobody"):
        get_user_by_username(db_session, "nobody")


def test_ids_to_usernames(db_session: Session, make_user):
    """Test translation keeps the input order."""
    alice = make_user("alice")
    bob = make_user("bob")

    assert ids_to_usernames(db_session, [bob.id, alice.id]) == ["bob", "alice"]
    assert ids_to_usernames(db_session, []) == []

    with pytest.raises(NotFoundError):
        ids_to_usernames(db_session, [alice.id, bob.id + 100])


def test_require_admin(db_session: Session, make_user):
    """Test the administrator gate."""
    admin = make_user("admin", is_admin=True)
    alice = make_user("alice")

    require_admin(db_session, create_scope(admin), "approve requests")

    with pytest.raises(PermissionDeniedError, match="approve requests"):
        require_admin(db_session, create_scope(alice), "approve requests")


def test_can_access_request(db_session: Session, make_user):
    """Test the subject and administrators can access a request."""
    admin = make_user("admin", is_admin=True)
    alice = make_user("alice")
    bob = make_user("bob")
    request = VerificationRequest(subject_id=alice.id, credentials="doc123")
    db_session.add(request)
    db_session.commit()

    assert can_access_request(db_session, create_scope(alice), request)
    assert can_access_request(db_session, create_scope(admin), request)
    assert not can_access_request(db_session, create_scope(bob), request)
