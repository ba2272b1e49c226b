"""Authentication and identity lookups."""

from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, joinedload

from verity.config import Settings
from verity.core.errors import ConflictError, NotFoundError
from verity.core.scope import Scope
from verity.core.security import (
    generate_session_token,
    hash_password,
    hash_session_token,
    is_session_token_expired,
    should_rotate_session_token,
    verify_password,
)
from verity.models import User, UserToken


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    """
    Authenticate a user by username and password.

    Args:
        db: Database session
        username: Username
        password: Plaintext password

    Returns:
        User object if authentication successful, None otherwise
    """
    stmt = select(User).where(User.username == username)
    user = db.execute(stmt).scalar_one_or_none()

    if not user:
        return None

    if not verify_password(password, user.hashed_password):
        return None

    return user


def create_user(db: Session, username: str, password: str, settings: Settings) -> User:
    """
    Create a new user.

    Usernames listed in ``settings.admin_usernames`` are created as
    administrators.

    Raises:
        ConflictError: If the username is taken
    """
    stmt = select(User).where(User.username == username)
    if db.execute(stmt).scalar_one_or_none():
        raise ConflictError("Username already exists")

    admins = {name.lower() for name in settings.admin_usernames}
    user = User(
        username=username,
        hashed_password=hash_password(password),
        is_admin=username.lower() in admins,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    return user


def create_session_token(db: Session, user: User) -> str:
    """
    Create a session token for a user.

    Args:
        db: Database session
        user: User to create token for

    Returns:
        Plaintext token; only its hash is persisted
    """
    plaintext_token, token_hash = generate_session_token()

    user_token = UserToken(
        user_id=user.id,
        token_hash=token_hash,
        context="session",
        authenticated_at=datetime.now(UTC),
    )
    db.add(user_token)
    db.commit()

    return plaintext_token


def verify_session_token(
    db: Session, token: str, settings: Settings
) -> tuple[User, UserToken, str] | None:
    """
    Verify a session token and return the associated user.

    Expired tokens are deleted. Tokens past the rotation age are replaced by
    a fresh one, whose plaintext is returned in place of the old.

    Args:
        db: Database session
        token: Plaintext token
        settings: Application settings

    Returns:
        Tuple of (User, UserToken, current plaintext token) if valid, None otherwise
    """
    stmt = (
        select(UserToken)
        .where(UserToken.token_hash == hash_session_token(token), UserToken.context == "session")
        .options(joinedload(UserToken.user))
    )
    user_token = db.execute(stmt).scalar_one_or_none()

    if not user_token:
        return None

    if is_session_token_expired(user_token.inserted_at, settings):
        db.delete(user_token)
        db.commit()
        return None

    if should_rotate_session_token(user_token.inserted_at, settings):
        user = user_token.user
        new_plaintext, new_hash = generate_session_token()
        new_user_token = UserToken(
            user_id=user_token.user_id,
            token_hash=new_hash,
            context="session",
            authenticated_at=datetime.now(UTC),
        )
        db.add(new_user_token)
        db.delete(user_token)
        db.commit()
        db.refresh(new_user_token)

        return user, new_user_token, new_plaintext

    return user_token.user, user_token, token


def revoke_session_token(db: Session, token: str) -> None:
    """Delete a session token. Unknown tokens are ignored."""
    db.execute(
        delete(UserToken).where(
            UserToken.token_hash == hash_session_token(token),
            UserToken.context == "session",
        )
    )
    db.commit()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """
    Get a user by ID.

    Args:
        db: Database session
        user_id: User ID

    Returns:
        User if found, None otherwise
    """
    stmt = select(User).where(User.id == user_id)
    return db.execute(stmt).scalar_one_or_none()


def get_user_by_username(db: Session, username: str) -> User:
    """
    Resolve a username to its user.

    Raises:
        NotFoundError: If no user has that username
    """
    stmt = select(User).where(User.username == username)
    user = db.execute(stmt).scalar_one_or_none()
    if not user:
        raise NotFoundError(f"User '{username}' not found")
    return user


def ids_to_usernames(db: Session, user_ids: list[int]) -> list[str]:
    """
    Translate user IDs to usernames, preserving order.

    Raises:
        NotFoundError: If any ID is unknown
    """
    stmt = select(User.id, User.username).where(User.id.in_(user_ids))
    names = {row.id: row.username for row in db.execute(stmt)}

    missing = [user_id for user_id in user_ids if user_id not in names]
    if missing:
        raise NotFoundError(f"User {missing[0]} not found")

    return [names[user_id] for user_id in user_ids]


def is_admin(db: Session, user_id: int) -> bool:
    """Check whether a user holds administrator privilege."""
    user = get_user_by_id(db, user_id)
    return bool(user and user.is_admin)


def create_scope(user: User, token: str | None = None) -> Scope:
    """Create an authorization scope for a user."""
    return Scope(user=user, session_token=token)
