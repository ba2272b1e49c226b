"""Core application modules."""
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
from verity.core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    VerityError,
)
from verity.core.scope import Scope, can_access_request, require_admin
from verity.core.security import (
    generate_random_token,
    generate_session_token,
    hash_password,
    hash_session_token,
    verify_password,
)

__all__ = [
    # Auth
    "authenticate_user",
    "create_user",
    "create_session_token",
    "verify_session_token",
    "revoke_session_token",
    "get_user_by_id",
    "get_user_by_username",
    "ids_to_usernames",
    "is_admin",
    "create_scope",
    # Errors
    "VerityError",
    "InvalidInputError",
    "UnauthenticatedError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    # Scope
    "Scope",
    "require_admin",
    "can_access_request",
    # Security
    "hash_password",
    "verify_password",
    "generate_random_token",
    "generate_session_token",
    "hash_session_token",
]
