"""Scope-based authorization."""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from verity.core.errors import PermissionDeniedError
from verity.models import User, VerificationRequest


@dataclass
class Scope:
    """Authorization scope containing the current user and their session."""

    user: User
    session_token: str | None = None


def require_admin(db: Session, scope: Scope, action: str) -> None:
    """
    Refuse the action unless the scoped user is an administrator.

    Args:
        db: Database session
        scope: Authorization scope
        action: Verb phrase for the error message, e.g. "approve requests"

    Raises:
        PermissionDeniedError: If the user is not an administrator
    """
    from verity.core.auth import is_admin

    if not is_admin(db, scope.user.id):
        raise PermissionDeniedError(f"You do not have permission to {action}.")


def can_access_request(db: Session, scope: Scope, request: VerificationRequest) -> bool:
    """
    Check if the user in scope can read or delete the given request.

    The subject and administrators can; nobody else.
    """
    if request.subject_id == scope.user.id:
        return True

    from verity.core.auth import is_admin

    return is_admin(db, scope.user.id)
