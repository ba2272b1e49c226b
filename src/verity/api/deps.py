"""FastAPI dependencies for authentication and database."""

from typing import Annotated

from fastapi import Depends, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from verity.config import Settings, get_settings
from verity.core.auth import create_scope, verify_session_token
from verity.core.errors import UnauthenticatedError
from verity.core.scope import Scope
from verity.database import get_db

# HTTP Bearer token authentication
bearer_scheme = HTTPBearer(auto_error=False)

# Carries the replacement token after a rotation
SESSION_TOKEN_HEADER = "X-Session-Token"


def get_current_scope(
    token: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    response: Response,
) -> Scope:
    """
    Resolve the caller from their session token.

    Args:
        token: Bearer token from Authorization header
        db: Database session
        settings: Application settings
        response: Outgoing response, used to hand back a rotated token

    Returns:
        Scope object with current user

    Raises:
        UnauthenticatedError: If the token is missing, unknown or expired
    """
    if not token:
        raise UnauthenticatedError("Not authenticated")

    verified = verify_session_token(db, token.credentials, settings)
    if not verified:
        raise UnauthenticatedError("Invalid or expired session")

    user, _, current_token = verified
    if current_token != token.credentials:
        response.headers[SESSION_TOKEN_HEADER] = current_token

    return create_scope(user, current_token)


# Type aliases for cleaner dependency injection
CurrentScope = Annotated[Scope, Depends(get_current_scope)]
DatabaseSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
