"""Authentication routes."""
from fastapi import APIRouter, status

from verity.api.deps import AppSettings, CurrentScope, DatabaseSession
from verity.core.auth import (
    authenticate_user,
    create_session_token,
    create_user,
    revoke_session_token,
)
from verity.core.errors import UnauthenticatedError
from verity.schemas.user import TokenResponse, UserCreate, UserLogin, UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: DatabaseSession, settings: AppSettings):
    """
    Register a new user.

    Args:
        user_data: User registration data
        db: Database session
        settings: Application settings

    Returns:
        Created user
    """
    return create_user(db, user_data.username, user_data.password, settings)


@router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, db: DatabaseSession):
    """
    Login and start a session.

    Args:
        credentials: Login credentials
        db: Database session

    Returns:
        Session token

    Raises:
        UnauthenticatedError: If credentials are invalid
    """
    user = authenticate_user(db, credentials.username, credentials.password)
    if not user:
        raise UnauthenticatedError("Incorrect username or password")

    token = create_session_token(db, user)

    return TokenResponse(access_token=token, token_type="bearer")


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(scope: CurrentScope, db: DatabaseSession):
    """End the current session."""
    revoke_session_token(db, scope.session_token)


@router.get("/me", response_model=UserResponse)
def get_current_user(scope: CurrentScope):
    """
    Get current authenticated user.

    Args:
        scope: Current user scope

    Returns:
        Current user
    """
    return scope.user
