"""Pydantic schemas for request/response validation."""
from verity.schemas.user import (
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from verity.schemas.verification import (
    MessageResponse,
    VerificationCreatedResponse,
    VerificationListResponse,
    VerificationReject,
    VerificationRequestCreate,
    VerificationRequestResponse,
    VerificationStatusResponse,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    # Verification schemas
    "VerificationRequestCreate",
    "VerificationReject",
    "VerificationRequestResponse",
    "VerificationCreatedResponse",
    "VerificationListResponse",
    "VerificationStatusResponse",
    "MessageResponse",
]
