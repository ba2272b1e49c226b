"""Database models."""
from verity.models.token import UserToken
from verity.models.user import User
from verity.models.verification import VerificationRequest, VerificationStatus

__all__ = [
    "User",
    "UserToken",
    "VerificationRequest",
    "VerificationStatus",
]
