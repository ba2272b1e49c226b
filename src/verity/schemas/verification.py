"""Verification request Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from verity.models.verification import VerificationStatus


class VerificationRequestCreate(BaseModel):
    """Schema for submitting a verification request."""

    credentials: str = Field(
        ..., min_length=1, max_length=4000, description="Proof of identity for reviewers"
    )


class VerificationReject(BaseModel):
    """Schema for rejecting a verification request."""

    reason: str | None = Field(None, max_length=1000, description="Shown to the subject")


class VerificationRequestResponse(BaseModel):
    """Schema for verification request response."""

    id: int
    subject_id: int
    username: str
    credentials: str
    status: VerificationStatus
    review_note: str | None = None
    reviewed_by_id: int | None = None
    reviewed_at: datetime | None = None
    inserted_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VerificationCreatedResponse(BaseModel):
    """Schema for a newly submitted request."""

    message: str
    request: VerificationRequestResponse


class VerificationListResponse(BaseModel):
    """Schema for verification request list response."""

    data: list[VerificationRequestResponse]


class VerificationStatusResponse(BaseModel):
    """Schema for the caller's own status."""

    status: str


class MessageResponse(BaseModel):
    """Schema for action confirmations."""

    message: str
