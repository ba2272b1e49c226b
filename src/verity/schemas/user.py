"""User Pydantic schemas."""
from datetime import datetime

from pydantic import BaseModel, Field


class UserBase(BaseModel):
    """Base user schema."""

    username: str = Field(
        ..., min_length=3, max_length=32, pattern=r"^[a-zA-Z0-9_.-]+$",
        description="Username (3-32 chars, alphanumeric + _ . -)"
    )


class UserCreate(UserBase):
    """Schema for creating a user."""

    password: str = Field(
        ..., min_length=12, max_length=72, description="Password (12-72 characters)"
    )


class UserLogin(BaseModel):
    """Schema for user login."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class UserResponse(UserBase):
    """Schema for user response."""

    id: int
    is_admin: bool
    inserted_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Schema for token response."""

    access_token: str
    token_type: str = "bearer"
