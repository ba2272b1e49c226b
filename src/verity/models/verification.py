"""Verification request model."""

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from verity.database import Base

PENDING_SUBJECT_INDEX = "idx_verification_requests_pending_subject"


class VerificationStatus(str, Enum):
    """Verification request status enum."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VerificationRequest(Base):
    """A subject's request to be verified, reviewed by an administrator."""

    __tablename__ = "verification_requests"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    subject_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    credentials: Mapped[str] = mapped_column(String(4000), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=VerificationStatus.PENDING.value, index=True
    )
    review_note: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    reviewed_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    inserted_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="check_verification_status",
        ),
        # At most one pending request per subject
        Index(
            PENDING_SUBJECT_INDEX,
            "subject_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
        # Deleted ids are never handed out again
        {"sqlite_autoincrement": True},
    )

    # Relationships
    subject: Mapped["User"] = relationship(
        "User",
        foreign_keys=[subject_id],
        back_populates="verification_requests",
    )
    reviewed_by: Mapped["User | None"] = relationship("User", foreign_keys=[reviewed_by_id])

    @property
    def username(self) -> str:
        return self.subject.username

    def __repr__(self) -> str:
        return (
            f"<VerificationRequest(id={self.id}, subject_id={self.subject_id}, "
            f"status={self.status})>"
        )
