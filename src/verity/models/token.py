"""Session token model."""

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, LargeBinary, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from verity.database import Base


class UserToken(Base):
    """Bearer session token; only the SHA-256 digest is stored."""

    __tablename__ = "users_tokens"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token_hash: Mapped[bytes] = mapped_column(LargeBinary, unique=True, nullable=False, index=True)
    context: Mapped[str] = mapped_column(String, nullable=False, default="session")
    authenticated_at: Mapped[datetime | None] = mapped_column(nullable=True)
    inserted_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), default=lambda: datetime.now(UTC)
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="session_tokens")

    def __repr__(self) -> str:
        return f"<UserToken(id={self.id}, user_id={self.user_id}, context={self.context})>"
