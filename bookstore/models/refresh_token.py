"""
Refresh Token Model

One row per issued refresh token. A refresh token is valid only while its
row exists and expires_at is in the future; logout deletes the row and an
expired row is deleted the next time it is presented.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.user import User


class RefreshToken(Base):
    """
    Stored refresh token.

    Table: refresh_tokens

    The signed token string itself is the primary key.
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(
        String(512),
        primary_key=True,
        comment="Signed refresh token"
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
        comment="Owner of the token"
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the token stops being accepted"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="refresh_tokens")

    def is_expired(self, now: datetime) -> bool:
        """
        Check the stored expiry against now.

        SQLite hands back naive datetimes even for timezone-aware columns;
        those are stored in UTC.
        """
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return expires_at <= now

    def __repr__(self) -> str:
        return f"RefreshToken(user_id={self.user_id}, expires_at={self.expires_at})"
