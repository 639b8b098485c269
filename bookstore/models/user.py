"""
User Model

Users of the auth service. The role is fixed by the signup endpoint
(never taken from the client) and drives the gateway's permission checks.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.refresh_token import RefreshToken


class Role(str, Enum):
    """
    Roles a user can hold.

    - USER: read-only access to the catalog
    - ADMIN: full catalog and user management
    """
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    User model.

    Table: users

    Relationships:
    - refresh_tokens: One-to-Many, removed together with the user

    Indexes:
    - name: Unique index for login lookups

    Example:
        user = User(
            name="alice",
            email="alice@example.com",
            password_hash=hash_password("secret123"),
            role=Role.USER.value,
        )
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique login name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User's email address"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    role: Mapped[str] = mapped_column(
        String(20),
        default=Role.USER.value,
        nullable=False,
        comment="Role name resolved to permissions by the gateway"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user signed up"
    )

    refresh_tokens: Mapped[list["RefreshToken"]] = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, name='{self.name}', role='{self.role}')"
