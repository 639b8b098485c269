"""
Credential Store

Persistence for users and refresh-token rows, behind a small Protocol so
the token lifecycle logic can be exercised against any implementation.
Every operation touches a single row and commits on its own; there is no
multi-row transaction.
"""

import logging
from datetime import datetime
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.models import RefreshToken, User
from bookstore.services.errors import Conflict

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    """Port for user and refresh-token persistence."""

    def get_user(self, user_id: int) -> User | None: ...

    def get_user_by_name(self, name: str) -> User | None: ...

    def create_user(
        self, *, name: str, email: str, password_hash: str, role: str
    ) -> User: ...

    def add_refresh_token(
        self, *, token: str, user_id: int, expires_at: datetime
    ) -> RefreshToken: ...

    def get_refresh_token(self, token: str) -> RefreshToken | None: ...

    def delete_refresh_token(self, token: str) -> bool: ...


class SqlCredentialStore:
    """CredentialStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_user(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_user_by_name(self, name: str) -> User | None:
        stmt = select(User).where(User.name == name)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_user(
        self, *, name: str, email: str, password_hash: str, role: str
    ) -> User:
        """
        Insert a user.

        Raises:
            Conflict: The name is taken, including by a concurrent insert
        """
        user = User(name=name, email=email, password_hash=password_hash, role=role)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Insert of user {name} lost to an existing row")
            raise Conflict("Username already exists")
        self.db.refresh(user)
        return user

    def add_refresh_token(
        self, *, token: str, user_id: int, expires_at: datetime
    ) -> RefreshToken:
        row = RefreshToken(token=token, user_id=user_id, expires_at=expires_at)
        self.db.add(row)
        self.db.commit()
        return row

    def get_refresh_token(self, token: str) -> RefreshToken | None:
        return self.db.get(RefreshToken, token)

    def delete_refresh_token(self, token: str) -> bool:
        """
        Delete a refresh-token row.

        Returns:
            True if a row was deleted, False if none matched
        """
        result = self.db.execute(delete(RefreshToken).where(RefreshToken.token == token))
        self.db.commit()
        return result.rowcount > 0
