"""
Author Model

Author records owned by the author service, looked up by isbn.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.database import Base


class Author(Base):
    """
    Author model.

    Table: authors
    """

    __tablename__ = "authors"

    author_id: Mapped[int] = mapped_column(primary_key=True)

    isbn: Mapped[str] = mapped_column(
        String(20),
        index=True,
        nullable=False,
        comment="ISBN of the book this author is attached to"
    )

    author_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Author's full name"
    )

    def __repr__(self) -> str:
        return f"Author(author_id={self.author_id}, author_name='{self.author_name}')"
