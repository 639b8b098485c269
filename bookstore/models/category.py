"""
Category Model

Category records owned by the category service, looked up by isbn.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.database import Base


class Category(Base):
    """
    Category model.

    Table: categories
    """

    __tablename__ = "categories"

    category_id: Mapped[int] = mapped_column(primary_key=True)

    isbn: Mapped[str] = mapped_column(
        String(20),
        index=True,
        nullable=False,
        comment="ISBN of the book this category is attached to"
    )

    genre: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Genre name (e.g., 'Fiction', 'Biography')"
    )

    def __repr__(self) -> str:
        return f"Category(category_id={self.category_id}, genre='{self.genre}')"
