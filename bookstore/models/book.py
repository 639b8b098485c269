"""
Book Model

Books owned by the book service, keyed by isbn. Authors and categories live
in their own services and are joined to a book by isbn only, so there is no
foreign key across them.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.database import Base


class Book(Base):
    """
    Book model.

    Table: books

    Example:
        book = Book(
            isbn="9780451524935",
            title="1984",
            price=Decimal("9.99"),
            author_name="George Orwell",
            genre="Dystopian",
            pub_date=date(1949, 6, 8),
        )
    """

    __tablename__ = "books"

    # A duplicate isbn is rejected by the primary key constraint
    isbn: Mapped[str] = mapped_column(
        String(20),
        primary_key=True,
        comment="ISBN, unique across the catalog"
    )

    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Price in USD"
    )

    author_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Author name as submitted with the book"
    )

    genre: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Genre as submitted with the book"
    )

    pub_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Publication date"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"Book(isbn='{self.isbn}', title='{self.title}')"
