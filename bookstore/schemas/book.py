"""
Book Pydantic Schemas

Two families of schemas live here:
- BookCreate/BookUpdate/BookResponse: the book service's own records
- CompositeBook and friends: what the gateway assembles from the book,
  author and category services
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def coerce_isbn(v: object) -> object:
    """Accept numeric ISBNs (e.g. 97) and store them as strings."""
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


# Digits, hyphens and the X check digit only: an isbn is used as a URL path
# segment by every service.
Isbn = Annotated[
    str,
    BeforeValidator(coerce_isbn),
    Field(min_length=1, max_length=20, pattern=r"^[0-9Xx-]+$"),
]


class BookBase(BaseModel):
    """Base schema with shared book fields."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984", "The Hobbit"],
    )

    price: Decimal = Field(
        ...,
        ge=0,
        le=Decimal("99999999.99"),
        description="Book price in USD",
        examples=["12.99"],
    )

    author_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["George Orwell"],
    )

    genre: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Genre name",
        examples=["Dystopian"],
    )

    pub_date: date = Field(
        ...,
        description="Date of publication",
        examples=["1949-06-08"],
    )


class BookCreate(BookBase):
    """Schema for creating (or fully replacing) a book."""

    isbn: Isbn = Field(
        ...,
        description="ISBN, unique across the catalog",
        examples=["9780451524935", "97"],
    )


class BookUpdate(BaseModel):
    """Schema for partially updating a book. All fields optional."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    price: Decimal | None = Field(default=None, ge=0, le=Decimal("99999999.99"))
    author_name: str | None = Field(default=None, min_length=1, max_length=255)
    genre: str | None = Field(default=None, min_length=1, max_length=100)
    pub_date: date | None = None


class BookResponse(BookCreate):
    """Schema for book responses from the book service."""

    created_at: datetime | None = Field(default=None, description="When the book was created")
    updated_at: datetime | None = Field(default=None, description="When the book was last updated")

    model_config = ConfigDict(from_attributes=True)


class CountResponse(BaseModel):
    """Number of matching records."""

    count: int


# =============================================================================
# Composite (gateway) schemas
# =============================================================================
class AuthorSummary(BaseModel):
    """Author part of a composite book."""

    author_id: int
    author_name: str


class CategorySummary(BaseModel):
    """Category part of a composite book."""

    category_id: int
    genre: str


class CompositeBook(BaseModel):
    """
    A book joined with its author and category by isbn.

    In list responses a book whose author or category could not be fetched
    carries placeholder strings and an error note instead of summaries.
    """

    title: str
    isbn: Isbn
    price: Decimal
    pub_date: date
    author: AuthorSummary | str
    category: CategorySummary | str
    error: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "1984",
                "isbn": "9780451524935",
                "price": "9.99",
                "pub_date": "1949-06-08",
                "author": {"author_id": 1, "author_name": "George Orwell"},
                "category": {"category_id": 2, "genre": "Dystopian"},
            }
        },
    )
