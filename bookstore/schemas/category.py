"""
Category Pydantic Schemas

Schemas for the category service. Follows the same pattern as the author
schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.schemas.book import Isbn


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    isbn: Isbn

    genre: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Genre name",
        examples=["Fiction", "Biography"],
    )

    @field_validator("genre")
    @classmethod
    def genre_must_not_be_empty(cls, v: str) -> str:
        """Validate and normalize genre."""
        if not v.strip():
            raise ValueError("Genre cannot be empty or whitespace")
        return v.strip()


class CategoryUpdate(BaseModel):
    """Schema for updating a category. All fields optional."""

    isbn: Isbn | None = None
    genre: str | None = Field(default=None, min_length=1, max_length=100)


class CategoryResponse(CategoryCreate):
    """Schema for category responses."""

    category_id: int = Field(..., description="Unique identifier")

    model_config = ConfigDict(from_attributes=True)
