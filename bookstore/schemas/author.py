"""
Author Pydantic Schemas

Schemas for the author service.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.schemas.book import Isbn


class AuthorCreate(BaseModel):
    """Schema for creating an author."""

    isbn: Isbn = Field(..., description="ISBN of the book this author wrote")

    author_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author's full name",
        examples=["George Orwell", "Jane Austen"],
    )

    @field_validator("author_name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """Validate and normalize author name."""
        if not v.strip():
            raise ValueError("Author name cannot be empty or whitespace")
        return v.strip()


class AuthorUpdate(BaseModel):
    """Schema for updating an author. All fields optional."""

    isbn: Isbn | None = None
    author_name: str | None = Field(default=None, min_length=1, max_length=255)


class AuthorResponse(AuthorCreate):
    """Schema for author responses."""

    author_id: int = Field(..., description="Unique identifier")

    model_config = ConfigDict(from_attributes=True)
