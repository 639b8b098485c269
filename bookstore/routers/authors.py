"""
Authors Router (author service)

CRUD endpoints for author records, plus a lookup by isbn used by the
gateway to attach an author to a book.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from bookstore.dependencies import DbSession
from bookstore.models import Author
from bookstore.schemas import AuthorCreate, AuthorResponse, AuthorUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/authors",
    tags=["Authors"],
    responses={
        404: {"description": "Author not found"},
    },
)


def get_author_or_404(db: DbSession, author_id: int) -> Author:
    """Get an author by ID or raise 404."""
    author = db.get(Author, author_id)
    if author is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Author with id {author_id} not found",
        )
    return author


@router.get(
    "",
    response_model=List[AuthorResponse],
    summary="List all authors",
)
def list_authors(db: DbSession) -> List[AuthorResponse]:
    stmt = select(Author).order_by(Author.author_id)
    authors = db.execute(stmt).scalars().all()
    return [AuthorResponse.model_validate(a) for a in authors]


@router.get(
    "/isbn/{isbn}",
    response_model=AuthorResponse,
    summary="Get the author of a book",
    description="Look up the author record attached to a book's isbn.",
)
def get_author_by_isbn(isbn: str, db: DbSession) -> AuthorResponse:
    stmt = select(Author).where(Author.isbn == isbn).order_by(Author.author_id).limit(1)
    author = db.execute(stmt).scalar_one_or_none()
    if author is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Author for isbn {isbn} not found",
        )
    return AuthorResponse.model_validate(author)


@router.get(
    "/{author_id}",
    response_model=AuthorResponse,
    summary="Get an author by ID",
)
def get_author(author_id: int, db: DbSession) -> AuthorResponse:
    return AuthorResponse.model_validate(get_author_or_404(db, author_id))


@router.post(
    "",
    response_model=AuthorResponse,
    summary="Create an author",
)
def create_author(author_data: AuthorCreate, db: DbSession) -> AuthorResponse:
    author = Author(isbn=author_data.isbn, author_name=author_data.author_name)
    db.add(author)
    db.commit()
    db.refresh(author)

    logger.info(f"Created author {author.author_id} for isbn {author.isbn}")
    return AuthorResponse.model_validate(author)


@router.patch(
    "/{author_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update an author",
)
def update_author(author_id: int, author_data: AuthorUpdate, db: DbSession) -> None:
    author = get_author_or_404(db, author_id)
    for field, value in author_data.model_dump(exclude_unset=True).items():
        setattr(author, field, value)
    db.commit()


@router.delete(
    "/{author_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an author",
)
def delete_author(author_id: int, db: DbSession) -> None:
    author = get_author_or_404(db, author_id)
    db.delete(author)
    db.commit()
