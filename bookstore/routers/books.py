"""
Books Router (book service)

CRUD endpoints for book records, keyed by isbn.

The gateway's book facade calls these; the author and category records
that belong to a book live in their own services.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from bookstore.dependencies import DbSession
from bookstore.models import Book
from bookstore.schemas import BookCreate, BookResponse, BookUpdate, CountResponse
from bookstore.schemas.book import BookBase

logger = logging.getLogger(__name__)

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================
def get_book_or_404(db: DbSession, isbn: str) -> Book:
    """
    Get a book by isbn or raise 404.

    Raises:
        HTTPException: 404 if book not found
    """
    book = db.get(Book, isbn)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book with isbn {isbn} not found",
        )
    return book


def duplicate_isbn(isbn: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"Duplicate entry for isbn {isbn}",
    )


# =============================================================================
# CRUD Endpoints
# =============================================================================
@router.get(
    "",
    response_model=List[BookResponse],
    summary="List books",
    description="List books, optionally filtered by genre, with limit/skip paging.",
)
def list_books(
    db: DbSession,
    genre: str | None = Query(default=None, description="Only books of this genre"),
    limit: int | None = Query(default=None, ge=1, description="Maximum number of books"),
    skip: int = Query(default=0, ge=0, description="Number of books to skip"),
) -> List[BookResponse]:
    stmt = select(Book).order_by(Book.created_at, Book.isbn)
    if genre:
        stmt = stmt.where(Book.genre == genre)
    stmt = stmt.offset(skip)
    if limit is not None:
        stmt = stmt.limit(limit)
    books = db.execute(stmt).scalars().all()
    return [BookResponse.model_validate(b) for b in books]


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Count books",
)
def count_books(
    db: DbSession,
    genre: str | None = Query(default=None, description="Only count this genre"),
) -> CountResponse:
    stmt = select(func.count()).select_from(Book)
    if genre:
        stmt = stmt.where(Book.genre == genre)
    return CountResponse(count=db.execute(stmt).scalar() or 0)


@router.get(
    "/{isbn}",
    response_model=BookResponse,
    summary="Get a book by isbn",
)
def get_book(isbn: str, db: DbSession) -> BookResponse:
    return BookResponse.model_validate(get_book_or_404(db, isbn))


@router.post(
    "",
    response_model=BookResponse,
    summary="Create a book",
    description="Create a book record. An isbn that already exists is rejected with 422.",
)
def create_book(book_data: BookCreate, db: DbSession) -> BookResponse:
    """
    Create a new book.

    Raises:
        HTTPException: 422 if the isbn already exists
    """
    if db.get(Book, book_data.isbn) is not None:
        raise duplicate_isbn(book_data.isbn)

    book = Book(**book_data.model_dump())
    db.add(book)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent insert of the same isbn
        db.rollback()
        raise duplicate_isbn(book_data.isbn)
    db.refresh(book)

    logger.info(f"Created book {book.isbn}")
    return BookResponse.model_validate(book)


@router.put(
    "/{isbn}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Replace a book",
    description="Replace every field of an existing book except its isbn.",
)
def replace_book(isbn: str, book_data: BookBase, db: DbSession) -> None:
    book = get_book_or_404(db, isbn)
    for field, value in book_data.model_dump().items():
        setattr(book, field, value)
    db.commit()


@router.patch(
    "/{isbn}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a book",
    description="Update only the fields present in the body.",
)
def update_book(isbn: str, book_data: BookUpdate, db: DbSession) -> None:
    book = get_book_or_404(db, isbn)

    # model_dump(exclude_unset=True) returns only fields that were set
    for field, value in book_data.model_dump(exclude_unset=True).items():
        setattr(book, field, value)
    db.commit()


@router.delete(
    "/{isbn}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
)
def delete_book(isbn: str, db: DbSession) -> None:
    book = get_book_or_404(db, isbn)
    db.delete(book)
    db.commit()
    logger.info(f"Deleted book {isbn}")
