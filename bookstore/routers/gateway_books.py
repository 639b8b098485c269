"""
Gateway Books Router

Composite book endpoints. Each route authenticates the caller, checks the
permission key it requires, then hands over to the book facade.

| Route               | Permission |
|---------------------|------------|
| POST /books         | PostBook   |
| GET /books          | ViewBook   |
| GET /books/{id}     | ViewBook   |
| DELETE /books/{isbn}| DeleteBook |
"""

import logging
from typing import Annotated, Any, List

from fastapi import APIRouter, Depends, Header

from bookstore.dependencies import Facade, require_permissions
from bookstore.schemas import BookCreate, BookResponse, CompositeBook
from bookstore.services.permissions import PermissionKey
from bookstore.services.tokens import AccessClaims

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/books",
    tags=["Gateway Books"],
    responses={
        401: {"description": "Missing or invalid credentials"},
        403: {"description": "Role lacks the required permission"},
    },
)


@router.post(
    "",
    response_model=BookResponse,
    summary="Create a book",
    description="""
    Create the book, then its author and category records.

    A failure in any step returns that service's status; 422 means the
    isbn already exists. Records created before the failure are kept.
    """,
)
async def create_book(
    book: BookCreate,
    facade: Facade,
    principal: Annotated[AccessClaims, Depends(require_permissions(PermissionKey.POST_BOOK))],
) -> Any:
    logger.info(f"User {principal.user_id} creating book {book.isbn}")
    return await facade.create_book(book)


@router.get(
    "",
    response_model=List[CompositeBook],
    summary="List books with details",
    description="Every book with its author and category. Books whose details cannot be fetched are marked with an error.",
)
async def list_books(
    facade: Facade,
    _: Annotated[AccessClaims, Depends(require_permissions(PermissionKey.VIEW_BOOK))],
) -> List[CompositeBook]:
    return await facade.list_books()


@router.get(
    "/{book_id}",
    response_model=CompositeBook,
    summary="Get a book with details",
)
async def get_book(
    book_id: str,
    facade: Facade,
    _: Annotated[AccessClaims, Depends(require_permissions(PermissionKey.VIEW_BOOK))],
) -> CompositeBook:
    return await facade.get_book(book_id)


@router.delete(
    "/{isbn}",
    response_model=str,
    summary="Delete a book and its associations",
    description="Delete the book, then (best-effort) its author and category records.",
)
async def delete_book(
    isbn: str,
    facade: Facade,
    principal: Annotated[AccessClaims, Depends(require_permissions(PermissionKey.DELETE_BOOK))],
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    logger.info(f"User {principal.user_id} deleting book {isbn}")
    return await facade.delete_book(isbn, authorization)
