"""
Book Facade

Coordinates the book, author and category services so the gateway can
offer a book as one resource.

Partial-failure policy:
=======================
- Create: book, then author, then category, one after the other. The first
  failure aborts; anything already created stays (no rollback).
- Read: the book first, then author and category concurrently. Any failure
  fails the read.
- List: a book whose author or category cannot be fetched is returned in a
  degraded form instead of failing the whole list.
- Delete: the book must be readable and its delete must succeed. Deleting
  its author and category afterwards is best-effort.
"""

import asyncio
import logging
from typing import Any

from bookstore.schemas import AuthorSummary, BookCreate, CategorySummary, CompositeBook
from bookstore.services.downstream import (
    DownstreamError,
    DownstreamResponseError,
    ServiceAPI,
)
from bookstore.services.errors import InternalServerError, NotFound, ServiceError

logger = logging.getLogger(__name__)

AUTHOR_UNAVAILABLE = "Author details not available"
CATEGORY_UNAVAILABLE = "Category details not available"
DETAILS_UNAVAILABLE = "Failed to fetch author or category details"


def _auth_headers(authorization: str | None) -> dict[str, str] | None:
    return {"Authorization": authorization} if authorization else None


class BookFacade:
    """
    Composite create/read/list/delete over three downstream services.

    Example:
        facade = BookFacade(clients.books, clients.authors, clients.categories)
        book = await facade.get_book("97")
    """

    def __init__(
        self,
        books: ServiceAPI,
        authors: ServiceAPI,
        categories: ServiceAPI,
    ) -> None:
        self.books = books
        self.authors = authors
        self.categories = categories

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------
    async def create_book(self, book: BookCreate) -> Any:
        """
        Create the book, then its author and category records.

        Returns:
            The book as stored by the book service

        Raises:
            ServiceError: Carrying the failing service's status
        """
        created_book = False
        try:
            stored = await self.books.post("/books", json=book.model_dump(mode="json"))
            created_book = True
            await self.authors.post(
                "/authors", json={"isbn": book.isbn, "author_name": book.author_name}
            )
            await self.categories.post(
                "/categories", json={"isbn": book.isbn, "genre": book.genre}
            )
        except DownstreamError as e:
            if created_book:
                logger.warning(
                    f"Book {book.isbn} was created but its {e.service} record was not; "
                    "the book is left without associations"
                )
            raise e.to_service_error(
                f"Failed to create book: {e.detail}, "
                "if status code is 422 means book already exists"
            )

        logger.info(f"Created book {book.isbn} with author and category")
        return stored

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------
    async def get_book(
        self, book_id: str, authorization: str | None = None
    ) -> CompositeBook:
        """
        Fetch a book with its author and category.

        Raises:
            NotFound: The book service has no such book
            ServiceError: Any other downstream failure, with its status
        """
        headers = _auth_headers(authorization)
        try:
            book = await self.books.get(f"/books/{book_id}", headers=headers)
        except DownstreamError as e:
            if isinstance(e, DownstreamResponseError) and e.status_code == 404:
                raise NotFound(f"Book with ID {book_id} not found")
            raise e.to_service_error(f"Failed to fetch book with ID {book_id}: {e.detail}")

        # Other book-service routes (e.g. /books/count) answer 2xx with a
        # different body
        if not isinstance(book, dict) or "isbn" not in book:
            raise NotFound(f"Book with ID {book_id} not found")

        author, category = await self._fetch_details(book["isbn"], headers)
        for result in (author, category):
            if isinstance(result, DownstreamError):
                raise result.to_service_error(
                    f"Failed to fetch book with ID {book_id}: {result.detail}"
                )

        return self._compose(book, author, category)

    async def list_books(self) -> list[CompositeBook]:
        """
        Fetch every book with its author and category.

        Raises:
            ServiceError: Only if the book list itself cannot be fetched
        """
        try:
            books = await self.books.get("/books")
        except DownstreamError as e:
            raise e.to_service_error(f"Failed to fetch books: {e.detail}")

        return list(await asyncio.gather(
            *(self._compose_or_degrade(book) for book in books or [])
        ))

    async def _compose_or_degrade(self, book: dict[str, Any]) -> CompositeBook:
        author, category = await self._fetch_details(book["isbn"])
        if isinstance(author, DownstreamError) or isinstance(category, DownstreamError):
            logger.warning(f"Error fetching details for book {book['isbn']}")
            return CompositeBook(
                title=book["title"],
                isbn=book["isbn"],
                price=book["price"],
                pub_date=book["pub_date"],
                author=AUTHOR_UNAVAILABLE,
                category=CATEGORY_UNAVAILABLE,
                error=DETAILS_UNAVAILABLE,
            )
        return self._compose(book, author, category)

    async def _fetch_details(
        self, isbn: str, headers: dict[str, str] | None = None
    ) -> tuple[Any, Any]:
        """
        Look up author and category by isbn concurrently.

        Downstream failures are returned in place of the result; any other
        exception propagates.
        """
        author, category = await asyncio.gather(
            self.authors.get(f"/authors/isbn/{isbn}", headers=headers),
            self.categories.get(f"/categories/isbn/{isbn}", headers=headers),
            return_exceptions=True,
        )
        for result in (author, category):
            if isinstance(result, BaseException) and not isinstance(result, DownstreamError):
                raise result
        return author, category

    @staticmethod
    def _compose(
        book: dict[str, Any], author: dict[str, Any], category: dict[str, Any]
    ) -> CompositeBook:
        return CompositeBook(
            title=book["title"],
            isbn=book["isbn"],
            price=book["price"],
            pub_date=book["pub_date"],
            author=AuthorSummary(
                author_id=author["author_id"], author_name=author["author_name"]
            ),
            category=CategorySummary(
                category_id=category["category_id"], genre=category["genre"]
            ),
        )

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------
    async def delete_book(self, isbn: str, authorization: str | None = None) -> str:
        """
        Delete a book, then its author and category records.

        The book is read through get_book first, as the caller (same
        Authorization header), to learn the author and category ids.

        Raises:
            InternalServerError: Reading or deleting the book failed
        """
        headers = _auth_headers(authorization)
        try:
            book = await self.get_book(isbn, authorization)
        except ServiceError as e:
            logger.error(f"Delete of book {isbn} aborted, fetch failed: {e.message}")
            raise InternalServerError(f"Book fetch failed: {e.message}")

        try:
            await self.books.delete(f"/books/{isbn}", headers=headers)
        except DownstreamError as e:
            logger.error(f"Delete of book {isbn} failed: {e.detail}")
            raise InternalServerError(f"Book delete failed: {e.detail}")

        if isinstance(book.author, AuthorSummary):
            try:
                await self.authors.delete(
                    f"/authors/{book.author.author_id}", headers=headers
                )
            except DownstreamError as e:
                logger.warning(f"Author delete failed: {e.detail}")

        if isinstance(book.category, CategorySummary):
            try:
                await self.categories.delete(
                    f"/categories/{book.category.category_id}", headers=headers
                )
            except DownstreamError as e:
                logger.warning(f"Category delete failed: {e.detail}")

        logger.info(f"Deleted book {isbn} and its associations")
        return f"Book {isbn} and its associations deleted successfully."
