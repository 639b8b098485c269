"""
SQLAlchemy Models Package

Import all models here so they are registered with Base.metadata
(Alembic autogenerate and create_tables rely on it).

- User, RefreshToken: auth service
- Book: book service
- Author: author service
- Category: category service
"""

from bookstore.models.user import Role, User
from bookstore.models.refresh_token import RefreshToken
from bookstore.models.book import Book
from bookstore.models.author import Author
from bookstore.models.category import Category

__all__ = [
    "Role",
    "User",
    "RefreshToken",
    "Book",
    "Author",
    "Category",
]
