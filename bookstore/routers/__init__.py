"""
API Routers Package

Routers for every service in the bookstore. Each application factory in
main.py includes only the routers of the service it builds.

Router Structure:
- auth.py, users.py: auth service (signup, login, tokens, users)
- books.py: book service
- authors.py: author service
- categories.py: category service
- gateway_auth.py, gateway_books.py, gateway_users.py: the gateway
"""

from bookstore.routers.auth import router as auth_router
from bookstore.routers.authors import router as authors_router
from bookstore.routers.books import router as books_router
from bookstore.routers.categories import router as categories_router
from bookstore.routers.gateway_auth import router as gateway_auth_router
from bookstore.routers.gateway_books import router as gateway_books_router
from bookstore.routers.gateway_users import router as gateway_users_router
from bookstore.routers.users import router as users_router

__all__ = [
    "auth_router",
    "authors_router",
    "books_router",
    "categories_router",
    "gateway_auth_router",
    "gateway_books_router",
    "gateway_users_router",
    "users_router",
]
