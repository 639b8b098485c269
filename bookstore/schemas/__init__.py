"""
Pydantic Schemas Package

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from bookstore.schemas.author import AuthorCreate, AuthorResponse, AuthorUpdate
from bookstore.schemas.book import (
    AuthorSummary,
    BookCreate,
    BookResponse,
    BookUpdate,
    CategorySummary,
    CompositeBook,
    CountResponse,
)
from bookstore.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
)
from bookstore.schemas.user import (
    AccessTokenResponse,
    LoginRequest,
    MessageResponse,
    OptionalRefreshTokenRequest,
    RefreshTokenRequest,
    SignupRequest,
    TokenPair,
    UserCreate,
    UserResponse,
)

__all__ = [
    "AuthorCreate",
    "AuthorResponse",
    "AuthorUpdate",
    "AuthorSummary",
    "BookCreate",
    "BookResponse",
    "BookUpdate",
    "CategorySummary",
    "CompositeBook",
    "CountResponse",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "AccessTokenResponse",
    "LoginRequest",
    "MessageResponse",
    "OptionalRefreshTokenRequest",
    "RefreshTokenRequest",
    "SignupRequest",
    "TokenPair",
    "UserCreate",
    "UserResponse",
]
