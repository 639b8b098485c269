"""
pytest Fixtures for Bookstore Tests

Shared fixtures for every service's tests.

FIXTURE LAYOUT:
===============
- engine / db_session: SQLite in-memory database, rolled back per test
- auth_client, book_client, author_client, category_client: TestClients for
  the backend services, bound to db_session
- fake_clients / gateway_client: the gateway with AsyncMock downstream
  clients, so gateway tests never touch a network or a database
- token helpers: signed access tokens for an admin and a regular user
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["JWT_ACCESS_SECRET"] = "test-access-secret-for-unit-tests-at-least-32-characters"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-for-unit-tests-at-least-32-characters"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"

from collections.abc import Generator
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookstore.config import get_settings
from bookstore.database import Base, get_db
from bookstore.main import (
    create_auth_app,
    create_author_service_app,
    create_book_service_app,
    create_category_service_app,
    create_gateway_app,
)
from bookstore.models import Author, Book, Category, Role, User
from bookstore.services.downstream import ServiceClient, ServiceClients
from bookstore.services.permissions import DEFAULT_ROLE_PERMISSIONS, PermissionResolver
from bookstore.services.security import TokenSigner, hash_password


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory: fast, isolated, no external database needed.
# StaticPool keeps the single in-memory connection alive for the session.

@pytest.fixture(scope="session")
def engine():
    """Create a SQLite in-memory database engine with every table."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is wrapped in a transaction that's rolled back,
    so tests don't affect each other.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


def _client_for(app: FastAPI, db_session: Session) -> Generator[TestClient, None, None]:
    """TestClient for a backend app whose get_db yields the test session."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# TOKEN FIXTURES
# =============================================================================
@pytest.fixture
def token_signer() -> TokenSigner:
    """Signer using the test secrets, as every app under test does."""
    return TokenSigner.from_settings(get_settings())


@pytest.fixture
def resolver() -> PermissionResolver:
    return PermissionResolver(DEFAULT_ROLE_PERMISSIONS)


def make_access_token(signer: TokenSigner, role: str, user_id: int = 1) -> str:
    return signer.sign_access({
        "sub": str(user_id),
        "username": f"{role}-user",
        "email": f"{role}@example.com",
        "role": role,
    })


@pytest.fixture
def admin_headers(token_signer: TokenSigner) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_access_token(token_signer, 'admin')}"}


@pytest.fixture
def user_headers(token_signer: TokenSigner) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_access_token(token_signer, 'user', 2)}"}


# =============================================================================
# BACKEND SERVICE CLIENTS
# =============================================================================
@pytest.fixture
def auth_client(db_session: Session) -> Generator[TestClient, None, None]:
    yield from _client_for(create_auth_app(), db_session)


@pytest.fixture
def book_client(db_session: Session) -> Generator[TestClient, None, None]:
    yield from _client_for(create_book_service_app(), db_session)


@pytest.fixture
def author_client(db_session: Session) -> Generator[TestClient, None, None]:
    yield from _client_for(create_author_service_app(), db_session)


@pytest.fixture
def category_client(db_session: Session) -> Generator[TestClient, None, None]:
    yield from _client_for(create_category_service_app(), db_session)


# =============================================================================
# GATEWAY FIXTURES
# =============================================================================
def fake_service(name: str) -> AsyncMock:
    """AsyncMock standing in for one downstream ServiceClient."""
    service = AsyncMock(spec=ServiceClient)
    service.name = name
    return service


@pytest.fixture
def fake_clients() -> ServiceClients:
    return ServiceClients(
        books=fake_service("book"),
        authors=fake_service("author"),
        categories=fake_service("category"),
        auth=fake_service("auth"),
    )


@pytest.fixture
def gateway_client(fake_clients: ServiceClients) -> Generator[TestClient, None, None]:
    """Gateway wired to AsyncMock downstream clients."""
    app = create_gateway_app(service_clients=fake_clients)
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_user(db_session: Session) -> User:
    """A regular user with password "reader-password"."""
    user = User(
        name="reader",
        email="reader@example.com",
        password_hash=hash_password("reader-password"),
        role=Role.USER.value,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_admin(db_session: Session) -> User:
    user = User(
        name="admin",
        email="admin@example.com",
        password_hash=hash_password("admin-password"),
        role=Role.ADMIN.value,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_book(db_session: Session) -> Book:
    book = Book(
        isbn="9780451524935",
        title="1984",
        price=Decimal("12.99"),
        author_name="George Orwell",
        genre="Dystopian",
        pub_date=date(1949, 6, 8),
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def sample_author(db_session: Session) -> Author:
    author = Author(isbn="9780451524935", author_name="George Orwell")
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_category(db_session: Session) -> Category:
    category = Category(isbn="9780451524935", genre="Dystopian")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def book_payload() -> dict:
    """Request body for creating a book."""
    return {
        "isbn": "9780451524935",
        "title": "1984",
        "price": "12.99",
        "author_name": "George Orwell",
        "genre": "Dystopian",
        "pub_date": "1949-06-08",
    }
