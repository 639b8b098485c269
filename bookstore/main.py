"""
FastAPI Application Entry Points

One application factory per service:

- create_gateway_app(): the API gateway (port 3000)
- create_auth_app(): users and tokens (port 3011)
- create_book_service_app(): books (port 3006)
- create_author_service_app(): authors (port 3005)
- create_category_service_app(): categories (port 3007)

Key Concepts:
=============

1. Application Factory Pattern
   - Each create_*() function returns a configured app
   - Tests build fresh instances and swap collaborators in

2. Lifespan Events
   - The gateway closes its downstream HTTP clients on shutdown

3. Shared Setup
   - CORS, exception handlers and /health are the same for every service

4. Exception Handlers
   - Service errors become {"detail": message} with their own status
   - Database and unexpected errors are logged and hidden behind a 500
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bookstore import __version__
from bookstore.config import get_settings
from bookstore.routers import (
    auth_router,
    authors_router,
    books_router,
    categories_router,
    gateway_auth_router,
    gateway_books_router,
    gateway_users_router,
    users_router,
)
from bookstore.services.downstream import ServiceClients
from bookstore.services.errors import ServiceError, SessionExpired
from bookstore.services.permissions import DEFAULT_ROLE_PERMISSIONS, PermissionResolver
from bookstore.services.security import TokenSigner
from bookstore.services.session import clear_auth_cookies

# =============================================================================
# Logging Configuration
# =============================================================================
# Configure logging before creating any app
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Shared Setup
# =============================================================================
def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers every service shares."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(
        request: Request,
        exc: ServiceError,
    ) -> JSONResponse:
        """
        Render a service-level error as {"detail": message}.

        A failed cookie session refresh also clears both auth cookies.
        """
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        response = JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
            headers=exc.headers,
        )
        if isinstance(exc, SessionExpired):
            clear_auth_cookies(response, settings)
        return response

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error while hiding details from users.
        """
        logger.error(f"Database error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "A database error occurred. Please try again later."
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In production, hide internal errors from users.
        In debug mode, show more details.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug:
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc)},
            )

        return JSONResponse(
            status_code=500,
            content={"detail": "An internal error occurred."},
        )


def build_app(
    service: str,
    description: str,
    routers: list[APIRouter],
    lifespan=None,
) -> FastAPI:
    """
    Create a FastAPI app with the setup every service shares.

    Args:
        service: Short service name, used in the title and /health
        description: Markdown shown at the top of /docs
        routers: Routers to include, in order
        lifespan: Optional lifespan context manager
    """
    app = FastAPI(
        title=f"{settings.app_name} {service.title()} Service",
        description=description,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    # Credentials are allowed so browsers send the auth cookies.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for router in routers:
        app.include_router(router)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the service is running.",
    )
    async def health_check() -> dict:
        """Used by load balancers and orchestration probes."""
        return {
            "status": "healthy",
            "service": service,
            "version": __version__,
        }

    return app


# =============================================================================
# Gateway
# =============================================================================
@asynccontextmanager
async def gateway_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Gateway lifespan.

    The downstream clients live on app.state from factory time; they are
    closed here on shutdown.
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name} gateway...")
    logger.info(f"Book service: {settings.book_service_url}")
    logger.info(f"Author service: {settings.author_service_url}")
    logger.info(f"Category service: {settings.category_service_url}")
    logger.info(f"Auth service: {settings.auth_service_url}")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name} gateway...")
    await app.state.service_clients.aclose()


def create_gateway_app(
    service_clients: ServiceClients | None = None,
    permission_resolver: PermissionResolver | None = None,
    token_signer: TokenSigner | None = None,
) -> FastAPI:
    """
    Create the API gateway.

    Args:
        service_clients: Downstream clients; built from settings if omitted
        permission_resolver: Role table; the default admin/user table if omitted
        token_signer: Verifies access tokens; built from settings if omitted
    """
    app = build_app(
        "gateway",
        """
## Bookstore Gateway

One entry point for the bookstore's services.

### Authentication
`Authorization: Bearer <accessToken>`, or the `accessToken` /
`refreshToken` cookies set by `/login` and the signup endpoints.

### Authorization
Each book and user-administration route requires a permission granted by
the caller's role (`admin` or `user`).
        """,
        [gateway_auth_router, gateway_books_router, gateway_users_router],
        lifespan=gateway_lifespan,
    )

    app.state.service_clients = service_clients or ServiceClients.from_settings(settings)
    app.state.permission_resolver = permission_resolver or PermissionResolver(
        DEFAULT_ROLE_PERMISSIONS
    )
    app.state.token_signer = token_signer or TokenSigner.from_settings(settings)
    return app


# =============================================================================
# Backend Services
# =============================================================================
def create_auth_app(
    permission_resolver: PermissionResolver | None = None,
    token_signer: TokenSigner | None = None,
) -> FastAPI:
    """Create the auth service (signup, login, tokens, users)."""
    app = build_app(
        "auth",
        "Users, signup and login, and the refresh-token lifecycle.",
        [auth_router, users_router],
    )
    app.state.permission_resolver = permission_resolver or PermissionResolver(
        DEFAULT_ROLE_PERMISSIONS
    )
    app.state.token_signer = token_signer or TokenSigner.from_settings(settings)
    return app


def create_book_service_app() -> FastAPI:
    """Create the book service."""
    return build_app("book", "Book records keyed by isbn.", [books_router])


def create_author_service_app() -> FastAPI:
    """Create the author service."""
    return build_app("author", "Author records, looked up by id or isbn.", [authors_router])


def create_category_service_app() -> FastAPI:
    """Create the category service."""
    return build_app(
        "category", "Category records, looked up by id or isbn.", [categories_router]
    )


# =============================================================================
# Application Instance
# =============================================================================
# What uvicorn imports by default: uvicorn bookstore.main:app
# The other services: python -m bookstore <service>

app = create_gateway_app()
