"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Wiring
======
Long-lived collaborators (token signer, permission resolver, downstream
service clients) are built once by the application factory and stored on
app.state. The functions below hand them to routes, so tests can replace
any of them with app.dependency_overrides.

Request pipeline on the gateway
===============================
1. get_current_principal: authenticate (bearer header, else cookies)
2. require_permissions(...): authorize against the caller's role
3. The route handler runs
"""

import logging
from typing import Annotated

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bookstore.config import get_settings
from bookstore.database import get_db
from bookstore.services.book_facade import BookFacade
from bookstore.services.credentials import SqlCredentialStore
from bookstore.services.downstream import ServiceClients
from bookstore.services.errors import Forbidden, Unauthorized
from bookstore.services.permissions import PermissionKey, PermissionResolver
from bookstore.services.security import TokenSigner
from bookstore.services.session import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    refresh_session,
    set_access_cookie,
)
from bookstore.services.tokens import AccessClaims, AccessVerifier, TokenLifecycleManager

logger = logging.getLogger(__name__)
settings = get_settings()

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Application-scoped collaborators
# =============================================================================
def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


def get_permission_resolver(request: Request) -> PermissionResolver:
    return request.app.state.permission_resolver


def get_service_clients(request: Request) -> ServiceClients:
    return request.app.state.service_clients


Signer = Annotated[TokenSigner, Depends(get_token_signer)]
Resolver = Annotated[PermissionResolver, Depends(get_permission_resolver)]
Clients = Annotated[ServiceClients, Depends(get_service_clients)]


def get_book_facade(clients: Clients) -> BookFacade:
    """Facade over the gateway's book, author and category clients."""
    return BookFacade(clients.books, clients.authors, clients.categories)


def get_token_manager(
    db: DbSession,
    signer: Signer,
    resolver: Resolver,
) -> TokenLifecycleManager:
    """Token lifecycle manager bound to this request's database session."""
    return TokenLifecycleManager(SqlCredentialStore(db), signer, resolver)


def get_access_verifier(signer: Signer, resolver: Resolver) -> AccessVerifier:
    return AccessVerifier(signer, resolver)


Facade = Annotated[BookFacade, Depends(get_book_facade)]
TokenManager = Annotated[TokenLifecycleManager, Depends(get_token_manager)]
Verifier = Annotated[AccessVerifier, Depends(get_access_verifier)]


# =============================================================================
# Authentication
# =============================================================================
# HTTPBearer extracts "Authorization: Bearer <token>" and adds the
# "Authorize" button to Swagger UI. auto_error=False lets us fall back to
# the cookies when the header is absent.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    request: Request,
    response: Response,
    verifier: Verifier,
    clients: Clients,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AccessClaims:
    """
    Authenticate the caller.

    1. A bearer header is verified as-is; no fallback if it is bad.
    2. Otherwise the accessToken cookie is verified.
    3. If that cookie is missing or stale and a refreshToken cookie is
       present, a new access token is fetched from the auth service and
       set as the accessToken cookie on this response.

    Raises:
        Unauthorized: No usable credential
        SessionExpired: The cookie session could not be refreshed
    """
    if credentials is not None:
        return verifier.verify(credentials.credentials)

    access_token = request.cookies.get(ACCESS_COOKIE)
    refresh_token = request.cookies.get(REFRESH_COOKIE)

    if access_token:
        try:
            return verifier.verify(access_token)
        except Unauthorized:
            if not refresh_token:
                raise
    elif not refresh_token:
        raise Unauthorized("Token not provided")

    new_access_token = await refresh_session(clients.auth, refresh_token)
    set_access_cookie(response, settings, new_access_token)
    logger.info("Refreshed cookie session access token")
    return verifier.verify(new_access_token)


CurrentPrincipal = Annotated[AccessClaims, Depends(get_current_principal)]


# =============================================================================
# Authorization
# =============================================================================
def require_permissions(*required: PermissionKey):
    """
    Build a dependency that lets the request through only if the caller's
    role grants every one of the given permission keys.

    Usage:
        @router.delete("/books/{isbn}")
        async def delete_book(
            principal: Annotated[AccessClaims, Depends(
                require_permissions(PermissionKey.DELETE_BOOK)
            )],
        ): ...
    """
    needed = frozenset(required)

    def check_permissions(principal: CurrentPrincipal) -> AccessClaims:
        missing = needed - principal.permissions
        if missing:
            logger.info(
                f"User {principal.user_id} ({principal.role}) denied, "
                f"missing {sorted(missing)}"
            )
            raise Forbidden("Not allowed to access this resource")
        return principal

    return check_permissions
