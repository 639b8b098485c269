"""
Authentication Router (auth service)

Handles:
- Signup as a regular user or as an admin (the role is set by the path)
- Login (name/password -> access and refresh token)
- Token refresh (refresh token -> new access token)
- Logout (revoke a refresh token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Access tokens are short-lived (15 min default)
- Refresh tokens are longer-lived (7 days default) and stored server-side
  so they can be revoked
"""

import logging

from fastapi import APIRouter

from bookstore.dependencies import TokenManager
from bookstore.models.user import Role
from bookstore.schemas import (
    AccessTokenResponse,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    SignupRequest,
    TokenPair,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized"},
        409: {"description": "Conflict (name already exists)"},
    },
)


# -------------------------------------------------------------------------
# Signup Endpoints
# -------------------------------------------------------------------------
@router.post(
    "/signup",
    response_model=TokenPair,
    summary="Sign up as a user",
    description="Create an account with the `user` role. A role in the body is ignored.",
)
def signup(data: SignupRequest, tokens: TokenManager) -> TokenPair:
    return tokens.signup(data, Role.USER)


@router.post(
    "/admin/signup",
    response_model=TokenPair,
    summary="Sign up as an admin",
    description="Create an account with the `admin` role. A role in the body is ignored.",
)
def admin_signup(data: SignupRequest, tokens: TokenManager) -> TokenPair:
    return tokens.signup(data, Role.ADMIN)


# -------------------------------------------------------------------------
# Session Endpoints
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=TokenPair,
    summary="Log in",
    description="Exchange name and password for an access and a refresh token.",
)
def login(credentials: LoginRequest, tokens: TokenManager) -> TokenPair:
    """
    Log in with name and password.

    Returns:
        accessToken (15 min) and refreshToken (7 days)

    Raises:
        401: Unknown name ("Invalid credentials") or wrong password
    """
    return tokens.login(credentials.name, credentials.password)


@router.post(
    "/refresh-token",
    response_model=AccessTokenResponse,
    summary="Refresh the access token",
    description="""
    Get a new access token for a stored, unexpired refresh token.

    The refresh token itself is returned unchanged and stays valid.
    """,
)
def refresh_token(body: RefreshTokenRequest, tokens: TokenManager) -> AccessTokenResponse:
    access_token = tokens.refresh_access(body.refresh_token)
    return AccessTokenResponse(access_token=access_token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
    description="Revoke a refresh token. Revoking an already revoked token also succeeds.",
)
def logout(body: RefreshTokenRequest, tokens: TokenManager) -> MessageResponse:
    return MessageResponse(message=tokens.revoke(body.refresh_token))
