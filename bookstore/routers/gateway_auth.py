"""
Gateway Authentication Router

Public auth endpoints of the gateway, proxied to the auth service. Tokens
are returned in the body and mirrored into accessToken/refreshToken
cookies for browser clients; logout clears both cookies.

Downstream failures keep the auth service's status (401, 409, 422, ...);
an unreachable auth service is a 504.
"""

import logging
from typing import Any

from fastapi import APIRouter, Request, Response

from bookstore.config import get_settings
from bookstore.dependencies import Clients
from bookstore.models.user import Role
from bookstore.schemas import (
    AccessTokenResponse,
    LoginRequest,
    MessageResponse,
    OptionalRefreshTokenRequest,
    SignupRequest,
    TokenPair,
)
from bookstore.services.downstream import (
    DownstreamError,
    DownstreamResponseError,
    DownstreamUnavailable,
)
from bookstore.services.errors import GatewayTimeout, Unauthorized
from bookstore.services.session import (
    REFRESH_COOKIE,
    clear_auth_cookies,
    set_access_cookie,
    set_auth_cookies,
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    tags=["Gateway Authentication"],
    responses={
        401: {"description": "Unauthorized"},
        504: {"description": "Auth service unavailable"},
    },
)


def token_pair_from(data: Any) -> TokenPair:
    """
    Validate the auth service's token pair.

    Raises:
        Unauthorized: Neither token present
    """
    data = data or {}
    access_token = data.get("accessToken") or ""
    refresh_token = data.get("refreshToken") or ""
    if not access_token and not refresh_token:
        raise Unauthorized("Access token or refresh token cannot be empty.")
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


async def _issue_session(
    clients: Clients, path: str, payload: dict[str, Any], response: Response
) -> TokenPair:
    try:
        data = await clients.auth.post(path, json=payload)
    except DownstreamError as e:
        logger.info(f"Auth service rejected {path}: {e.detail}")
        raise e.to_service_error()

    pair = token_pair_from(data)
    set_auth_cookies(response, settings, pair.access_token, pair.refresh_token)
    return pair


# -------------------------------------------------------------------------
# Signup / Login
# -------------------------------------------------------------------------
@router.post(
    "/user/signup",
    response_model=TokenPair,
    summary="Sign up as a user",
    description="Create an account with the `user` role and start a cookie session.",
)
async def signup_user(
    user_data: SignupRequest, response: Response, clients: Clients
) -> TokenPair:
    payload = user_data.model_dump(mode="json")
    payload["role"] = Role.USER.value
    return await _issue_session(clients, "/signup", payload, response)


@router.post(
    "/admin/signup",
    response_model=TokenPair,
    summary="Sign up as an admin",
    description="Create an account with the `admin` role and start a cookie session.",
)
async def signup_admin(
    user_data: SignupRequest, response: Response, clients: Clients
) -> TokenPair:
    payload = user_data.model_dump(mode="json")
    payload["role"] = Role.ADMIN.value
    return await _issue_session(clients, "/admin/signup", payload, response)


@router.post(
    "/login",
    response_model=TokenPair,
    summary="Log in",
    description="Exchange name and password for tokens and start a cookie session.",
)
async def login(
    credentials: LoginRequest, response: Response, clients: Clients
) -> TokenPair:
    return await _issue_session(
        clients, "/login", credentials.model_dump(mode="json"), response
    )


# -------------------------------------------------------------------------
# Refresh / Logout
# -------------------------------------------------------------------------
def _refresh_token_from(request: Request, body: OptionalRefreshTokenRequest | None) -> str:
    token = (body.refresh_token if body else None) or request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise Unauthorized("Refresh token not found")
    return token


@router.post(
    "/refresh-token",
    response_model=AccessTokenResponse,
    summary="Refresh the access token",
    description="Use the refresh token from the body, or the refreshToken cookie.",
)
async def refresh_token(
    request: Request,
    response: Response,
    clients: Clients,
    body: OptionalRefreshTokenRequest | None = None,
) -> AccessTokenResponse:
    token = _refresh_token_from(request, body)
    try:
        data = await clients.auth.post("/refresh-token", json={"refreshToken": token})
    except DownstreamUnavailable as e:
        raise GatewayTimeout(e.detail)
    except DownstreamError as e:
        logger.info(f"Refresh through gateway failed: {e.detail}")
        raise Unauthorized("Token refresh failed")

    access_token = (data or {}).get("accessToken")
    if not access_token:
        raise Unauthorized("Token refresh failed")

    set_access_cookie(response, settings, access_token)
    return AccessTokenResponse(access_token=access_token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
    description="Revoke the refresh token (body or cookie) and clear the auth cookies.",
)
async def logout(
    request: Request,
    response: Response,
    clients: Clients,
    body: OptionalRefreshTokenRequest | None = None,
) -> MessageResponse:
    token = _refresh_token_from(request, body)
    try:
        data = await clients.auth.post("/logout", json={"refreshToken": token})
    except DownstreamResponseError as e:
        raise e.to_service_error(f"Logout failed: {e.detail}")
    except DownstreamUnavailable:
        raise GatewayTimeout("Logout service is unavailable. Please try again later.")
    except DownstreamError as e:
        raise e.to_service_error("An unexpected error occurred during logout.")

    clear_auth_cookies(response, settings)
    return MessageResponse(message=(data or {}).get("message", "Logout successful"))
