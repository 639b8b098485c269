"""
Cookie Session Helpers

The gateway mirrors the token pair into two cookies so browser clients
need not handle tokens themselves:

- accessToken: max-age 15 minutes
- refreshToken: max-age 7 days

Both are httponly, samesite=strict, path "/" and secure in production.
When a cookie-authenticated request arrives with a stale access token,
refresh_session trades the refresh cookie for a new access token through
the auth service.
"""

import logging

from fastapi import Response

from bookstore.config import Settings
from bookstore.services.downstream import DownstreamError, ServiceAPI
from bookstore.services.errors import SessionExpired

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"
SESSION_EXPIRED = "Session expired. Please login again."


def set_access_cookie(response: Response, settings: Settings, access_token: str) -> None:
    response.set_cookie(
        ACCESS_COOKIE,
        access_token,
        max_age=settings.access_token_max_age,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="strict",
    )


def set_auth_cookies(
    response: Response,
    settings: Settings,
    access_token: str,
    refresh_token: str,
) -> None:
    """Set both auth cookies on the response."""
    set_access_cookie(response, settings, access_token)
    response.set_cookie(
        REFRESH_COOKIE,
        refresh_token,
        max_age=settings.refresh_token_max_age,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="strict",
    )


def clear_auth_cookies(response: Response, settings: Settings) -> None:
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            name,
            path="/",
            secure=settings.is_production,
            httponly=True,
            samesite="strict",
        )


async def refresh_session(auth: ServiceAPI, refresh_token: str) -> str:
    """
    Get a new access token for a cookie session.

    Raises:
        SessionExpired: The auth service refused or could not be reached
    """
    try:
        data = await auth.post("/refresh-token", json={"refreshToken": refresh_token})
    except DownstreamError as e:
        logger.info(f"Cookie session refresh failed: {e.detail}")
        raise SessionExpired(SESSION_EXPIRED)

    access_token = (data or {}).get("accessToken")
    if not access_token:
        logger.warning("Auth service answered refresh without an access token")
        raise SessionExpired(SESSION_EXPIRED)
    return access_token
