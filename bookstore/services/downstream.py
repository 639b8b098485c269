"""
Downstream Service Client

One ServiceClient per backend service (book, author, category, auth),
each wrapping a shared httpx.AsyncClient opened by the gateway lifespan.

Every failure leaves the client as exactly one DownstreamError variant:

    DownstreamResponseError  the service answered with a non-2xx status
    DownstreamUnavailable    no answer: connect error, timeout, dropped
    DownstreamRequestError   anything else (bad request setup, body not JSON)

Callers catch DownstreamError and either re-raise a wrapped service error
(via to_service_error) or log and carry on. No retries are made.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from bookstore.config import Settings
from bookstore.services.errors import (
    GatewayTimeout,
    InternalServerError,
    ServiceError,
    error_for_status,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Error variants
# =============================================================================
class DownstreamError(Exception):
    """Base of the closed set of downstream failures."""

    def __init__(self, service: str, detail: str) -> None:
        super().__init__(f"{service}: {detail}")
        self.service = service
        self.detail = detail

    def to_service_error(self, message: str | None = None) -> ServiceError:
        return InternalServerError(message or self.detail)


class DownstreamResponseError(DownstreamError):
    """The service answered, with a non-2xx status."""

    def __init__(
        self, service: str, status_code: int, detail: str, body: Any = None
    ) -> None:
        super().__init__(service, detail)
        self.status_code = status_code
        self.body = body

    def to_service_error(self, message: str | None = None) -> ServiceError:
        return error_for_status(self.status_code, message or self.detail)


class DownstreamUnavailable(DownstreamError):
    """No response arrived."""

    status_code = 504

    def to_service_error(self, message: str | None = None) -> ServiceError:
        return GatewayTimeout(message or self.detail)


class DownstreamRequestError(DownstreamError):
    """The call could not be completed or its body could not be read."""

    status_code = 500


def extract_detail(response: httpx.Response) -> tuple[str, Any]:
    """
    Pull a human-readable message out of an error response.

    Understands FastAPI's {"detail": ...} and the {"error": {"message": ...}}
    envelope; anything else falls back to the raw text.
    """
    try:
        body = response.json()
    except ValueError:
        return (response.text[:500] or response.reason_phrase or "Unknown error"), None

    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str):
            return detail, body
        if detail is not None:
            return str(detail), body
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"]), body
        if isinstance(body.get("message"), str):
            return body["message"], body
    return (response.text[:500] or "Unknown error"), body


# =============================================================================
# Client
# =============================================================================
class ServiceAPI(Protocol):
    """What the facade needs from a downstream service."""

    name: str

    async def get(
        self, path: str, *, params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any: ...

    async def post(
        self, path: str, *, json: Any = None, headers: dict[str, str] | None = None
    ) -> Any: ...

    async def delete(
        self, path: str, *, headers: dict[str, str] | None = None
    ) -> Any: ...

    async def aclose(self) -> None: ...


class ServiceClient:
    """
    JSON-over-HTTP client for one backend service.

    Returns the decoded JSON body on 2xx (None for an empty body or 204)
    and raises a DownstreamError variant otherwise.

    Example:
        client = ServiceClient("book", httpx.AsyncClient(base_url=url))
        book = await client.get("/books/97")
    """

    def __init__(self, name: str, client: httpx.AsyncClient) -> None:
        self.name = name
        self._client = client

    async def get(
        self, path: str, *, params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._request("GET", path, params=params, headers=headers)

    async def post(
        self, path: str, *, json: Any = None, headers: dict[str, str] | None = None
    ) -> Any:
        return await self._request("POST", path, json=json, headers=headers)

    async def delete(
        self, path: str, *, headers: dict[str, str] | None = None
    ) -> Any:
        return await self._request("DELETE", path, headers=headers)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError) as e:
            logger.error(f"{self.name} service unavailable on {method} {path}: {e!r}")
            raise DownstreamUnavailable(self.name, f"{self.name} service unavailable")
        except httpx.HTTPError as e:
            logger.error(f"{self.name} service request {method} {path} failed: {e!r}")
            raise DownstreamRequestError(self.name, f"{self.name} service request failed")

        if not response.is_success:
            detail, body = extract_detail(response)
            logger.warning(
                f"{self.name} service returned {response.status_code} "
                f"on {method} {path}: {detail}"
            )
            raise DownstreamResponseError(self.name, response.status_code, detail, body)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            logger.error(f"{self.name} service sent a non-JSON body on {method} {path}")
            raise DownstreamRequestError(self.name, f"{self.name} service sent an invalid response")


@dataclass
class ServiceClients:
    """The gateway's downstream clients, one per backend service."""

    books: ServiceAPI
    authors: ServiceAPI
    categories: ServiceAPI
    auth: ServiceAPI

    async def aclose(self) -> None:
        for client in (self.books, self.authors, self.categories, self.auth):
            await client.aclose()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceClients":
        def build(name: str, base_url: str) -> ServiceClient:
            return ServiceClient(
                name,
                httpx.AsyncClient(base_url=base_url, timeout=settings.downstream_timeout),
            )

        return cls(
            books=build("book", settings.book_service_url),
            authors=build("author", settings.author_service_url),
            categories=build("category", settings.category_service_url),
            auth=build("auth", settings.auth_service_url),
        )
