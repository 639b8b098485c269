"""
Tests for the downstream ServiceClient and its error variants.

The HTTP layer is replaced with httpx.MockTransport, so no network is used.
"""

import httpx
import pytest

from bookstore.services.downstream import (
    DownstreamError,
    DownstreamRequestError,
    DownstreamResponseError,
    DownstreamUnavailable,
    ServiceClient,
    extract_detail,
)
from bookstore.services.errors import (
    GatewayTimeout,
    InternalServerError,
    NotFound,
    ServiceError,
    Unauthorized,
    ValidationFailed,
)


def client_for(handler) -> ServiceClient:
    transport = httpx.MockTransport(handler)
    return ServiceClient("book", httpx.AsyncClient(transport=transport, base_url="http://book"))


class TestServiceClient:
    @pytest.mark.asyncio
    async def test_returns_json_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"isbn": "97"})

        client = client_for(handler)

        result = await client.get(
            "/books", params={"genre": "Fantasy"}, headers={"Authorization": "Bearer t"}
        )

        assert result == {"isbn": "97"}
        assert seen["url"] == "http://book/books?genre=Fantasy"
        assert seen["auth"] == "Bearer t"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_post_sends_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=request.content)

        client = client_for(handler)

        assert await client.post("/books", json={"isbn": "97"}) == {"isbn": "97"}

    @pytest.mark.asyncio
    async def test_no_content_returns_none(self):
        client = client_for(lambda request: httpx.Response(204))

        assert await client.delete("/books/97") is None

    @pytest.mark.asyncio
    async def test_error_status_is_response_error(self):
        client = client_for(
            lambda request: httpx.Response(404, json={"detail": "Book with isbn 97 not found"})
        )

        with pytest.raises(DownstreamResponseError) as exc_info:
            await client.get("/books/97")

        error = exc_info.value
        assert error.service == "book"
        assert error.status_code == 404
        assert error.detail == "Book with isbn 97 not found"
        assert error.body == {"detail": "Book with isbn 97 not found"}

    @pytest.mark.asyncio
    async def test_connect_error_is_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = client_for(handler)

        with pytest.raises(DownstreamUnavailable):
            await client.get("/books")

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = client_for(handler)

        with pytest.raises(DownstreamUnavailable):
            await client.get("/books")

    @pytest.mark.asyncio
    async def test_other_transport_error_is_request_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.UnsupportedProtocol("bad scheme", request=request)

        client = client_for(handler)

        with pytest.raises(DownstreamRequestError):
            await client.get("/books")

    @pytest.mark.asyncio
    async def test_invalid_json_is_request_error(self):
        client = client_for(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(DownstreamRequestError):
            await client.get("/books")


class TestExtractDetail:
    @pytest.mark.parametrize("response, expected", [
        (httpx.Response(400, json={"detail": "Bad isbn"}), "Bad isbn"),
        (httpx.Response(400, json={"error": {"message": "Wrapped"}}), "Wrapped"),
        (httpx.Response(400, json={"message": "Plain"}), "Plain"),
        (httpx.Response(502, text="Bad Gateway"), "Bad Gateway"),
    ])
    def test_extract_detail(self, response, expected):
        detail, _ = extract_detail(response)

        assert detail == expected

    def test_validation_detail_list_is_stringified(self):
        response = httpx.Response(422, json={"detail": [{"msg": "field required"}]})

        detail, body = extract_detail(response)

        assert "field required" in detail
        assert body["detail"][0]["msg"] == "field required"


class TestToServiceError:
    @pytest.mark.parametrize("status_code, error_class", [
        (401, Unauthorized),
        (404, NotFound),
        (422, ValidationFailed),
        (500, InternalServerError),
    ])
    def test_response_error_keeps_status(self, status_code, error_class):
        error = DownstreamResponseError("book", status_code, "boom").to_service_error()

        assert isinstance(error, error_class)
        assert error.status_code == status_code
        assert error.message == "boom"

    def test_unmapped_status_passes_through(self):
        error = DownstreamResponseError("book", 418, "teapot").to_service_error("wrapped")

        assert type(error) is ServiceError
        assert error.status_code == 418
        assert error.message == "wrapped"

    def test_unavailable_is_gateway_timeout(self):
        error = DownstreamUnavailable("auth", "auth service unavailable").to_service_error()

        assert isinstance(error, GatewayTimeout)
        assert error.status_code == 504

    def test_request_error_is_internal(self):
        error = DownstreamRequestError("auth", "bad body").to_service_error("Failed")

        assert isinstance(error, InternalServerError)
        assert error.message == "Failed"

    def test_base_error_is_internal(self):
        error = DownstreamError("book", "odd failure").to_service_error()

        assert isinstance(error, InternalServerError)
        assert error.message == "odd failure"
