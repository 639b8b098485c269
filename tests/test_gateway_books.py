"""
Tests for the gateway's /books routes: authentication, permission checks
and cookie session refresh.
"""

from fastapi import status

from bookstore.services.downstream import DownstreamResponseError
from bookstore.services.session import SESSION_EXPIRED

BOOK = {
    "isbn": "97",
    "title": "Dune",
    "price": "9.99",
    "author_name": "Frank Herbert",
    "genre": "Science Fiction",
    "pub_date": "1965-08-01",
}
AUTHOR = {"author_id": 5, "isbn": "97", "author_name": "Frank Herbert"}
CATEGORY = {"category_id": 8, "isbn": "97", "genre": "Science Fiction"}


def stock(fake_clients) -> None:
    fake_clients.books.get.return_value = BOOK
    fake_clients.authors.get.return_value = AUTHOR
    fake_clients.categories.get.return_value = CATEGORY


def admin_token(signer) -> str:
    return signer.sign_access({"sub": "1", "username": "admin", "role": "admin"})


class TestAuthentication:
    def test_no_credentials(self, gateway_client):
        response = gateway_client.get("/books")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Token not provided"

    def test_garbage_bearer_token(self, gateway_client):
        response = gateway_client.get("/books", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid token"

    def test_refresh_token_is_not_accepted_as_bearer(self, gateway_client, token_signer):
        refresh_token, _ = token_signer.sign_refresh(1)

        response = gateway_client.get(
            "/books", headers={"Authorization": f"Bearer {refresh_token}"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_access_cookie(self, gateway_client, fake_clients, token_signer):
        fake_clients.books.get.return_value = []
        gateway_client.cookies.set("accessToken", admin_token(token_signer))

        response = gateway_client.get("/books")

        assert response.status_code == status.HTTP_200_OK
        fake_clients.auth.post.assert_not_awaited()

    def test_stale_cookie_is_refreshed(self, gateway_client, fake_clients, token_signer):
        fresh = admin_token(token_signer)
        fake_clients.auth.post.return_value = {"accessToken": fresh}
        fake_clients.books.get.return_value = []
        gateway_client.cookies.set("accessToken", "stale")
        gateway_client.cookies.set("refreshToken", "refresh-xyz")

        response = gateway_client.get("/books")

        assert response.status_code == status.HTTP_200_OK
        fake_clients.auth.post.assert_awaited_once_with(
            "/refresh-token", json={"refreshToken": "refresh-xyz"}
        )
        assert response.cookies["accessToken"] == fresh

    def test_missing_access_cookie_is_refreshed(self, gateway_client, fake_clients, token_signer):
        fake_clients.auth.post.return_value = {"accessToken": admin_token(token_signer)}
        fake_clients.books.get.return_value = []
        gateway_client.cookies.set("refreshToken", "refresh-xyz")

        response = gateway_client.get("/books")

        assert response.status_code == status.HTTP_200_OK

    def test_failed_cookie_refresh_clears_session(self, gateway_client, fake_clients):
        fake_clients.auth.post.side_effect = DownstreamResponseError(
            "auth", 401, "Token refresh failed"
        )
        gateway_client.cookies.set("accessToken", "stale")
        gateway_client.cookies.set("refreshToken", "revoked")

        response = gateway_client.get("/books")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == SESSION_EXPIRED
        set_cookies = response.headers.get_list("set-cookie")
        assert any(h.startswith("accessToken=") and "Max-Age=0" in h for h in set_cookies)
        assert any(h.startswith("refreshToken=") and "Max-Age=0" in h for h in set_cookies)

    def test_bad_bearer_does_not_fall_back_to_cookies(
        self, gateway_client, fake_clients, token_signer
    ):
        gateway_client.cookies.set("accessToken", admin_token(token_signer))

        response = gateway_client.get("/books", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestPermissions:
    def test_user_can_list(self, gateway_client, fake_clients, user_headers):
        fake_clients.books.get.return_value = []

        response = gateway_client.get("/books", headers=user_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_user_cannot_create(self, gateway_client, fake_clients, user_headers):
        response = gateway_client.post("/books", json=BOOK, headers=user_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "Not allowed to access this resource"
        fake_clients.books.post.assert_not_awaited()

    def test_user_cannot_delete(self, gateway_client, fake_clients, user_headers):
        response = gateway_client.delete("/books/97", headers=user_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        fake_clients.books.delete.assert_not_awaited()

    def test_unknown_role_is_forbidden(self, gateway_client, token_signer):
        token = token_signer.sign_access({"sub": "3", "role": "guest"})

        response = gateway_client.get("/books", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestBookRoutes:
    def test_admin_creates_book(self, gateway_client, fake_clients, admin_headers):
        fake_clients.books.post.return_value = BOOK

        response = gateway_client.post("/books", json=BOOK, headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["isbn"] == "97"
        fake_clients.authors.post.assert_awaited_once()
        fake_clients.categories.post.assert_awaited_once()

    def test_create_duplicate_book(self, gateway_client, fake_clients, admin_headers):
        fake_clients.books.post.side_effect = DownstreamResponseError(
            "book", 422, "Duplicate entry for isbn 97"
        )

        response = gateway_client.post("/books", json=BOOK, headers=admin_headers)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"].startswith("Failed to create book: Duplicate entry")

    def test_create_rejects_isbn_unusable_in_paths(
        self, gateway_client, fake_clients, admin_headers
    ):
        response = gateway_client.post(
            "/books", json={**BOOK, "isbn": "97/1"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        fake_clients.books.post.assert_not_awaited()

    def test_get_composite_book(self, gateway_client, fake_clients, user_headers):
        stock(fake_clients)

        response = gateway_client.get("/books/97", headers=user_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["author"] == {"author_id": 5, "author_name": "Frank Herbert"}
        assert data["category"] == {"category_id": 8, "genre": "Science Fiction"}
        assert data["error"] is None

    def test_get_missing_book(self, gateway_client, fake_clients, user_headers):
        fake_clients.books.get.side_effect = DownstreamResponseError("book", 404, "gone")

        response = gateway_client.get("/books/97", headers=user_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Book with ID 97 not found"

    def test_get_count_is_not_a_book(self, gateway_client, fake_clients, user_headers):
        fake_clients.books.get.return_value = {"count": 3}

        response = gateway_client.get("/books/count", headers=user_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Book with ID count not found"

    def test_list_marks_degraded_books(self, gateway_client, fake_clients, user_headers):
        fake_clients.books.get.return_value = [BOOK]
        fake_clients.authors.get.side_effect = DownstreamResponseError("author", 404, "none")
        fake_clients.categories.get.return_value = CATEGORY

        response = gateway_client.get("/books", headers=user_headers)

        assert response.status_code == status.HTTP_200_OK
        entry = response.json()[0]
        assert entry["author"] == "Author details not available"
        assert entry["category"] == "Category details not available"
        assert entry["error"] == "Failed to fetch author or category details"

    def test_delete_forwards_authorization(self, gateway_client, fake_clients, admin_headers):
        stock(fake_clients)

        response = gateway_client.delete("/books/97", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == "Book 97 and its associations deleted successfully."
        fake_clients.books.delete.assert_awaited_once_with("/books/97", headers=admin_headers)
        fake_clients.authors.delete.assert_awaited_once_with("/authors/5", headers=admin_headers)
