"""
Tests for the author service's /authors endpoints.
"""

from fastapi import status


class TestListAuthors:
    def test_list_authors_empty(self, author_client):
        response = author_client.get("/authors")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_list_authors(self, author_client, sample_author):
        data = author_client.get("/authors").json()

        assert len(data) == 1
        assert data[0]["author_name"] == "George Orwell"
        assert data[0]["author_id"] == sample_author.author_id


class TestGetAuthor:
    def test_get_author_by_id(self, author_client, sample_author):
        response = author_client.get(f"/authors/{sample_author.author_id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["isbn"] == "9780451524935"

    def test_get_author_not_found(self, author_client):
        response = author_client.get("/authors/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_get_author_by_isbn(self, author_client, sample_author):
        response = author_client.get("/authors/isbn/9780451524935")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["author_id"] == sample_author.author_id

    def test_get_author_by_isbn_returns_first(self, author_client, sample_author):
        author_client.post("/authors", json={"isbn": "9780451524935", "author_name": "Eric Blair"})

        response = author_client.get("/authors/isbn/9780451524935")

        assert response.json()["author_name"] == "George Orwell"

    def test_get_author_by_isbn_not_found(self, author_client):
        response = author_client.get("/authors/isbn/0000000000")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestCreateAuthor:
    def test_create_author(self, author_client):
        response = author_client.post("/authors", json={"isbn": 97, "author_name": "  Ann Leckie "})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["isbn"] == "97"
        assert data["author_name"] == "Ann Leckie"
        assert data["author_id"] > 0

    def test_create_author_blank_name(self, author_client):
        response = author_client.post("/authors", json={"isbn": "97", "author_name": "   "})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestUpdateAuthor:
    def test_update_author(self, author_client, sample_author):
        response = author_client.patch(
            f"/authors/{sample_author.author_id}", json={"author_name": "Eric Blair"}
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        data = author_client.get(f"/authors/{sample_author.author_id}").json()
        assert data["author_name"] == "Eric Blair"
        assert data["isbn"] == "9780451524935"


class TestDeleteAuthor:
    def test_delete_author(self, author_client, sample_author):
        response = author_client.delete(f"/authors/{sample_author.author_id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert author_client.get(f"/authors/{sample_author.author_id}").status_code == 404

    def test_delete_author_not_found(self, author_client):
        response = author_client.delete("/authors/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
