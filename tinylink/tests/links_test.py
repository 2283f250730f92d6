from datetime import datetime
import logging

import pytest

from fastapi.testclient import TestClient

from tinylink.core.exceptions import StoreError
from tinylink.db.Connection import database
from tinylink.main import app
from tinylink.services import shortener


def _parse_ts(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_create_link_generates_code(client):
    """POST without a code returns a generated 6-character code."""
    response = client.post("/links", json={"url": "https://example.com"})
    assert response.status_code == 201
    data = response.json()
    assert data["url"] == "https://example.com"
    assert len(data["code"]) == 6
    assert data["code"].isalnum() and data["code"].isascii()
    assert data["shortUrl"].endswith("/" + data["code"])

    fetched = client.get(f"/links/{data['code']}")
    assert fetched.status_code == 200
    record = fetched.json()
    assert record["code"] == data["code"]
    assert record["url"] == "https://example.com"
    assert record["clicks"] == 0
    assert _parse_ts(record["createdAt"]).tzinfo is not None
    assert "lastClickedAt" not in record


def test_create_link_with_custom_code(client):
    response = client.post("/links", json={"url": "https://example.com/custom", "code": "MyBrand1"})
    assert response.status_code == 201
    assert response.json()["code"] == "MyBrand1"


def test_empty_code_is_treated_as_absent(client):
    response = client.post("/links", json={"url": "https://example.com", "code": ""})
    assert response.status_code == 201
    assert len(response.json()["code"]) == 6


def test_create_link_code_collision(client):
    """A taken code is reported as 409 and the first record is kept."""
    first = client.post("/links", json={"url": "https://example.com/first", "code": "taken1"})
    assert first.status_code == 201

    response = client.post("/links", json={"url": "https://example.com/second", "code": "taken1"})
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"].lower()

    record = client.get("/links/taken1").json()
    assert record["url"] == "https://example.com/first"


def test_generated_code_collision_is_reported(client, monkeypatch, caplog):
    client.post("/links", json={"url": "https://example.com/first", "code": "abc123"})
    monkeypatch.setattr(shortener, "generate_code", lambda length: "abc123")

    with caplog.at_level(logging.WARNING):
        response = client.post("/links", json={"url": "https://example.com/second"})
    assert response.status_code == 409
    assert "abc123" in caplog.text
    assert "None" not in caplog.text


def test_invalid_url_creates_nothing(client):
    response = client.post("/links", json={"url": "not-a-url", "code": "abc123"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid URL"

    assert client.get("/links/abc123").status_code == 404


@pytest.mark.parametrize("url", [
    "not-a-url",
    "/relative/path",
    "http://",
    "ftp://example.com/file",
    "javascript:alert(1)",
    "",
])
def test_create_link_rejects_bad_urls(client, url):
    response = client.post("/links", json={"url": url})
    assert response.status_code == 400, f"Should reject: {url}"


def test_create_link_requires_url(client):
    response = client.post("/links", json={"code": "abc123"})
    assert response.status_code == 400


@pytest.mark.parametrize("code", ["abc", "abcdefghi", "abc-12", "abc_123", "abcdé1"])
def test_create_link_rejects_bad_codes(client, code):
    response = client.post("/links", json={"url": "https://example.com", "code": code})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid code"


def test_create_link_rejects_reserved_code(client):
    response = client.post("/links", json={"url": "https://example.com", "code": "healthz"})
    assert response.status_code == 400


def test_create_link_malformed_body(client):
    response = client.post(
        "/links", content="{not json", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400


def test_create_link_non_string_code(client):
    response = client.post("/links", json={"url": "https://example.com", "code": 123456})
    assert response.status_code == 400


def test_list_links_empty(client):
    response = client.get("/links")
    assert response.status_code == 200
    assert response.json() == []


def test_list_links_with_data(client, sample_urls):
    created = {client.post("/links", json={"url": url}).json()["code"] for url in sample_urls}

    response = client.get("/links")
    assert response.status_code == 200
    data = response.json()
    assert {item["code"] for item in data} == created
    assert {item["url"] for item in data} == set(sample_urls)
    assert all(item["clicks"] == 0 for item in data)


def test_get_link_not_found(client):
    response = client.get("/links/abc123")
    assert response.status_code == 404


def test_delete_link_twice(client):
    client.post("/links", json={"url": "https://example.com", "code": "gone12"})

    first = client.delete("/links/gone12")
    assert first.status_code == 200
    assert first.json() == {"success": True}

    second = client.delete("/links/gone12")
    assert second.status_code == 404
    assert client.get("/links/gone12").status_code == 404


def test_unsupported_method(client):
    client.post("/links", json={"url": "https://example.com", "code": "abc123"})
    response = client.put("/links/abc123", json={"url": "https://example.org"})
    assert response.status_code == 405


class FailingStore:
    """Every operation fails the way an unreachable backend would."""

    def create(self, code, url):
        raise StoreError("DynamoDB put_item failed: connection reset")

    def list(self):
        raise StoreError("DynamoDB scan failed: connection reset")


class ExplodingStore:
    def list(self):
        raise RuntimeError("unexpected")


def test_store_failure_hides_backend_details(client):
    app.dependency_overrides[database.get_store] = lambda: FailingStore()

    created = client.post("/links", json={"url": "https://example.com"})
    assert created.status_code == 500
    assert created.json() == {"detail": "Internal"}

    listed = client.get("/links")
    assert listed.status_code == 500
    assert listed.json() == {"detail": "Internal"}


def test_unexpected_error_is_internal_server_error(client):
    app.dependency_overrides[database.get_store] = lambda: ExplodingStore()
    raw_client = TestClient(app, raise_server_exceptions=False)

    response = raw_client.get("/links")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
