"""Tests for API endpoints."""

import gzip
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortener.errors import BackendError
from web_app import create_app
from web_app.middleware.session import SESSION_COOKIE_NAME


@pytest.mark.asyncio
class TestTextEndpoints:
    """Test the plain-text and redirect endpoints."""

    async def test_shorten_text(self, client, sample_urls):
        """POST / answers 201 with the short URL, then 409."""
        response = await client.post("/", content=sample_urls[0])

        assert response.status_code == 201
        assert response.text == "http://localhost:8080/1"
        assert response.headers["content-type"].startswith("text/plain")

        response = await client.post("/", content=sample_urls[0])

        assert response.status_code == 409
        assert response.text == "http://localhost:8080/1"

    async def test_shorten_text_gzip(self, client):
        """Gzip-compressed bodies are accepted."""
        body = gzip.compress(b"https://example.com/compressed")

        response = await client.post("/", content=body, headers={"Content-Encoding": "gzip"})

        assert response.status_code == 201
        response = await client.get("/1")
        assert response.headers["location"] == "https://example.com/compressed"

    async def test_shorten_text_bad_gzip(self, client):
        response = await client.post("/", content=b"plain", headers={"Content-Encoding": "gzip"})

        assert response.status_code == 400

    async def test_shorten_text_empty(self, client):
        response = await client.post("/", content=b"")

        assert response.status_code == 400

    async def test_shorten_text_verbatim(self, client, memory_storage):
        """The body is stored as sent, surrounding whitespace included."""
        first = await client.post("/", content="https://example.com/a")
        second = await client.post("/", content=" https://example.com/a\n")

        assert (first.status_code, second.status_code) == (201, 201)
        assert first.text != second.text
        assert memory_storage.urls.resolve("2") == " https://example.com/a\n"

    async def test_redirect(self, client, sample_urls):
        """GET /{id} redirects with 307."""
        await client.post("/", content=sample_urls[1])

        response = await client.get("/1")

        assert response.status_code == 307
        assert response.headers["location"] == sample_urls[1]

    @pytest.mark.parametrize("short_id", ["42", "abc", "01", "99999999999999999999"])
    async def test_redirect_unknown(self, client, short_id):
        await client.post("/", content="https://example.com/a")

        response = await client.get(f"/{short_id}")

        assert response.status_code == 400

    async def test_redirect_other_session(self, client, other_client, sample_urls):
        """URLs are public for sessions that never shortened them."""
        await client.post("/", content=sample_urls[0])

        response = await other_client.get("/1")

        assert response.status_code == 307
        assert response.headers["location"] == sample_urls[0]

    async def test_redirect_after_delete(self, client, other_client, sample_urls):
        """The deleting session gets 410; other sessions are still redirected."""
        await client.post("/", content=sample_urls[0])

        response = await client.request("DELETE", "/api/user/urls", json=["1"])
        assert response.status_code == 202

        response = await client.get("/1")
        assert response.status_code == 410

        response = await other_client.get("/1")
        assert response.status_code == 307

    async def test_ping(self, client):
        response = await client.get("/ping")

        assert response.status_code == 200

    async def test_ping_backend_down(self, app, client, monkeypatch):
        monkeypatch.setattr(app.state.storage, "ping", AsyncMock(return_value=False))

        response = await client.get("/ping")

        assert response.status_code == 500

    async def test_backend_error(self, app, client, monkeypatch):
        """Storage failures answer 500."""
        monkeypatch.setattr(
            app.state.storage, "shorten_url", AsyncMock(side_effect=BackendError("disk full"))
        )

        response = await client.post("/", content="https://example.com")

        assert response.status_code == 500


@pytest.mark.asyncio
class TestOwnershipEnforced:
    """Redirects restricted to the session's own URLs."""

    @pytest.fixture
    async def strict_app(self, memory_storage):
        config = Config(base_url="http://localhost:8080", enforce_ownership_on_redirect=True)
        return create_app(storage=memory_storage, config=config)

    async def test_redirect_requires_ownership(self, strict_app, sample_urls):
        transport = ASGITransport(app=strict_app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as owner, \
                AsyncClient(transport=transport, base_url="http://testserver") as stranger:
            await owner.post("/", content=sample_urls[0])

            assert (await owner.get("/1")).status_code == 307
            assert (await stranger.get("/1")).status_code == 400


@pytest.mark.asyncio
class TestAPIEndpoints:
    """Test JSON API endpoints."""

    async def test_shorten_url(self, client, sample_urls):
        """Test POST /api/shorten."""
        response = await client.post("/api/shorten", json={"url": sample_urls[0]})

        assert response.status_code == 201
        assert response.json() == {"result": "http://localhost:8080/1"}

    async def test_shorten_url_existing(self, client, sample_urls):
        """Known URLs answer 409 with the existing short URL."""
        await client.post("/", content=sample_urls[0])

        response = await client.post("/api/shorten", json={"url": sample_urls[0]})

        assert response.status_code == 409
        assert response.json() == {"result": "http://localhost:8080/1"}

    @pytest.mark.parametrize("body", [{}, {"link": "https://example.com"}])
    async def test_shorten_url_invalid_body(self, client, body):
        response = await client.post("/api/shorten", json=body)

        assert response.status_code == 422

    async def test_shorten_batch(self, client, sample_urls):
        """Test POST /api/shorten/batch."""
        await client.post("/api/shorten", json={"url": sample_urls[1]})
        body = [
            {"correlation_id": f"c{i}", "original_url": url}
            for i, url in enumerate(sample_urls)
        ]

        response = await client.post("/api/shorten/batch", json=body)

        assert response.status_code == 201
        assert response.json() == [
            {"correlation_id": "c0", "short_url": "http://localhost:8080/2"},
            {"correlation_id": "c2", "short_url": "http://localhost:8080/3"},
        ]

    async def test_shorten_batch_empty(self, client):
        response = await client.post("/api/shorten/batch", json=[])

        assert response.status_code == 201
        assert response.json() == []

    async def test_user_urls(self, client, other_client, sample_urls):
        """Test GET /api/user/urls."""
        response = await client.get("/api/user/urls")
        assert response.status_code == 204

        for url in sample_urls:
            await client.post("/api/shorten", json={"url": url})

        response = await client.get("/api/user/urls")

        assert response.status_code == 200
        assert response.json() == [
            {"short_url": f"http://localhost:8080/{i}", "original_url": url}
            for i, url in enumerate(sample_urls, start=1)
        ]

        response = await other_client.get("/api/user/urls")
        assert response.status_code == 204

    async def test_delete_user_urls(self, client, sample_urls):
        """Test DELETE /api/user/urls with IDs and full short URLs."""
        for url in sample_urls:
            await client.post("/api/shorten", json={"url": url})

        response = await client.request(
            "DELETE", "/api/user/urls", json=["1", "http://localhost:8080/2"]
        )
        assert response.status_code == 202

        response = await client.get("/api/user/urls")
        assert response.json() == [
            {"short_url": "http://localhost:8080/3", "original_url": sample_urls[2]},
        ]

    async def test_delete_everything(self, client, sample_urls):
        """A session whose URLs are all deleted lists nothing."""
        await client.post("/api/shorten", json={"url": sample_urls[0]})

        await client.request("DELETE", "/api/user/urls", json=["1"])

        response = await client.get("/api/user/urls")
        assert response.status_code == 204

    async def test_delete_invalid_body(self, client):
        response = await client.request("DELETE", "/api/user/urls", json={"ids": ["1"]})

        assert response.status_code == 422

    async def test_delete_backend_error_logged(self, app, client, monkeypatch, caplog):
        """A failed background delete still answers 202 and is logged."""
        monkeypatch.setattr(
            app.state.storage, "delete_keys", AsyncMock(side_effect=BackendError("db down"))
        )

        response = await client.request("DELETE", "/api/user/urls", json=["1"])

        assert response.status_code == 202
        assert "db down" in caplog.text

    async def test_session_token_fixed(self, client, other_client, sample_urls):
        """Clients presenting the same cookie share an archive."""
        client.cookies.set(SESSION_COOKIE_NAME, "user-a")
        other_client.cookies.set(SESSION_COOKIE_NAME, "user-a")

        await client.post("/api/shorten", json={"url": sample_urls[0]})

        response = await other_client.get("/api/user/urls")
        assert response.status_code == 200
        assert len(response.json()) == 1


@pytest.mark.asyncio
class TestSession:
    """Test the session cookie."""

    async def test_new_session_gets_cookie(self, client):
        response = await client.get("/ping")

        assert SESSION_COOKIE_NAME in response.cookies
        assert "httponly" in response.headers["set-cookie"].lower()

    async def test_existing_session_kept(self, client):
        client.cookies.set(SESSION_COOKIE_NAME, "user-a")

        response = await client.get("/ping")

        assert SESSION_COOKIE_NAME not in response.cookies
