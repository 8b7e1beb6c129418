"""HTTP tests for the search endpoint."""

import logging
from unittest.mock import patch

import pytest
import httpx

from inputgate.app.server import MSG_SEARCH_FAILED, SECURITY_HEADERS, app


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self):
        async with _client() as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_security_headers(self):
        async with _client() as client:
            response = await client.get("/health")

        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value


class TestSearch:
    """Test /search against the collaborator contract."""

    @pytest.mark.asyncio
    async def test_valid_term(self):
        async with _client() as client:
            response = await client.post("/search", json={"searchTerm": "valid search term"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Search term is valid",
            "sanitizedTerm": "valid search term",
        }

    @pytest.mark.asyncio
    async def test_xss_term(self):
        payload = "<img src=x onerror=alert(1)>"

        async with _client() as client:
            response = await client.post("/search", json={"searchTerm": payload})

        body = response.json()
        assert body["success"] is False
        assert body["type"] == "xss"
        assert "Input cleared due to potential XSS attack" in body["errors"]
        assert "onerror" not in response.text
        assert response.headers["X-Frame-Options"] == "DENY"

    @pytest.mark.asyncio
    async def test_sql_injection_term(self):
        async with _client() as client:
            response = await client.post("/search", json={"searchTerm": "1; DROP TABLE users;--"})

        body = response.json()
        assert body["success"] is False
        assert body["type"] == "sqli"
        assert "DROP TABLE" not in response.text

    @pytest.mark.asyncio
    async def test_missing_term(self):
        async with _client() as client:
            response = await client.post("/search", json={})

        assert response.json() == {"success": False, "errors": ["Search term is required"]}

    @pytest.mark.asyncio
    async def test_falsy_term_is_missing(self):
        async with _client() as client:
            response = await client.post("/search", json={"searchTerm": 0})

        assert response.json() == {"success": False, "errors": ["Search term is required"]}

    @pytest.mark.asyncio
    async def test_non_string_term(self):
        async with _client() as client:
            response = await client.post("/search", json={"searchTerm": 42})

        body = response.json()
        assert body["success"] is False
        assert body["type"] == "invalid"

    @pytest.mark.asyncio
    async def test_malformed_body_not_echoed(self):
        async with _client() as client:
            response = await client.post(
                "/search",
                content=b"<script>alert(1)</script>",
                headers={"Content-Type": "application/json"},
            )

        assert response.status_code == 422
        assert response.json() == {"success": False, "errors": ["Invalid request body"]}
        assert "script" not in response.text

    @pytest.mark.asyncio
    async def test_inspection_failure_not_echoed(self):
        """A fault while inspecting rejects the term without reflecting it."""
        payload = "<script>alert(1)</script>"

        with patch("inputgate.app.server.inspect_search_term", side_effect=RuntimeError("boom")):
            async with _client() as client:
                response = await client.post("/search", json={"searchTerm": payload})

        assert response.status_code == 200
        assert response.json() == {"success": False, "errors": [MSG_SEARCH_FAILED], "type": "invalid"}
        assert payload not in response.text
        assert "script" not in response.text


class TestRequestLogging:
    """Test the access log written for every request."""

    @pytest.mark.asyncio
    async def test_success_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="inputgate.requests")

        async with _client() as client:
            await client.get("/health")

        records = [r for r in caplog.records if r.name == "inputgate.requests"]
        assert len(records) == 1
        assert records[0].levelno == logging.DEBUG
        assert records[0].getMessage().startswith("OK status=200 method=GET path=/health elapsed_ms=")

    @pytest.mark.asyncio
    async def test_client_error_logged_without_body(self, caplog):
        caplog.set_level(logging.DEBUG, logger="inputgate.requests")

        async with _client() as client:
            await client.post(
                "/search",
                content=b"<script>alert(1)</script>",
                headers={"Content-Type": "application/json"},
            )

        records = [r for r in caplog.records if r.name == "inputgate.requests"]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].getMessage().startswith("CLIENT_ERROR status=422 method=POST path=/search elapsed_ms=")
        assert "script" not in caplog.text
