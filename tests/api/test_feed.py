"""Tests for feed endpoints."""

import asyncio
from contextlib import asynccontextmanager, suppress

import pytest
from fastapi.testclient import TestClient
from starlette.requests import ClientDisconnect

from catalogfeed.api.deps import get_catalog_provider
from catalogfeed.domain.value_objects import CategoryNode
from catalogfeed.main import app


class TestGetFeed:
    """Tests for GET /feed."""

    def test_streams_feed(self, client: TestClient) -> None:
        """The feed is plain text with a header and one line per product."""
        response = client.get("/feed")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/plain; charset=utf-8"
        lines = response.text.splitlines()
        assert lines[0].split("|")[0] == "id"
        assert len(lines) == 6

    def test_window(self, client: TestClient) -> None:
        """limit and offset select a window without header."""
        response = client.get("/feed", params={"limit": "2", "offset": "3"})

        lines = response.text.splitlines()
        assert [line.split("|")[0] for line in lines] == ["4", "5"]

    def test_window_from_zero_has_header(self, client: TestClient) -> None:
        """A window at offset zero starts with the header."""
        response = client.get("/feed", params={"limit": "2"})

        lines = response.text.splitlines()
        assert lines[0].startswith("id|")
        assert len(lines) == 3

    def test_prices_off(self, client: TestClient) -> None:
        """prices=no drops the price columns."""
        response = client.get("/feed", params={"prices": "no"})

        header = response.text.splitlines()[0].split("|")
        assert "price" not in header

    def test_taxes_off(self, client: TestClient) -> None:
        """taxes=false gives prices without tax."""
        response = client.get("/feed", params={"taxes": "false"})

        record = response.text.splitlines()[1].split("|")
        assert record[9] == "100.00"

    def test_currency(self, client: TestClient) -> None:
        """Prices and links follow the requested currency."""
        response = client.get("/feed", params={"currency": "eur"})

        record = response.text.splitlines()[1].split("|")
        assert "currency=EUR" in record[2]
        assert record[9] == "108.90"

    def test_latin1(self, client: TestClient) -> None:
        """latin1=1 switches the charset."""
        response = client.get("/feed", params={"latin1": "1"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/plain; charset=iso-8859-1"

    def test_unreadable_numbers_fall_back(self, client: TestClient) -> None:
        """Garbage numbers are ignored instead of failing."""
        response = client.get("/feed", params={"chunk_size": "lots", "limit": "x"})

        assert response.status_code == 200
        assert len(response.text.splitlines()) == 6

    def test_invalid_currency(self, client: TestClient) -> None:
        """An unknown currency returns the error payload."""
        response = client.get("/feed", params={"currency": "GBP"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "ERR_CURRENCY"
        assert data["message"] == "Currency is not valid."
        assert data["hint"] == "Valid values are: USD, EUR"
        assert data["request_id"] == response.headers["X-Request-ID"]

    def test_invalid_language(self, client: TestClient) -> None:
        """An unknown language returns the error payload."""
        response = client.get("/feed", params={"language": "fr"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "ERR_LANGUAGE"
        assert "en (English)" in data["hint"]

    def test_invalid_chunk_size(self, client: TestClient) -> None:
        """A non-positive chunk size is a configuration error."""
        response = client.get("/feed", params={"chunk_size": "0"})

        assert response.status_code == 400
        assert response.json()["error"] == "ERR_CONFIG"

    def test_cyclic_categories_fail(self, client: TestClient, catalog) -> None:
        """A broken category tree is an internal error in the same error format."""
        catalog.categories = [CategoryNode(1, 2, "A"), CategoryNode(2, 1, "B")]
        server_errors_as_responses = TestClient(client.app, raise_server_exceptions=False)

        response = server_errors_as_responses.get("/feed", headers={"X-Request-ID": "run-500"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "ERR_INTERNAL",
            "message": "An internal error occurred",
            "hint": "",
            "request_id": "run-500",
        }
        assert response.headers["X-Request-ID"] == "run-500"

    def test_unknown_route_uses_error_format(self, client: TestClient) -> None:
        """HTTP errors outside the feed share the error format."""
        response = client.get("/feeds")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "ERR_NOT_FOUND"
        assert set(data) == {"error", "message", "hint", "request_id"}


class TestDiscovery:
    """Tests for the discovery document."""

    def test_config_parameter(self, client: TestClient) -> None:
        """config=1 returns the discovery document instead of the feed."""
        response = client.get("/feed", params={"config": "yes"})

        assert response.status_code == 200
        data = response.json()
        assert data["platform"]["name"] == "osCommerce"
        assert data["module"]["feed"] == "http://testserver/feed"
        assert data["module"]["options"] == {
            "language": ["EN", "DE"],
            "currency": ["USD", "EUR"],
        }

    def test_config_endpoint(self, client: TestClient) -> None:
        """GET /feed/config lists per-language settings."""
        response = client.get("/feed/config")

        assert response.status_code == 200
        configuration = response.json()["module"]["configuration"]
        assert configuration["DE"] == {"language": "DE", "prices": True, "taxes": True}


class TestRunLifecycle:
    """Tests for releasing the catalog a feed run opened."""

    @pytest.fixture
    def tracked(self, catalog):
        """Provider counting how often the catalog is opened and closed."""
        state = {"opened": 0, "closed": 0}

        @asynccontextmanager
        async def provider():
            state["opened"] += 1
            try:
                yield catalog
            finally:
                state["closed"] += 1

        app.dependency_overrides[get_catalog_provider] = lambda: provider
        yield state
        app.dependency_overrides.clear()

    def test_released_after_complete_feed(self, tracked: dict) -> None:
        """The catalog is closed once the body has been sent."""
        response = TestClient(app).get("/feed")

        assert response.status_code == 200
        assert tracked == {"opened": 1, "closed": 1}

    def test_released_after_rejected_request(self, tracked: dict) -> None:
        """The catalog is closed when validation fails."""
        response = TestClient(app).get("/feed", params={"currency": "GBP"})

        assert response.status_code == 400
        assert tracked == {"opened": 1, "closed": 1}

    @pytest.mark.asyncio
    async def test_released_when_client_disconnects(self, tracked: dict) -> None:
        """A client leaving mid-stream still closes the catalog."""
        scope = {
            "type": "http",
            "asgi": {"version": "3.0", "spec_version": "2.4"},
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": "/feed",
            "raw_path": b"/feed",
            "root_path": "",
            "query_string": b"chunk_size=1",
            "headers": [(b"host", b"testserver")],
            "client": ("testclient", 50000),
            "server": ("testserver", 80),
        }
        request_sent = False
        bodies: list[bytes] = []

        async def receive() -> dict:
            nonlocal request_sent
            if not request_sent:
                request_sent = True
                return {"type": "http.request", "body": b"", "more_body": False}
            await asyncio.Event().wait()
            return {"type": "http.disconnect"}

        async def send(message: dict) -> None:
            if message["type"] == "http.response.body" and message.get("body"):
                if bodies:
                    raise OSError("connection reset by peer")
                bodies.append(message["body"])

        with suppress(OSError, ClientDisconnect):
            await app(scope, receive, send)

        assert len(bodies) == 1
        assert tracked == {"opened": 1, "closed": 1}
