"""Tests for the HTTP routes."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from shortlinks.core.config import settings


def shorten(client, **body):
    return client.post("/shorturls", json=body)


@pytest.mark.api
class TestCreateRoute:

    def test_create_short_url(self, client, clock):
        response = shorten(client, url="https://example.com/page", validity=5)

        assert response.status_code == 201
        data = response.json()
        assert set(data) == {"code", "shortLink", "expiresAt"}
        assert data["shortLink"] == f"{settings.BASE_URL}/{data['code']}"
        expires_at = datetime.fromisoformat(data["expiresAt"].replace("Z", "+00:00"))
        assert (expires_at - clock.now).total_seconds() == 300

    def test_create_with_custom_code(self, client):
        response = shorten(client, url="https://example.com", shortcode="MyCode1")

        assert response.status_code == 201
        assert response.json()["code"] == "mycode1"

    def test_duplicate_custom_code(self, client):
        assert shorten(client, url="https://example.com", shortcode="dup").status_code == 201

        response = shorten(client, url="https://example.org", shortcode="DUP")

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

    @pytest.mark.parametrize("body", [
        {"url": "not-a-url"},
        {"url": ""},
        {},
        {"url": "https://example.com", "validity": 0},
        {"url": "https://example.com", "validity": -5},
        {"url": "https://example.com", "validity": 1.5},
        {"url": "https://example.com", "validity": None},
        {"url": "https://example.com", "validity": 0.0},
    ])
    def test_invalid_input(self, client, body):
        response = client.post("/shorturls", json=body)

        assert response.status_code == 400

    @pytest.mark.parametrize("validity", [1.0, 30.0])
    def test_whole_number_float_validity(self, client, clock, validity):
        response = shorten(client, url="https://example.com", validity=validity)

        assert response.status_code == 201
        expires_at = datetime.fromisoformat(response.json()["expiresAt"].replace("Z", "+00:00"))
        assert (expires_at - clock.now).total_seconds() == validity * 60

    def test_omitted_validity_uses_default(self, client, clock):
        response = shorten(client, url="https://example.com")

        assert response.status_code == 201
        expires_at = datetime.fromisoformat(response.json()["expiresAt"].replace("Z", "+00:00"))
        assert (expires_at - clock.now).total_seconds() == 30 * 60

    def test_url_with_surrounding_whitespace(self, client):
        response = shorten(client, url=" https://example.com", shortcode="padded")

        assert response.status_code == 201
        redirect = client.get("/padded", follow_redirects=False)
        assert redirect.headers["location"] == "https://example.com"

    @pytest.mark.parametrize("body", [
        {"url": "https://example.com", "validity": "ten"},
        {"url": "https://example.com", "shortcode": "has space"},
        {"url": "https://example.com", "shortcode": "x" * 100},
    ])
    def test_schema_errors(self, client, body):
        response = client.post("/shorturls", json=body)

        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"

    def test_empty_shortcode_generates_one(self, client):
        response = shorten(client, url="https://example.com", shortcode="")

        assert response.status_code == 201
        assert len(response.json()["code"]) == 6


@pytest.mark.api
class TestRedirectRoute:

    def test_redirect(self, client):
        shorten(client, url="https://example.com/page", shortcode="abc123")

        response = client.get("/ABC123", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "https://example.com/page"

    def test_unknown_code(self, client):
        response = client.get("/missing", follow_redirects=False)

        assert response.status_code == 404

    def test_expired_code(self, client, clock):
        shorten(client, url="https://example.com", validity=1, shortcode="brief")
        clock.advance(minutes=1, seconds=1)

        response = client.get("/brief", follow_redirects=False)

        assert response.status_code == 410
        assert client.get("/shorturls/brief").status_code == 200

    def test_records_request_context(self, client, registry):
        shorten(client, url="https://example.com", shortcode="ctx")

        client.get(
            "/ctx",
            headers={
                "User-Agent": "pytest-agent",
                "Referer": "https://ref.example.com",
                "X-Forwarded-For": "203.0.113.5, 10.0.0.1",
            },
            follow_redirects=False,
        )

        (event,) = registry.access_log.events("ctx")
        assert event.user_agent == "pytest-agent"
        assert event.referer == "https://ref.example.com"
        assert event.client_identifier == "203.0.113.5"

    def test_request_id_header(self, client):
        response = client.get("/health")

        assert response.headers.get("X-Request-ID")


@pytest.mark.api
class TestStatsRoutes:

    def test_stats(self, client):
        shorten(client, url="https://example.com/s", validity=10, shortcode="stats")
        for _ in range(3):
            client.get("/stats", headers={"User-Agent": "ua"}, follow_redirects=False)

        response = client.get("/shorturls/STATS")

        assert response.status_code == 200
        data = response.json()
        assert data["shortCode"] == "stats"
        assert data["originalUrl"] == "https://example.com/s"
        assert data["validity"] == 10
        assert data["totalClicks"] == 3
        assert len(data["clickDetails"]) == 3
        click = data["clickDetails"][0]
        assert set(click) == {"timestamp", "referer", "userAgent", "location"}
        assert click["userAgent"] == "ua"
        assert click["referer"] == "Direct"
        assert click["location"] == "Unknown"
        assert "createdAt" in data and "expiryDate" in data

    def test_stats_unknown_code(self, client):
        assert client.get("/shorturls/nothing").status_code == 404

    def test_all_urls(self, client):
        for code in ["one", "two", "three"]:
            shorten(client, url=f"https://example.com/{code}", shortcode=code)
        client.get("/two", follow_redirects=False)

        response = client.get("/api/all-urls")

        assert response.status_code == 200
        data = response.json()
        assert [item["shortCode"] for item in data] == ["one", "two", "three"]
        assert [item["totalClicks"] for item in data] == [0, 1, 0]


@pytest.mark.api
class TestHealthRoute:

    def test_health(self, client):
        shorten(client, url="https://example.com")

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["entries"] == 1
        assert data["version"] == settings.APP_VERSION
        assert data["uptime"] >= 0


@pytest.mark.api
def test_unexpected_errors_return_500(test_app, registry):
    async def broken():
        raise RuntimeError("store corrupted")

    registry.list_all = broken

    with TestClient(test_app, raise_server_exceptions=False) as client:
        response = client.get("/api/all-urls")

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
    assert "error_id" in response.json()
