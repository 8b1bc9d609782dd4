"""Tests for liveness, extension, config and logout endpoints."""

import pytest
from support import basic_header

COOKIE = "netsuite-session"


@pytest.fixture
def logged_in(client):
    response = client.get("/api/session", headers={"Authorization": basic_header()})
    assert response.status_code == 200
    return client


class TestSessionCheck:
    """Tests for GET /api/session-check."""

    def test_valid_session(self, logged_in):
        response = logged_in.get("/api/session-check")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "valid"
        assert "timestamp" in body
        assert "expires_at" in body

    def test_check_does_not_extend(self, logged_in, clock):
        before = logged_in.get("/api/session-check").json()["expires_at"]
        clock.advance(600)

        after = logged_in.get("/api/session-check").json()["expires_at"]

        assert after == before

    def test_no_cookie_is_unauthorized_without_challenge(self, client):
        response = client.get("/api/session-check")

        assert response.status_code == 401
        assert response.json()["type"] == "session_expired"
        assert "www-authenticate" not in response.headers

    def test_credentials_do_not_open_session_here(self, client, store):
        response = client.get("/api/session-check", headers={"Authorization": basic_header()})

        assert response.status_code == 401
        assert len(store) == 0

    def test_expired_session_clears_cookie(self, logged_in, clock):
        clock.advance(1801)

        response = logged_in.get("/api/session-check")

        assert response.status_code == 401
        assert "max-age=0" in response.headers["set-cookie"].lower()
        assert COOKIE not in logged_in.cookies


class TestExtendSession:
    """Tests for POST /api/extend-session."""

    def test_extend_refreshes_session_and_cookie(self, logged_in, clock):
        clock.advance(1700)

        response = logged_in.post("/api/extend-session")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "extended"
        assert body["message"] == "Session extended successfully"
        assert "max-age=1800" in response.headers["set-cookie"].lower()

        # Still alive well past the original inactivity deadline
        clock.advance(1700)
        assert logged_in.get("/api/session-check").status_code == 200

    def test_extend_is_safe_to_retry(self, logged_in):
        assert logged_in.post("/api/extend-session").status_code == 200
        assert logged_in.post("/api/extend-session").status_code == 200

    def test_extend_expired_session(self, logged_in, clock):
        clock.advance(1801)

        response = logged_in.post("/api/extend-session")

        assert response.status_code == 401
        assert response.json()["type"] == "session_expired"

    def test_extend_near_max_duration_shortens_cookie(self, logged_in, clock):
        for _ in range(16):
            clock.advance(1700)
            assert logged_in.post("/api/extend-session").status_code == 200

        # 27200s elapsed, 1600s of absolute lifetime left
        response = logged_in.post("/api/extend-session")
        assert "max-age=1600" in response.headers["set-cookie"].lower()


class TestSessionConfig:
    """Tests for GET /api/session-config."""

    def test_public_timings(self, client):
        response = client.get("/api/session-config")

        assert response.status_code == 200
        assert response.json() == {
            "inactivity_timeout": 1800,
            "max_session_duration": 28800,
            "warning_time": 300,
            "check_interval": 60,
        }


class TestLogout:
    """Tests for POST /api/auth/logout."""

    def test_logout_invalidates_session(self, logged_in, store):
        response = logged_in.post("/api/auth/logout")

        assert response.status_code == 204
        assert len(store) == 0
        assert COOKIE not in logged_in.cookies
        assert logged_in.get("/api/session").status_code == 401

    def test_logout_without_session(self, client):
        assert client.post("/api/auth/logout").status_code == 401


class TestHealthAndDocs:
    """Tests for public endpoints and schema."""

    def test_health_is_public(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
        assert response.headers["x-robots-tag"] == "noindex, nofollow, nosnippet, noarchive"

    def test_openapi_marks_public_endpoints(self, fastapi_app):
        schema = fastapi_app.openapi()

        assert schema["paths"]["/api/session-config"]["get"]["security"] == []
        assert "security" not in schema["paths"]["/api/session"]["get"]
        assert schema["components"]["securitySchemes"]["SessionCookie"]["name"] == COOKIE
