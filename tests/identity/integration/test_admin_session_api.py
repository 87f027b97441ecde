"""Integration tests for admin login/logout and the session guard."""

import pytest
from catalogue.api.routes import admin_router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from identity.admin.session import SESSION_COOKIE
from identity.api.routes import router
from shared.exceptions import register_error_handlers

ADMIN_EMAIL = "owner@baebeboo.test"
ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture()
def client(catalog_store, object_store):
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(router)
    app.include_router(admin_router)
    return TestClient(app)


def _login(client):
    return client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})


class TestLogin:
    def test_login_sets_session_cookie(self, client):
        response = _login(client)

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"{SESSION_COOKIE}=")
        assert "HttpOnly" in cookie
        assert "Max-Age=28800" in cookie
        assert "samesite=lax" in cookie.lower()

    def test_bad_credentials(self, client):
        response = client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}
        assert SESSION_COOKIE not in client.cookies

    def test_session_endpoint(self, client):
        _login(client)

        response = client.get("/admin/session")

        assert response.json() == {"authenticated": True, "email": ADMIN_EMAIL}


class TestGuard:
    def test_admin_routes_require_a_session(self, client):
        response = client.get("/admin/products")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_admin_routes_accept_a_session(self, client):
        _login(client)

        assert client.get("/admin/products").status_code == 200

    def test_forged_cookie_is_rejected(self, client):
        client.cookies.set(SESSION_COOKIE, "eyJzdWIiOiJ4IiwiZXhwIjo5OTk5OTk5OTk5fQ.0000")

        assert client.get("/admin/products").status_code == 401

    def test_logout_clears_the_cookie(self, client):
        _login(client)

        response = client.post("/admin/logout")

        assert response.status_code == 200
        assert client.get("/admin/products").status_code == 401
