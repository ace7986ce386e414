"""Tests for the cookie login routes and the health endpoint."""

from orpheus_common.errors import HttpError
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "timestamp" in response.json()


async def test_login_sets_session_cookie(client):
    response = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["user"]["email"] == ADMIN_EMAIL
    assert body["user"]["role"] == "admin"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("app_session=")
    assert "HttpOnly" in cookie
    assert "Max-Age=31536000" in cookie
    assert "samesite=lax" in cookie.lower()


async def test_cookie_session_reaches_admin_procedures(client):
    await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

    me = await client.get("/api/rpc/auth.me")
    created = await client.post("/api/rpc/photos.create", json={"title": "T", "imageUrl": "u"})

    assert me.json()["result"]["role"] == "admin"
    assert created.status_code == 200


async def test_login_with_wrong_password(client):
    response = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "nope"})

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid email or password"
    assert "set-cookie" not in response.headers


async def test_login_without_configured_password(app, client):
    app.state.settings.auth.admin_password = None

    response = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "anything"})

    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Password login not configured"


async def test_login_requires_both_fields(client):
    response = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL})
    garbage = await client.post("/api/auth/login", content=b"{not json", headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Email and password are required"
    assert garbage.status_code == 400


async def test_logout_clears_cookie(client):
    await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

    response = await client.post("/api/auth/logout")
    me = await client.get("/api/rpc/auth.me")

    assert response.json() == {"success": True}
    assert 'app_session=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]
    assert me.json()["result"] is None


async def test_rpc_logout_clears_cookie(client, admin_headers):
    response = await client.post("/api/rpc/auth.logout", headers=admin_headers)

    assert response.json() == {"result": {"success": True}}
    assert "app_session=" in response.headers["set-cookie"]


async def test_legacy_auth_check_stub(client):
    response = await client.get("/api/auth/check")

    assert response.json()["authenticated"] is False


async def test_legacy_oauth_callback_redirects(client):
    response = await client.get("/api/oauth/callback")

    assert response.status_code == 302
    assert response.headers["location"] == "/?error=oauth_not_supported"


def test_error_body_shape():
    error = HttpError("boom", status_code=418)
    error.procedure = "photos.list"

    assert error.to_dict() == {"code": "INTERNAL_SERVER_ERROR", "message": "boom", "procedure": "photos.list"}
    assert error.status_code == 418
