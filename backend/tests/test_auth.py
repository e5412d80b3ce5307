"""Authentication tests: login, session cookie, logout, revocation store and mock mode."""

from datetime import datetime, timedelta, timezone

import jwt
import redis

from laundry.core import security
from laundry.core.config import settings
from laundry.core.rbac import UserRole
from laundry.core.security import create_access_token, decode_access_token, revoke_token

TEST_PASSWORD = "testpass123"


def _login(client, username, password=TEST_PASSWORD):
    return client.post("/api/auth/login", json={"username": username, "password": password})


class TestLogin:
    def test_login_returns_user_token_and_cookie(self, client, staff_user):
        resp = _login(client, staff_user.username)
        assert resp.status_code == 200
        data = resp.json()
        assert data["user"]["username"] == staff_user.username
        assert data["token_type"] == "bearer"
        assert "password_hash" not in data["user"]
        assert resp.cookies.get("access_token") == data["access_token"]

        payload = decode_access_token(data["access_token"])
        assert payload["sub"] == str(staff_user.id)
        assert payload["role"] == "staff"

    def test_wrong_password(self, client, staff_user):
        resp = _login(client, staff_user.username, "not-the-password")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid username or password"

    def test_unknown_user(self, client):
        assert _login(client, "ghost").status_code == 401

    def test_inactive_user_gets_same_error(self, client, make_user):
        user = make_user(UserRole.STAFF, username="retired", is_active=False)
        resp = _login(client, user.username)
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid username or password"

    def test_empty_body_is_400(self, client):
        assert client.post("/api/auth/login", json={}).status_code == 400


class TestSession:
    def test_cookie_authenticates_follow_up_requests(self, client, staff_user):
        _login(client, staff_user.username)
        resp = client.get("/api/auth/session")
        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == staff_user.id

    def test_bearer_header_authenticates(self, client, staff_user, staff_headers):
        resp = client.get("/api/auth/session", headers=staff_headers)
        assert resp.status_code == 200
        assert resp.json()["user"]["username"] == staff_user.username

    def test_no_credentials(self, client):
        resp = client.get("/api/auth/session")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Not authenticated"

    def test_tampered_token(self, client, staff_headers):
        token = staff_headers["Authorization"].split(" ", 1)[1]
        forged = jwt.encode(jwt.decode(token, options={"verify_signature": False}), "wrong-key", algorithm="HS256")
        resp = client.get("/api/auth/session", headers={"Authorization": f"Bearer {forged}"})
        assert resp.status_code == 401

    def test_expired_token(self, client, staff_user):
        token = create_access_token(
            data={"sub": str(staff_user.id), "role": "staff"}, expires_delta=timedelta(seconds=-5)
        )
        resp = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_deactivated_user_token_is_rejected(self, client, db_session, staff_user, staff_headers):
        staff_user.is_active = False
        db_session.commit()
        resp = client.get("/api/auth/session", headers=staff_headers)
        assert resp.status_code == 401
        assert resp.json()["detail"] == "User account is disabled"

    def test_permissions(self, client, staff_headers):
        data = client.get("/api/auth/permissions", headers=staff_headers).json()
        assert data == {"role": "staff", "level": 20, "features": ["dashboard", "tasks"]}


class TestLogout:
    def test_logout_revokes_token(self, client, staff_user):
        token = _login(client, staff_user.username).json()["access_token"]

        resp = client.post("/api/auth/logout")
        assert resp.status_code == 200
        assert resp.json()["success"] is True

        client.cookies.clear()
        again = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
        assert again.status_code == 401

    def test_logout_without_session_succeeds(self, client):
        assert client.post("/api/auth/logout").status_code == 200

    def test_revoke_rejects_garbage(self):
        assert revoke_token("not-a-jwt") is False

    def test_revoked_token_no_longer_decodes(self):
        token = create_access_token(data={"sub": "1", "role": "admin"})
        assert decode_access_token(token) is not None
        assert revoke_token(token) is True
        assert decode_access_token(token) is None

    def test_token_signed_with_configured_key(self):
        token = create_access_token(data={"sub": "1", "role": "admin"})
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        assert payload["jti"]


class FakeRedis:
    """Records revocations the way Redis SETEX/GET would."""

    def __init__(self):
        self.store = {}

    def setex(self, key, ttl, value):
        self.store[key] = (ttl, value)

    def get(self, key):
        entry = self.store.get(key)
        return entry[1].encode() if entry else None


class DownRedis:
    def setex(self, key, ttl, value):
        raise redis.ConnectionError("connection refused")

    def get(self, key):
        raise redis.ConnectionError("connection refused")


class TestRevocationStore:
    def test_revocation_is_stored_in_redis(self, monkeypatch):
        fake = FakeRedis()
        monkeypatch.setattr(security, "_redis_client", lambda timeout: fake)
        token = create_access_token(data={"sub": "1", "role": "admin"})
        jti = jwt.decode(token, options={"verify_signature": False})["jti"]

        assert revoke_token(token) is True
        ttl, _ = fake.store[f"token_blacklist:{jti}"]
        assert 60 <= ttl <= settings.access_token_expire_minutes * 60
        assert jti not in security._revoked_tokens
        assert decode_access_token(token) is None

    def test_unreachable_redis_falls_back_to_process_list(self, monkeypatch):
        monkeypatch.setattr(security, "_redis_client", lambda timeout: DownRedis())
        token = create_access_token(data={"sub": "1", "role": "admin"})
        jti = jwt.decode(token, options={"verify_signature": False})["jti"]

        assert revoke_token(token) is True
        assert jti in security._revoked_tokens
        assert decode_access_token(token) is None

    def test_no_redis_url_means_no_client(self, monkeypatch):
        monkeypatch.setattr(settings, "redis_url", None)
        assert security._redis_client(timeout=1) is None

    def test_configured_url_builds_a_client(self, monkeypatch):
        monkeypatch.setattr(settings, "redis_url", "redis://localhost:6379/0")
        assert isinstance(security._redis_client(timeout=1), redis.Redis)

    def test_expired_entries_are_purged_on_revoke(self, monkeypatch):
        monkeypatch.setattr(security, "_redis_client", lambda timeout: None)
        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        monkeypatch.setitem(security._revoked_tokens, "long-gone", past)

        revoke_token(create_access_token(data={"sub": "1", "role": "admin"}))
        assert "long-gone" not in security._revoked_tokens


class TestMockMode:
    def test_every_request_is_the_mock_user(self, mock_client):
        resp = mock_client.get("/api/auth/session")
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert user["id"] == 0
        assert user["username"] == "mock"
        assert user["role"] == "staff"

    def test_mock_user_role_is_enforced(self, mock_client):
        assert mock_client.get("/api/users/").status_code == 403
        assert mock_client.get("/api/tasks/").status_code == 200
