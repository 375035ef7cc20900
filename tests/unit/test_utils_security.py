from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from hearty_hounds import config
from hearty_hounds.utils import security as security_mod
from hearty_hounds.utils.security import determine_role, get_current_user, get_optional_user, require_admin

def _make_app():
    app = FastAPI()

    @app.get("/me")
    def me(user=Depends(get_current_user)):
        return user

    @app.get("/maybe")
    def maybe(user=Depends(get_optional_user)):
        return {"user": user}

    @app.get("/admin")
    def admin(user=Depends(require_admin)):
        return {"ok": True}

    return app

def _fake_users(monkeypatch, users):
    def _lookup(token):
        if token not in users:
            raise RuntimeError("invalid JWT")
        return users[token]
    monkeypatch.setattr(security_mod, "get_user_from_access_token", _lookup)

def test_determine_role(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_EMAILS", ["boss@hearty.test"])
    assert determine_role(None, {"role": "ADMIN"}) == "admin"
    assert determine_role("Boss@Hearty.test", {}) == "admin"
    assert determine_role("someone@hearty.test", {"role": "user"}) == "user"
    assert determine_role(None, None) == "user"

def test_bearer_success(monkeypatch):
    _fake_users(monkeypatch, {"tok-1": {"id": "u1", "email": "a@b.c", "user_metadata": {"name": "A"}}})
    r = TestClient(_make_app()).get("/me", headers={"Authorization": "Bearer tok-1"})
    assert r.status_code == 200
    assert r.json() == {"id": "u1", "email": "a@b.c", "metadata": {"name": "A"}, "role": "user"}

def test_missing_token_is_401(monkeypatch):
    _fake_users(monkeypatch, {})
    r = TestClient(_make_app()).get("/me")
    assert r.status_code == 401
    assert r.json()["detail"] == "Not authenticated"

def test_invalid_token_is_401(monkeypatch):
    _fake_users(monkeypatch, {"tok-no-id": {"email": "x@y.z"}})
    client = TestClient(_make_app())
    assert client.get("/me", headers={"Authorization": "Bearer unknown"}).status_code == 401
    r = client.get("/me", headers={"Authorization": "Bearer tok-no-id"})
    assert r.status_code == 401
    assert "Session expired" in r.json()["detail"]

def test_optional_user(monkeypatch):
    _fake_users(monkeypatch, {"tok-1": {"id": "u1", "email": "a@b.c"}})
    client = TestClient(_make_app())
    assert client.get("/maybe").json() == {"user": None}
    assert client.get("/maybe", headers={"Authorization": "Bearer tok-1"}).json()["user"]["id"] == "u1"

def test_require_admin(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_EMAILS", [])
    _fake_users(monkeypatch, {
        "user-tok": {"id": "u1", "email": "u@b.c", "user_metadata": {}},
        "admin-tok": {"id": "u2", "email": "a@b.c", "user_metadata": {"role": "admin"}},
    })
    client = TestClient(_make_app())
    r = client.get("/admin", headers={"Authorization": "Bearer user-tok"})
    assert r.status_code == 403
    assert r.json()["detail"] == "Forbidden"
    assert client.get("/admin", headers={"Authorization": "Bearer admin-tok"}).json() == {"ok": True}
