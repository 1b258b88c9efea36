"""
Tests for app assembly, config and the bcrypt/JWT helpers.
"""

import importlib

import jwt
import pytest

from todo_service import config
from todo_service.security import check_password, create_token, hash_password


# --------------- Health / routing ---------------

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "todo"}


def test_unknown_route_uses_flat_error_body(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert "message" in resp.json()


def test_cors_headers(client):
    resp = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert resp.headers["access-control-allow-origin"] == "*"


# --------------- Bcrypt check ---------------

def test_bcrypt_hashing():
    hashed = hash_password("mypassword")
    assert hashed != "mypassword"
    assert hashed.startswith("$2b$10$")
    assert check_password("mypassword", hashed) is True
    assert check_password("wrong", hashed) is False


def test_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


# --------------- Tokens ---------------

def test_token_without_id():
    claims = jwt.decode(create_token("a@b.co", "u"), config.SECRET_KEY, algorithms=["HS256"])
    assert claims["email"] == "a@b.co"
    assert claims["username"] == "u"
    assert "id" not in claims


def test_token_rejects_other_secret():
    with pytest.raises(jwt.InvalidSignatureError):
        jwt.decode(create_token("a@b.co", "u"), "another-secret", algorithms=["HS256"])


# --------------- Config ---------------

def test_missing_secret_key_fails_fast(monkeypatch):
    secret = config.SECRET_KEY
    monkeypatch.delenv("SECRET_KEY")
    try:
        with pytest.raises(RuntimeError):
            importlib.reload(config)
    finally:
        monkeypatch.setenv("SECRET_KEY", secret)
        importlib.reload(config)
