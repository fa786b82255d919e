# tests/test_tokens.py
import jwt
import pytest

from boutique.errors import Unauthorized
from boutique.tokens import TokenService

SECRET = "unit-test-signing-secret-0123456789"


class Clock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_issue_then_verify():
    svc = TokenService(SECRET)
    assert svc.verify(svc.issue("admin")) == "admin"


def test_token_claims():
    clock = Clock()
    token = TokenService(SECRET, clock=clock).issue("admin")
    claims = jwt.decode(token, SECRET, algorithms=["HS256"], options={"verify_exp": False})
    assert claims["username"] == "admin"
    assert claims["role"] == "admin"
    assert claims["exp"] - claims["iat"] == 2 * 3600


def test_token_expires_after_two_hours():
    clock = Clock()
    svc = TokenService(SECRET, clock=clock)
    token = svc.issue("admin")
    clock.now += 2 * 3600 - 1
    assert svc.verify(token) == "admin"
    clock.now += 1
    with pytest.raises(Unauthorized):
        svc.verify(token)


def test_wrong_secret_is_rejected():
    token = TokenService("another-secret-that-is-long-enough-32b").issue("admin")
    with pytest.raises(Unauthorized):
        TokenService(SECRET).verify(token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(Unauthorized):
        TokenService(SECRET).verify(token)


def test_token_without_admin_role_is_rejected():
    token = jwt.encode({"username": "admin", "role": "guest", "exp": 4_000_000_000}, SECRET, algorithm="HS256")
    with pytest.raises(Unauthorized):
        TokenService(SECRET).verify(token)


def test_empty_secret_not_allowed():
    with pytest.raises(ValueError):
        TokenService("")
