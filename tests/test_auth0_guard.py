import base64
import time

import httpx
import pytest
from fastapi import HTTPException
from jose import jwt

from app.auth.auth0_guard import Auth0Guard

DOMAIN = "tenant.example.auth0.com"
SECRET = "guard-test-secret-with-enough-length"


def _jwks_transport(calls):
    key = base64.urlsafe_b64encode(SECRET.encode()).rstrip(b"=").decode()

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, json={"keys": [{"kty": "oct", "kid": "k1", "k": key, "alg": "HS256"}]})

    return httpx.MockTransport(handler)


def _token(kid="k1", **claims):
    payload = {"sub": "auth0|123", "iss": f"https://{DOMAIN}/", "exp": int(time.time()) + 300, **claims}
    return jwt.encode(payload, SECRET, algorithm="HS256", headers={"kid": kid})


def _guard(calls) -> Auth0Guard:
    return Auth0Guard(domain=DOMAIN, audience="", algorithms=["HS256"], transport=_jwks_transport(calls))


@pytest.mark.asyncio
@pytest.mark.parametrize("authorization, detail", [
    (None, "Token no encontrado"),
    ("", "Token no encontrado"),
    ("Basic abc", "Token no encontrado"),
    ("Bearer not-a-jwt", "Acceso no autorizado"),
])
async def test_guard_rejects_missing_or_malformed_credentials(authorization, detail):
    with pytest.raises(HTTPException) as exc_info:
        await _guard([])(authorization=authorization)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == detail


@pytest.mark.asyncio
async def test_guard_accepts_token_signed_by_tenant_key():
    calls = []
    guard = _guard(calls)

    claims = await guard(authorization=f"Bearer {_token()}")
    await guard(authorization=f"Bearer {_token()}")

    assert claims["sub"] == "auth0|123"
    assert calls == ["/.well-known/jwks.json"]


@pytest.mark.asyncio
async def test_guard_rejects_expired_token():
    with pytest.raises(HTTPException) as exc_info:
        await _guard([])(authorization=f"Bearer {_token(exp=int(time.time()) - 60)}")

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Acceso no autorizado"


@pytest.mark.asyncio
async def test_guard_rejects_foreign_issuer():
    with pytest.raises(HTTPException):
        await _guard([])(authorization=f"Bearer {_token(iss='https://evil.example.com/')}")


@pytest.mark.asyncio
async def test_guard_refreshes_keys_for_unknown_kid():
    calls = []

    with pytest.raises(HTTPException):
        await _guard(calls)(authorization=f"Bearer {_token(kid='rotated')}")

    assert calls == ["/.well-known/jwks.json", "/.well-known/jwks.json"]
