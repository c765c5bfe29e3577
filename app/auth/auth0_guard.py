# app/auth/auth0_guard.py
from typing import Optional

import httpx
from fastapi import Header, HTTPException
from jose import jwt, JWTError

from app.config import AUTH0_DOMAIN, AUTH0_AUDIENCE, AUTH0_ALGORITHMS, AUTH0_TIMEOUT_SECONDS
from app.errors import UNAUTHORIZED_MESSAGE


class Auth0Guard:
    """
    Route-level guard: the request must carry an access token issued by the
    Auth0 tenant. The signing keys are fetched from the tenant JWKS and kept
    on the guard until a token names an unknown key id.
    """

    def __init__(
        self,
        domain: str = AUTH0_DOMAIN,
        audience: str = AUTH0_AUDIENCE,
        algorithms: Optional[list] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.issuer = f"https://{domain}/"
        self.jwks_url = f"https://{domain}/.well-known/jwks.json"
        self.audience = audience
        self.algorithms = algorithms or AUTH0_ALGORITHMS
        self.transport = transport
        self._jwks: Optional[dict] = None

    async def _fetch_jwks(self) -> dict:
        async with httpx.AsyncClient(timeout=AUTH0_TIMEOUT_SECONDS, transport=self.transport) as client:
            response = await client.get(self.jwks_url)
        response.raise_for_status()
        return response.json()

    async def _signing_key(self, kid: str) -> Optional[dict]:
        for refresh in (False, True):
            if self._jwks is None or refresh:
                try:
                    self._jwks = await self._fetch_jwks()
                except (httpx.HTTPError, ValueError):
                    raise HTTPException(status_code=401, detail=UNAUTHORIZED_MESSAGE)
            for key in self._jwks.get("keys", []):
                if key.get("kid") == kid:
                    return key
        return None

    async def __call__(self, authorization: str = Header(None)) -> dict:
        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Token no encontrado")

        token = authorization.split(" ", 1)[1]
        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            raise HTTPException(status_code=401, detail=UNAUTHORIZED_MESSAGE)

        key = await self._signing_key(header.get("kid"))
        if key is None:
            raise HTTPException(status_code=401, detail=UNAUTHORIZED_MESSAGE)

        try:
            return jwt.decode(
                token,
                key,
                algorithms=self.algorithms,
                audience=self.audience or None,
                issuer=self.issuer,
                options={"verify_aud": bool(self.audience)},
            )
        except JWTError:
            raise HTTPException(status_code=401, detail=UNAUTHORIZED_MESSAGE)


auth0_guard = Auth0Guard()
