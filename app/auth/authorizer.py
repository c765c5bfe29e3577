# app/auth/authorizer.py

import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from app.config import (
    AUTH0_DOMAIN, AUTH0_CLIENT_ID, AUTH0_CLIENT_SECRET,
    AUTH0_MANAGEMENT_AUDIENCE, AUTH0_TIMEOUT_SECONDS
)

logger = logging.getLogger(__name__)


class IdentityLookupError(Exception):
    """The identity provider could not resolve the bearer token"""


class ManagementTokenProvider:
    """
    Issues Management API access tokens with the client-credentials grant.
    A fresh token is requested on every call.
    """

    def __init__(
        self,
        domain: str = AUTH0_DOMAIN,
        client_id: str = AUTH0_CLIENT_ID,
        client_secret: str = AUTH0_CLIENT_SECRET,
        audience: str = AUTH0_MANAGEMENT_AUDIENCE,
        timeout: float = AUTH0_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token_url = f"https://{domain}/oauth/token"
        self.client_id = client_id
        self.client_secret = client_secret
        self.audience = audience
        self.timeout = timeout
        self.transport = transport

    async def get_access_token(self) -> str:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                self.token_url,
                json={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "audience": self.audience,
                    "grant_type": "client_credentials",
                },
            )
        response.raise_for_status()
        return response.json()["access_token"]


class Auth0Authorizer:
    """
    Resolves bearer tokens to Auth0 users and reads their role assignments.
    Nothing is cached between requests.
    """

    def __init__(
        self,
        token_provider: ManagementTokenProvider,
        domain: str = AUTH0_DOMAIN,
        timeout: float = AUTH0_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = f"https://{domain}"
        self.token_provider = token_provider
        self.timeout = timeout
        self.transport = transport

    async def resolve_identity(self, token: str) -> dict:
        """
        GET /userinfo with the caller's token.
        Any HTTP or network failure raises IdentityLookupError.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    f"{self.base_url}/userinfo",
                    headers={"Authorization": f"Bearer {token}"},
                )
            response.raise_for_status()
            user = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("userinfo_lookup_failed", extra={"error": str(exc)})
            raise IdentityLookupError(str(exc)) from exc

        if not user.get("sub"):
            raise IdentityLookupError("userinfo response without sub")
        return user

    async def get_roles(self, user_id: str) -> List[dict]:
        access_token = await self.token_provider.get_access_token()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(
                f"{self.base_url}/api/v2/users/{quote(user_id, safe='')}/roles",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        response.raise_for_status()
        return response.json()

    async def has_role(self, user_id: str, role: str) -> bool:
        roles = await self.get_roles(user_id)
        return any(entry.get("name") == role for entry in roles)
