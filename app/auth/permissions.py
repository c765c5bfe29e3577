import logging
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, Request

from app.auth.authorizer import Auth0Authorizer, IdentityLookupError, ManagementTokenProvider
from app.config import ADMIN_ROLE

logger = logging.getLogger(__name__)


def get_authorizer() -> Auth0Authorizer:
    """Dependency: identity provider client"""
    return Auth0Authorizer(ManagementTokenProvider())


def extract_token_from_header(request: Request) -> Optional[str]:
    parts = (request.headers.get("authorization") or "").split(" ")
    if len(parts) == 2 and parts[0] == "Bearer" and parts[1]:
        return parts[1]
    return None


def require_token(request: Request) -> str:
    """
    Dependency: bearer token must be present

    Raises:
        401: Token missing or not a Bearer credential
    """
    token = extract_token_from_header(request)
    if not token:
        raise HTTPException(status_code=401, detail="Token no encontrado")
    return token


async def get_user_from_token(token: str, authorizer: Auth0Authorizer) -> dict:
    """
    Resolve the caller through /userinfo

    Raises:
        404: Identity provider could not resolve the token
    """
    try:
        return await authorizer.resolve_identity(token)
    except IdentityLookupError:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")


async def verify_user_is_admin(user_sub: str, authorizer: Auth0Authorizer) -> None:
    """
    Raises:
        401: User has no admin role
        500: Role lookup failed
    """
    try:
        is_admin = await authorizer.has_role(user_sub, ADMIN_ROLE)
    except (httpx.HTTPError, ValueError, KeyError) as exc:
        logger.error("role_lookup_failed", extra={"user_sub": user_sub, "error": str(exc)})
        raise HTTPException(status_code=500, detail="Error interno del servidor")

    if not is_admin:
        logger.info("admin_access_denied", extra={"user_sub": user_sub})
        raise HTTPException(status_code=401, detail="Usuario no autorizado")


async def get_current_user(
    token: str = Depends(require_token),
    authorizer: Auth0Authorizer = Depends(get_authorizer)
) -> dict:
    """Dependency: token present and resolved to an Auth0 user"""
    return await get_user_from_token(token, authorizer)


async def require_admin(
    user: dict = Depends(get_current_user),
    authorizer: Auth0Authorizer = Depends(get_authorizer)
) -> dict:
    """Dependency: resolved user holding the admin role"""
    await verify_user_is_admin(user["sub"], authorizer)
    return user
