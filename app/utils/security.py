"""
Request authentication and ownership guards.

Access tokens arrive either as "Authorization: Bearer <token>" or in the
httpOnly "accessToken" cookie; the header wins when both are present.
The guards are FastAPI dependencies so routes declare what they need.
"""

from datetime import datetime
from typing import Optional
import logging

from fastapi import Depends, Request, Response

from app.core.errors import Forbidden, MissingCredential
from app.core.settings import settings
from app.models.user import AccessToken, Principal, TokenPair, utcnow
from app.services.token_service import TokenService, get_token_service
from app.utils.firestore_helpers import normalize_phone

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def extract_access_token(request: Request) -> Optional[str]:
    """Bearer header first, then the access cookie."""
    header = request.headers.get("Authorization")
    if header:
        scheme, _, token = header.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return request.cookies.get(ACCESS_COOKIE) or None


def authenticate(request: Request, tokens: TokenService = None) -> Principal:
    """
    Verify the request's access token and attach the principal to request.state.

    Raises:
        MissingCredential: no token in header or cookie
        InvalidOrExpiredCredential: token fails signature or expiry checks
    """
    token = extract_access_token(request)
    if not token:
        raise MissingCredential()

    principal = (tokens or get_token_service()).verify_access(token)
    request.state.principal = principal
    return principal


async def get_current_principal(request: Request) -> Principal:
    return authenticate(request)


def require_owner_or_admin(principal: Principal, owner_key: str, by: str = "phone") -> Principal:
    """
    Allow the owner of a resource, or any administrator.

    `by` selects which principal key identifies the owner: "phone" or "id".
    """
    if by == "phone":
        is_owner = normalize_phone(principal.phone) == normalize_phone(owner_key)
    else:
        is_owner = principal.id == owner_key

    if is_owner or principal.is_admin:
        return principal

    logger.warning(f"User {principal.id} denied access to resource owned by {by}={owner_key}")
    raise Forbidden()


async def owner_by_phone(
    phone_number: str,
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    return require_owner_or_admin(principal, phone_number, by="phone")


async def owner_by_user_id(
    user_id: str,
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    return require_owner_or_admin(principal, user_id, by="id")


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise Forbidden("Admin access required")
    return principal


def _max_age(expiry: datetime) -> int:
    return max(0, int((expiry - utcnow()).total_seconds()))


def _set_cookie(response: Response, key: str, value: str, expiry: datetime) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=_max_age(expiry),
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def set_session_cookies(response: Response, pair: TokenPair) -> None:
    _set_cookie(response, ACCESS_COOKIE, pair.access_token, pair.access_expiry)
    _set_cookie(response, REFRESH_COOKIE, pair.refresh_token, pair.refresh_expiry)


def set_access_cookie(response: Response, access: AccessToken) -> None:
    _set_cookie(response, ACCESS_COOKIE, access.access_token, access.access_expiry)


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, httponly=True, secure=settings.is_production, samesite="strict")
    response.delete_cookie(REFRESH_COOKIE, httponly=True, secure=settings.is_production, samesite="strict")
