"""
Authentication endpoints - Phone number login/registration and session tokens.
"""

from fastapi import APIRouter, Depends, Request, Response
from app.core.errors import ValidationError
from app.models.user import (
    AuthResponse,
    LoginRequest,
    Principal,
    ProfileUpdate,
    RefreshRequest,
    RefreshResponse,
)
from app.services.session_service import get_session_service
from app.services.user_service import get_user_service
from app.utils.security import (
    REFRESH_COOKIE,
    clear_session_cookies,
    extract_access_token,
    get_current_principal,
    owner_by_phone,
    set_access_cookie,
    set_session_cookies,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, response: Response):
    """
    Log in with a phone number, registering it first when a name is given.

    Issues a fresh access/refresh pair, replacing any pair issued before.
    Tokens are returned in the body and as httpOnly cookies.

    Args:
        request: phone_number and, for new users, name

    Returns:
        AuthResponse with user data and tokens
    """
    identity, pair = get_session_service().login(request.phone_number, request.name)
    set_session_cookies(response, pair)

    return AuthResponse(
        success=True,
        message="Login successful",
        user=identity.to_public(),
        tokens=pair,
    )


@router.post("/refresh-token", response_model=RefreshResponse)
async def refresh_token(http_request: Request, response: Response, request: RefreshRequest = None):
    """
    Exchange the stored refresh token for a new access token.

    The refresh token is read from the body, falling back to the
    refreshToken cookie. The refresh token itself is not rotated.
    """
    token = (request.refresh_token if request else None) or http_request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise ValidationError("Refresh token is required")

    access = get_session_service().refresh(token)
    set_access_cookie(response, access)

    return RefreshResponse(
        success=True,
        message="Token refreshed successfully",
        tokens=access,
    )


@router.post("/logout")
async def logout(http_request: Request, response: Response):
    """
    Clear session cookies and, when the access token verifies, the stored session.

    Always succeeds; a missing or invalid token is not an error here.
    """
    clear_session_cookies(response)
    get_session_service().logout(extract_access_token(http_request))
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def get_current_user(principal: Principal = Depends(get_current_principal)):
    """Profile of whoever holds the access token."""
    identity = get_user_service().require_user_by_id(principal.id)
    return {"success": True, "user": identity.to_public()}


@router.get("/profile/{phone_number}")
async def get_profile(phone_number: str, principal: Principal = Depends(owner_by_phone)):
    identity = get_user_service().require_user_by_phone(phone_number)
    return {"success": True, "user": identity.to_public()}


@router.put("/profile/{phone_number}")
async def update_profile(
    phone_number: str,
    update: ProfileUpdate,
    principal: Principal = Depends(owner_by_phone),
):
    identity = get_user_service().update_profile(phone_number, update)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": identity.to_public(),
    }
