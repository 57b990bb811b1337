"""
Session Service - Login-or-register, token refresh and logout.

Single active session policy: an identity stores exactly one token pair.
Every login overwrites it, which silently invalidates whatever pair was
issued before (on this or any other device). Refresh only replaces the
access token; the refresh token and its expiry stay as they were.
"""

from typing import Optional, Tuple
import logging

from app.core.errors import AppError, RegistrationRequired
from app.models.user import AccessToken, Identity, SessionState, TokenPair, utcnow
from app.services.token_service import TokenService, get_token_service
from app.services.user_service import UserService, get_user_service

logger = logging.getLogger(__name__)


class SessionService:
    """Orchestrates the credential store and the token service."""

    def __init__(self, users: UserService = None, tokens: TokenService = None):
        self.users = users or get_user_service()
        self.tokens = tokens or get_token_service()

    def login(self, phone_number: str, name: Optional[str] = None) -> Tuple[Identity, TokenPair]:
        """
        Log in an existing identity, or register one when a name is given.

        Raises:
            RegistrationRequired: phone is unknown and no name was supplied
        """
        identity = self.users.get_user_by_phone(phone_number)

        if identity is None:
            if not name:
                logger.info("Login refused: unknown phone and no name for registration")
                raise RegistrationRequired()
            identity = self.users.create_user(phone_number, name=name)

        identity.last_login = utcnow()
        identity.login_count += 1

        pair = self.tokens.issue_pair(identity)
        identity.session = SessionState(
            access_token=pair.access_token,
            access_expiry=pair.access_expiry,
            refresh_token=pair.refresh_token,
            refresh_expiry=pair.refresh_expiry,
        )
        self.users.save_user(identity)

        logger.info(f"User logged in: {identity.id} (login #{identity.login_count})")
        return identity, pair

    def refresh(self, refresh_token: str) -> AccessToken:
        """
        Mint a new access token from the stored refresh token.

        Any verification failure propagates as a 401-class AppError.
        """
        identity = self.tokens.verify_refresh(refresh_token, self.users.get_user_by_id)

        access = self.tokens.issue_access_only(identity)
        identity.session.access_token = access.access_token
        identity.session.access_expiry = access.access_expiry
        self.users.save_user(identity)

        logger.info(f"Access token refreshed: {identity.id}")
        return access

    def logout(self, access_token: Optional[str]) -> bool:
        """
        Clear the stored session for the token's identity, best effort.

        Missing or unverifiable tokens are not errors; the caller still
        reports a successful logout. Returns True only when a stored
        session was actually cleared.
        """
        if not access_token:
            return False

        try:
            principal = self.tokens.verify_access(access_token)
        except AppError as e:
            logger.info(f"Logout with unusable token: {e.message}")
            return False

        identity = self.users.get_user_by_id(principal.id)
        if identity is None:
            return False

        identity.session = SessionState()
        self.users.save_user(identity)
        logger.info(f"User logged out: {identity.id}")
        return True


# Global service instance (singleton pattern)
_session_service = None


def get_session_service() -> SessionService:
    global _session_service
    if _session_service is None:
        _session_service = SessionService()
    return _session_service
