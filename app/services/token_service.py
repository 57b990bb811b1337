"""
Token Service - Issue and verify signed session tokens.

Access tokens are short lived (1 hour by default) and signed with the
access secret. Refresh tokens live for 30 days and are signed with a
separate refresh secret. Both carry the same claims:
{"id": identity id, "phone": phone, "role": role}.

A refresh token is only honored when it is also the exact token stored
on the identity, so issuing a new pair invalidates every older one.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional
import logging
import uuid

import jwt

from app.core.errors import (
    IdentityNotFound,
    InvalidOrExpiredCredential,
    RefreshTokenExpired,
    RefreshTokenMismatch,
)
from app.core.settings import settings
from app.models.user import AccessToken, Identity, Principal, TokenPair, utcnow

logger = logging.getLogger(__name__)


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TokenService:
    """
    Issues and verifies access/refresh tokens.

    Secrets are injected so tests (and key rotation) can use their own
    keys. An empty secret is a configuration error and fails immediately.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(days=30),
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("Both JWT_SECRET and JWT_REFRESH_SECRET must be configured")
        if access_secret == refresh_secret:
            logger.warning("Access and refresh tokens share a signing secret")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def _sign(self, identity: Identity, secret: str, ttl: timedelta):
        issued_at = utcnow()
        expiry = issued_at + ttl
        payload = {
            "id": identity.id,
            "phone": identity.phone,
            "role": identity.role,
            "jti": uuid.uuid4().hex,
            "iat": issued_at,
            "exp": expiry,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm), expiry

    def _decode(self, token: str, secret: str) -> Dict:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "id", "phone"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidOrExpiredCredential()
        except jwt.PyJWTError as e:
            logger.warning(f"Rejected token: {e}")
            raise InvalidOrExpiredCredential()

    def issue_pair(self, identity: Identity) -> TokenPair:
        access_token, access_expiry = self._sign(identity, self.access_secret, self.access_ttl)
        refresh_token, refresh_expiry = self._sign(identity, self.refresh_secret, self.refresh_ttl)
        return TokenPair(
            access_token=access_token,
            access_expiry=access_expiry,
            refresh_token=refresh_token,
            refresh_expiry=refresh_expiry,
        )

    def issue_access_only(self, identity: Identity) -> AccessToken:
        access_token, access_expiry = self._sign(identity, self.access_secret, self.access_ttl)
        return AccessToken(access_token=access_token, access_expiry=access_expiry)

    def verify_access(self, token: str) -> Principal:
        claims = self._decode(token, self.access_secret)
        return Principal(id=claims["id"], phone=claims["phone"], role=claims.get("role") or "user")

    def verify_refresh(
        self,
        token: str,
        identity_lookup: Callable[[str], Optional[Identity]],
    ) -> Identity:
        """
        Verify a refresh token against its signature and the stored session.

        Both the embedded expiry and the stored refresh_expiry must still
        be in the future.

        Raises:
            InvalidOrExpiredCredential: bad signature or embedded expiry passed
            IdentityNotFound: the token names an identity that no longer exists
            RefreshTokenMismatch: the token is not the one currently stored
            RefreshTokenExpired: the stored refresh_expiry has passed
        """
        claims = self._decode(token, self.refresh_secret)

        identity = identity_lookup(claims["id"])
        if identity is None:
            raise IdentityNotFound("Invalid refresh token", status_code=401)

        if identity.session.refresh_token != token:
            logger.warning(f"Refresh token mismatch for user {identity.id}")
            raise RefreshTokenMismatch()

        stored_expiry = identity.session.refresh_expiry
        if stored_expiry is None or _as_aware(stored_expiry) <= utcnow():
            raise RefreshTokenExpired()

        return identity


# Global service instance (singleton pattern)
_token_service = None


def get_token_service() -> TokenService:
    """
    Get or create the TokenService configured from settings.

    Returns:
        TokenService: The global token service instance
    """
    global _token_service
    if _token_service is None:
        _token_service = TokenService(
            access_secret=settings.JWT_SECRET,
            refresh_secret=settings.JWT_REFRESH_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )
    return _token_service
