"""
Payment Service - Signature checks for the payment provider and signed
upload parameters from the ImageKit SDK.

Neither touches session state.
"""

from typing import Dict, Optional
import hashlib
import hmac
import logging
import time

from imagekitio import ImageKit

from app.core.errors import AppError, PaymentVerificationFailed
from app.core.settings import settings

logger = logging.getLogger(__name__)


def payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """HMAC-SHA256 hex digest of "order_id|payment_id"."""
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_payment_signature(
    order_id: str,
    payment_id: str,
    signature: str,
    secret: Optional[str] = None,
) -> None:
    """
    Raise PaymentVerificationFailed unless `signature` matches.

    Raises:
        AppError: no key secret is configured (503)
        PaymentVerificationFailed: signature does not match
    """
    secret = secret or settings.RAZORPAY_KEY_SECRET
    if not secret:
        logger.error("RAZORPAY_KEY_SECRET is not configured")
        raise AppError("Payment verification is not configured", status_code=503)

    expected = payment_signature(order_id, payment_id, secret)
    if not hmac.compare_digest(expected.encode(), signature.encode()):
        logger.warning(f"Payment signature mismatch for order {order_id}")
        raise PaymentVerificationFailed()

    logger.info(f"Payment verified: order {order_id}, payment {payment_id}")


def image_upload_client(private_key: Optional[str] = None) -> ImageKit:
    """ImageKit client built from the IMAGEKIT_* settings."""
    private_key = private_key or settings.IMAGEKIT_PRIVATE_KEY
    if not private_key:
        logger.error("IMAGEKIT_PRIVATE_KEY is not configured")
        raise AppError("Image upload signing is not configured", status_code=503)

    return ImageKit(
        private_key=private_key,
        public_key=settings.IMAGEKIT_PUBLIC_KEY or "",
        url_endpoint=settings.IMAGEKIT_URL_ENDPOINT or "",
    )


def image_upload_auth(
    private_key: Optional[str] = None,
    ttl_seconds: Optional[int] = None,
    now: Optional[float] = None,
) -> Dict:
    """
    Signed parameters ({token, expire, signature}) for a direct
    client-side image upload, as produced by the ImageKit SDK.
    """
    ttl = ttl_seconds if ttl_seconds is not None else settings.IMAGEKIT_TOKEN_TTL_SECONDS
    expire = int(now if now is not None else time.time()) + ttl
    return image_upload_client(private_key).get_authentication_parameters(expire=expire)
