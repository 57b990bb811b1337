"""
Payment and upload-signing endpoints. Neither reads nor changes session
state; payment verification is still gated behind authentication.
"""

from fastapi import APIRouter, Depends
from app.models.order import PaymentVerifyRequest
from app.models.user import Principal
from app.services.payment_service import image_upload_auth, verify_payment_signature
from app.core.settings import settings
from app.utils.security import get_current_principal

router = APIRouter(prefix="/api", tags=["Payments"])


@router.post("/payments/verify")
async def verify_payment(
    request: PaymentVerifyRequest,
    principal: Principal = Depends(get_current_principal),
):
    verify_payment_signature(request.order_id, request.payment_id, request.signature)
    return {"success": True, "message": "Payment verified successfully"}


@router.get("/imagekit/auth")
async def imagekit_auth():
    """Signed parameters for a client-side upload. Not tied to any session."""
    params = image_upload_auth()
    return {
        "success": True,
        "public_key": settings.IMAGEKIT_PUBLIC_KEY,
        "url_endpoint": settings.IMAGEKIT_URL_ENDPOINT,
        **params,
    }
