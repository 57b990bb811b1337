"""
Pydantic base models for request/response validation.

Every endpoint answers with the same envelope:
{"success": bool, "message": optional str, ...payload}
"""

from pydantic import BaseModel
from typing import Optional


class BaseResponse(BaseModel):
    """
    Base response model for API responses.
    All API responses extend this for consistency.
    """
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseResponse):
    """Body of every failed request (see the handlers in app.main)."""
    success: bool = False
