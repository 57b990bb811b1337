"""
Health check payloads.
"""

from datetime import datetime
from pydantic import Field

from app.core.settings import settings
from app.models.base import BaseResponse
from app.models.user import utcnow


def _database_backend() -> str:
    return "mock" if settings.USE_MOCK_DB else "firestore"


class ServiceHealth(BaseResponse):
    status: str = "healthy"
    service: str = Field(default_factory=lambda: settings.APP_NAME)
    version: str = Field(default_factory=lambda: settings.APP_VERSION)
    timestamp: datetime = Field(default_factory=utcnow)


class DatabaseHealth(BaseResponse):
    """Store reachability. `database` names the backend in use."""
    status: str = "healthy"
    database: str = Field(default_factory=_database_backend)
    connected: bool = True
    collections_count: int = 0
    timestamp: datetime = Field(default_factory=utcnow)
