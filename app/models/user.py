"""
User models for authentication, sessions and the per-user address book,
cart and wishlist.

An Identity is stored as one Firestore document. Addresses, cart and
wishlist are value types owned by that document and are always read and
written together with it.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Dict, List, Optional
import uuid

from app.core.settings import settings
from app.models.base import BaseResponse


ROLE_USER = "user"
ROLE_ADMIN = "admin"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Address(BaseModel):
    """A stored address. `id` is assigned when the address is added."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    street: str
    city: str
    state: str
    pincode: str
    country: str = Field(default_factory=lambda: settings.DEFAULT_COUNTRY)
    is_default: bool = False


class AddressCreate(BaseModel):
    """Request to add an address. Street, city, state and pincode are required."""
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)
    country: Optional[str] = None
    is_default: bool = False


class AddressUpdate(BaseModel):
    """Partial address update. Omitted fields are left unchanged."""
    street: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = Field(None, min_length=1)
    pincode: Optional[str] = Field(None, min_length=1)
    country: Optional[str] = Field(None, min_length=1)
    is_default: Optional[bool] = None


class SessionState(BaseModel):
    """The single token pair currently valid for an identity."""
    access_token: Optional[str] = None
    access_expiry: Optional[datetime] = None
    refresh_token: Optional[str] = None
    refresh_expiry: Optional[datetime] = None


class Identity(BaseModel):
    """A registered, phone-keyed account."""
    id: str
    phone: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = ROLE_USER
    addresses: List[Address] = Field(default_factory=list)
    cart: Dict[str, int] = Field(default_factory=dict)
    wishlist: List[str] = Field(default_factory=list)
    session: SessionState = Field(default_factory=SessionState)
    login_count: int = 0
    last_login: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_document(cls, doc_id: str, data: Dict) -> "Identity":
        return cls(id=doc_id, **data)

    def to_document(self) -> Dict:
        """Firestore payload; the id is the document key, not a field."""
        return self.model_dump(exclude={"id"})

    def to_public(self) -> "UserResponse":
        return UserResponse(
            id=self.id,
            phone=self.phone,
            name=self.name,
            email=self.email,
            role=self.role,
            addresses=self.addresses,
            cart=self.cart,
            wishlist=self.wishlist,
            login_count=self.login_count,
            last_login=self.last_login,
            created_at=self.created_at,
        )


class UserResponse(BaseModel):
    """Identity as returned to clients. Never carries session tokens."""
    id: str
    phone: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = ROLE_USER
    addresses: List[Address] = Field(default_factory=list)
    cart: Dict[str, int] = Field(default_factory=dict)
    wishlist: List[str] = Field(default_factory=list)
    login_count: int = 0
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class Principal(BaseModel):
    """Decoded access-token claims attached to an authenticated request."""
    id: str
    phone: str
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class LoginRequest(BaseModel):
    """Login, or register when the phone is unknown and a name is given."""
    phone_number: str = Field(..., min_length=10, max_length=15, description="Phone number (with country code)")
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="Required to register a new phone")


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=254)


class UserCreate(BaseModel):
    """Admin request to register an identity directly, optionally with a first address."""
    phone_number: str = Field(..., min_length=10, max_length=15)
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=254)
    address: Optional[AddressCreate] = None


class CartItemRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class WishlistRequest(BaseModel):
    product_id: str = Field(..., min_length=1)


class TokenPair(BaseModel):
    access_token: str
    access_expiry: datetime
    refresh_token: str
    refresh_expiry: datetime


class AccessToken(BaseModel):
    access_token: str
    access_expiry: datetime


class AuthResponse(BaseResponse):
    """Authentication response."""
    user: UserResponse
    tokens: TokenPair


class RefreshResponse(BaseResponse):
    tokens: AccessToken
