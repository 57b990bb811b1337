"""
Order and payment models.
Orders are owned by the identity that placed them (user_id).
"""

from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from app.models.user import utcnow


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    product_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    image: Optional[str] = None


class ShippingAddress(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)
    country: Optional[str] = None


class OrderCreate(BaseModel):
    items: List[OrderItem] = Field(..., min_length=1)
    total: float = Field(..., gt=0)
    address: ShippingAddress
    phone: str = Field(..., min_length=10, max_length=15)
    payment_method: str = Field(..., min_length=1)
    payment_id: Optional[str] = None


class Order(BaseModel):
    id: str
    user_id: str
    items: List[OrderItem]
    total: float
    address: ShippingAddress
    phone: str
    payment_method: str
    payment_id: Optional[str] = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentVerifyRequest(BaseModel):
    order_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)
