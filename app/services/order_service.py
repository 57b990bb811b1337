"""
Order Service - Order records stamped with the owning identity.
"""

from app.config.firebase import get_db
from app.core.errors import OrderNotFound, PersistenceError
from app.core.settings import settings
from app.models.order import Order, OrderCreate, OrderStatus
from app.utils.firestore_helpers import where_filter
from typing import List
import logging

logger = logging.getLogger(__name__)


class OrderService:
    """Service for order persistence in Firestore."""

    COLLECTION = "orders"

    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    def _collection(self):
        return self.db.collection(self.COLLECTION)

    def create_order(self, user_id: str, data: OrderCreate) -> Order:
        """Create a pending order owned by `user_id`."""
        try:
            order_ref = self._collection().document()
            address = data.address.model_copy(
                update={"country": data.address.country or settings.DEFAULT_COUNTRY}
            )
            order = Order(
                id=order_ref.id,
                user_id=user_id,
                items=data.items,
                total=data.total,
                address=address,
                phone=data.phone,
                payment_method=data.payment_method,
                payment_id=data.payment_id,
            )
            payload = order.model_dump(exclude={"id"})
            payload["status"] = order.status.value
            order_ref.set(payload)
        except Exception as e:
            logger.error(f"Failed to create order: {e}", exc_info=True)
            raise PersistenceError() from e

        logger.info(f"Order created: {order.id} for user {user_id}")
        return order

    def get_order(self, order_id: str) -> Order:
        try:
            doc = self._collection().document(order_id).get()
        except Exception as e:
            logger.error(f"Failed to get order {order_id}: {e}", exc_info=True)
            raise PersistenceError() from e

        if not doc.exists:
            raise OrderNotFound()
        return Order(id=doc.id, **doc.to_dict())

    def list_orders_for_user(self, user_id: str) -> List[Order]:
        try:
            query = where_filter(self._collection(), "user_id", "==", user_id)
            docs = query.order_by("created_at", direction="DESCENDING").stream()
            return [Order(id=doc.id, **doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Failed to list orders for user {user_id}: {e}", exc_info=True)
            raise PersistenceError() from e

    def list_all_orders(self) -> List[Order]:
        try:
            docs = self._collection().order_by("created_at", direction="DESCENDING").stream()
            return [Order(id=doc.id, **doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Failed to list orders: {e}", exc_info=True)
            raise PersistenceError() from e

    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        order = self.get_order(order_id)
        try:
            self._collection().document(order_id).update({"status": status.value})
        except Exception as e:
            logger.error(f"Failed to update order {order_id}: {e}", exc_info=True)
            raise PersistenceError() from e

        logger.info(f"Order {order_id} status: {order.status.value} -> {status.value}")
        order.status = status
        return order


_order_service = None


def get_order_service() -> OrderService:
    global _order_service
    if _order_service is None:
        _order_service = OrderService()
    return _order_service
