"""
Cart Service - Cart quantities and wishlist entries on the identity document.
"""

from typing import Dict, List
import logging

from app.services.user_service import UserService, get_user_service

logger = logging.getLogger(__name__)


class CartService:
    """
    Cart is a product_id -> quantity mapping (last write wins on quantity).
    Wishlist is an ordered list of product ids without duplicates.
    """

    def __init__(self, users: UserService = None):
        self.users = users or get_user_service()

    def set_cart_item(self, phone_number: str, product_id: str, quantity: int) -> Dict[str, int]:
        identity = self.users.require_user_by_phone(phone_number)
        identity.cart[product_id] = quantity
        self.users.save_user(identity)
        logger.info(f"Cart updated for user {identity.id}: {product_id} x{quantity}")
        return identity.cart

    def remove_cart_item(self, phone_number: str, product_id: str) -> Dict[str, int]:
        identity = self.users.require_user_by_phone(phone_number)
        if identity.cart.pop(product_id, None) is not None:
            self.users.save_user(identity)
        return identity.cart

    def add_to_wishlist(self, phone_number: str, product_id: str) -> List[str]:
        identity = self.users.require_user_by_phone(phone_number)
        if product_id not in identity.wishlist:
            identity.wishlist.append(product_id)
            self.users.save_user(identity)
        return identity.wishlist

    def remove_from_wishlist(self, phone_number: str, product_id: str) -> List[str]:
        identity = self.users.require_user_by_phone(phone_number)
        if product_id in identity.wishlist:
            identity.wishlist = [pid for pid in identity.wishlist if pid != product_id]
            self.users.save_user(identity)
        return identity.wishlist


_cart_service = None


def get_cart_service() -> CartService:
    global _cart_service
    if _cart_service is None:
        _cart_service = CartService()
    return _cart_service
