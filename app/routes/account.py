"""
Account endpoints - Address book, cart and wishlist of one identity.

Every route is keyed by the owner's phone number and is open only to that
owner or an administrator.
"""

from fastapi import APIRouter, Depends
from app.models.user import AddressCreate, AddressUpdate, CartItemRequest, Principal, WishlistRequest
from app.services.address_service import get_address_service
from app.services.cart_service import get_cart_service
from app.utils.security import owner_by_phone

router = APIRouter(prefix="/api/auth", tags=["Account"])


# Addresses

@router.get("/addresses/{phone_number}")
async def list_addresses(phone_number: str, principal: Principal = Depends(owner_by_phone)):
    addresses = get_address_service().list_addresses(phone_number)
    return {"success": True, "addresses": addresses}


@router.post("/addresses/{phone_number}", status_code=201)
async def add_address(
    phone_number: str,
    address: AddressCreate,
    principal: Principal = Depends(owner_by_phone),
):
    """
    Add an address. The first address, or one sent with is_default=true,
    becomes the default.
    """
    addresses = get_address_service().add(phone_number, address)
    return {"success": True, "message": "Address added successfully", "addresses": addresses}


@router.put("/addresses/{phone_number}/{address_id}")
async def update_address(
    phone_number: str,
    address_id: str,
    patch: AddressUpdate,
    principal: Principal = Depends(owner_by_phone),
):
    addresses = get_address_service().update(phone_number, address_id, patch)
    return {"success": True, "message": "Address updated successfully", "addresses": addresses}


@router.delete("/addresses/{phone_number}/{address_id}")
async def delete_address(
    phone_number: str,
    address_id: str,
    principal: Principal = Depends(owner_by_phone),
):
    addresses = get_address_service().delete(phone_number, address_id)
    return {"success": True, "message": "Address deleted successfully", "addresses": addresses}


@router.patch("/addresses/{phone_number}/{address_id}/default")
async def set_default_address(
    phone_number: str,
    address_id: str,
    principal: Principal = Depends(owner_by_phone),
):
    addresses = get_address_service().set_default(phone_number, address_id)
    return {"success": True, "message": "Default address set successfully", "addresses": addresses}


# Cart

@router.post("/cart/{phone_number}")
async def set_cart_item(
    phone_number: str,
    item: CartItemRequest,
    principal: Principal = Depends(owner_by_phone),
):
    cart = get_cart_service().set_cart_item(phone_number, item.product_id, item.quantity)
    return {"success": True, "message": "Cart updated successfully", "cart": cart}


@router.delete("/cart/{phone_number}/{product_id}")
async def remove_cart_item(
    phone_number: str,
    product_id: str,
    principal: Principal = Depends(owner_by_phone),
):
    cart = get_cart_service().remove_cart_item(phone_number, product_id)
    return {"success": True, "message": "Product removed from cart", "cart": cart}


# Wishlist

@router.post("/wishlist/{phone_number}")
async def add_to_wishlist(
    phone_number: str,
    item: WishlistRequest,
    principal: Principal = Depends(owner_by_phone),
):
    wishlist = get_cart_service().add_to_wishlist(phone_number, item.product_id)
    return {"success": True, "message": "Product added to wishlist", "wishlist": wishlist}


@router.delete("/wishlist/{phone_number}/{product_id}")
async def remove_from_wishlist(
    phone_number: str,
    product_id: str,
    principal: Principal = Depends(owner_by_phone),
):
    wishlist = get_cart_service().remove_from_wishlist(phone_number, product_id)
    return {"success": True, "message": "Product removed from wishlist", "wishlist": wishlist}
