"""
Order endpoints. Orders are stamped with the authenticated identity.
"""

from fastapi import APIRouter, Depends
from app.models.order import OrderCreate, OrderStatusUpdate
from app.models.user import Principal
from app.services.order_service import get_order_service
from app.utils.security import get_current_principal, owner_by_user_id, require_admin, require_owner_or_admin

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("", status_code=201)
async def create_order(order: OrderCreate, principal: Principal = Depends(get_current_principal)):
    created = get_order_service().create_order(principal.id, order)
    return {"success": True, "message": "Order placed successfully", "order": created}


@router.get("")
async def list_orders(principal: Principal = Depends(require_admin)):
    orders = get_order_service().list_all_orders()
    return {"success": True, "orders": orders}


@router.get("/mine")
async def list_my_orders(principal: Principal = Depends(get_current_principal)):
    orders = get_order_service().list_orders_for_user(principal.id)
    return {"success": True, "orders": orders}


@router.get("/user/{user_id}")
async def list_user_orders(user_id: str, principal: Principal = Depends(owner_by_user_id)):
    orders = get_order_service().list_orders_for_user(user_id)
    return {"success": True, "orders": orders}


@router.get("/{order_id}")
async def get_order(order_id: str, principal: Principal = Depends(get_current_principal)):
    order = get_order_service().get_order(order_id)
    require_owner_or_admin(principal, order.user_id, by="id")
    return {"success": True, "order": order}


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    principal: Principal = Depends(require_admin),
):
    order = get_order_service().update_status(order_id, update.status)
    return {"success": True, "message": "Order status updated successfully", "order": order}
