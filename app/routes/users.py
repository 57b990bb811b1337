"""
User administration endpoints.
"""

from datetime import timedelta
from fastapi import APIRouter, Depends
from app.models.user import Principal, ProfileUpdate, UserCreate, utcnow
from app.services.address_service import add_address
from app.services.user_service import get_user_service
from app.utils.security import owner_by_user_id, require_admin

router = APIRouter(prefix="/api/users", tags=["Users"])

NEW_USER_WINDOW = timedelta(hours=24)


@router.get("")
async def list_users(principal: Principal = Depends(require_admin)):
    users = get_user_service().list_users()
    return {"success": True, "users": [user.to_public() for user in users]}


@router.get("/new")
async def list_new_users(principal: Principal = Depends(require_admin)):
    """Users who logged in during the last 24 hours, most recent first."""
    users = get_user_service().list_recent_logins(utcnow() - NEW_USER_WINDOW)
    return {"success": True, "users": [user.to_public() for user in users]}


@router.get("/{user_id}")
async def get_user(user_id: str, principal: Principal = Depends(owner_by_user_id)):
    identity = get_user_service().require_user_by_id(user_id)
    return {"success": True, "user": identity.to_public()}


@router.post("/add", status_code=201)
async def add_user(data: UserCreate, principal: Principal = Depends(require_admin)):
    """Register an identity directly; an address given here becomes its default."""
    service = get_user_service()
    identity = service.register_user(data.phone_number, data.name, email=data.email)
    if data.address is not None:
        add_address(identity, data.address)
        service.save_user(identity)
    return {"success": True, "message": "User added", "user": identity.to_public()}


@router.post("/update/{user_id}")
async def update_user(
    user_id: str,
    update: ProfileUpdate,
    principal: Principal = Depends(owner_by_user_id),
):
    identity = get_user_service().update_user(user_id, update)
    return {"success": True, "message": "User updated", "user": identity.to_public()}
