"""
Address Service - Per-user address book with a single default address.

Invariant: whenever an identity has at least one address, exactly one of
them has is_default set. Every mutation below re-establishes this before
returning; callers never have to fix it up.

The module-level functions operate on an Identity in memory. AddressService
wraps them with the load/save round trip against the credential store.
"""

from typing import List
import logging

from app.core.errors import AddressNotFound
from app.core.settings import settings
from app.models.user import Address, AddressCreate, AddressUpdate, Identity
from app.services.user_service import UserService, get_user_service

logger = logging.getLogger(__name__)


def _index_of(identity: Identity, address_id: str) -> int:
    for index, address in enumerate(identity.addresses):
        if address.id == address_id:
            return index
    raise AddressNotFound()


def _make_default(identity: Identity, index: int) -> None:
    for address in identity.addresses:
        address.is_default = False
    identity.addresses[index].is_default = True


def has_single_default(addresses: List[Address]) -> bool:
    defaults = sum(1 for address in addresses if address.is_default)
    return defaults == (1 if addresses else 0)


def add_address(identity: Identity, data: AddressCreate) -> Address:
    """Append an address; the first address, or one flagged default, becomes the default."""
    was_empty = not identity.addresses
    address = Address(
        street=data.street,
        city=data.city,
        state=data.state,
        pincode=data.pincode,
        country=data.country or settings.DEFAULT_COUNTRY,
    )
    identity.addresses.append(address)

    if was_empty or data.is_default:
        _make_default(identity, len(identity.addresses) - 1)
    return address


def update_address(identity: Identity, address_id: str, patch: AddressUpdate) -> Address:
    """
    Apply the fields present in `patch`.

    is_default=True moves the default here. is_default=False is ignored:
    the default can only move by choosing another address.
    """
    index = _index_of(identity, address_id)
    address = identity.addresses[index]

    changes = patch.model_dump(exclude_unset=True, exclude_none=True, exclude={"is_default"})
    for field, value in changes.items():
        setattr(address, field, value)

    if patch.is_default:
        _make_default(identity, index)
    return address


def delete_address(identity: Identity, address_id: str) -> Address:
    """Remove an address. If it was the default, the first remaining address takes over."""
    index = _index_of(identity, address_id)
    removed = identity.addresses.pop(index)

    if removed.is_default and identity.addresses:
        _make_default(identity, 0)
    return removed


def set_default(identity: Identity, address_id: str) -> Address:
    index = _index_of(identity, address_id)
    _make_default(identity, index)
    return identity.addresses[index]


class AddressService:
    """Address book operations addressed by the owner's phone number."""

    def __init__(self, users: UserService = None):
        self.users = users or get_user_service()

    def list_addresses(self, phone_number: str) -> List[Address]:
        return self.users.require_user_by_phone(phone_number).addresses

    def add(self, phone_number: str, data: AddressCreate) -> List[Address]:
        identity = self.users.require_user_by_phone(phone_number)
        address = add_address(identity, data)
        self.users.save_user(identity)
        logger.info(f"Address {address.id} added for user {identity.id}")
        return identity.addresses

    def update(self, phone_number: str, address_id: str, patch: AddressUpdate) -> List[Address]:
        identity = self.users.require_user_by_phone(phone_number)
        update_address(identity, address_id, patch)
        self.users.save_user(identity)
        logger.info(f"Address {address_id} updated for user {identity.id}")
        return identity.addresses

    def delete(self, phone_number: str, address_id: str) -> List[Address]:
        identity = self.users.require_user_by_phone(phone_number)
        delete_address(identity, address_id)
        self.users.save_user(identity)
        logger.info(f"Address {address_id} deleted for user {identity.id}")
        return identity.addresses

    def set_default(self, phone_number: str, address_id: str) -> List[Address]:
        identity = self.users.require_user_by_phone(phone_number)
        set_default(identity, address_id)
        self.users.save_user(identity)
        logger.info(f"Default address set to {address_id} for user {identity.id}")
        return identity.addresses


_address_service = None


def get_address_service() -> AddressService:
    global _address_service
    if _address_service is None:
        _address_service = AddressService()
    return _address_service
