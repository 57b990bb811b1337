"""
User Service - Credential store for identities in Firestore.

Each identity is a single document in the "users" collection. Callers
load the whole document, mutate it, and save it back; there is no
optimistic locking, so concurrent writers on one identity resolve as
last-write-wins.
"""

from app.config.firebase import get_db
from app.core.errors import IdentityNotFound, PersistenceError, ValidationError
from app.models.user import Identity, ProfileUpdate
from app.utils.firestore_helpers import first_match, normalize_phone, where_filter
from datetime import datetime
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for identity persistence in Firestore.
    """

    COLLECTION = "users"

    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    def _collection(self):
        return self.db.collection(self.COLLECTION)

    def get_user_by_phone(self, phone_number: str) -> Optional[Identity]:
        """
        Get user by phone number.

        Args:
            phone_number: Phone number in any common formatting

        Returns:
            Identity or None if not found
        """
        try:
            query = where_filter(self._collection(), "phone", "==", normalize_phone(phone_number))
            match = first_match(query)
        except Exception as e:
            logger.error(f"Failed to get user by phone: {e}", exc_info=True)
            raise PersistenceError() from e

        if match is None:
            return None
        doc_id, data = match
        return Identity.from_document(doc_id, data)

    def get_user_by_id(self, user_id: str) -> Optional[Identity]:
        try:
            doc = self._collection().document(user_id).get()
        except Exception as e:
            logger.error(f"Failed to get user {user_id}: {e}", exc_info=True)
            raise PersistenceError() from e

        if not doc.exists:
            return None
        return Identity.from_document(doc.id, doc.to_dict())

    def require_user_by_phone(self, phone_number: str) -> Identity:
        identity = self.get_user_by_phone(phone_number)
        if identity is None:
            raise IdentityNotFound()
        return identity

    def require_user_by_id(self, user_id: str) -> Identity:
        identity = self.get_user_by_id(user_id)
        if identity is None:
            raise IdentityNotFound()
        return identity

    def create_user(self, phone_number: str, name: Optional[str] = None, email: Optional[str] = None) -> Identity:
        """
        Create a new identity with an empty address book, cart and wishlist.

        The caller is responsible for checking the phone is not registered.
        """
        try:
            user_ref = self._collection().document()
            identity = Identity(id=user_ref.id, phone=normalize_phone(phone_number), name=name, email=email)
            user_ref.set(identity.to_document())
        except Exception as e:
            logger.error(f"Failed to create user: {e}", exc_info=True)
            raise PersistenceError() from e

        logger.info(f"User created: {identity.id}")
        return identity

    def save_user(self, identity: Identity) -> Identity:
        """Write the whole identity document back."""
        try:
            self._collection().document(identity.id).set(identity.to_document())
        except Exception as e:
            logger.error(f"Failed to save user {identity.id}: {e}", exc_info=True)
            raise PersistenceError() from e
        return identity

    def register_user(self, phone_number: str, name: str, email: Optional[str] = None) -> Identity:
        """Create an identity for a phone that is not registered yet."""
        if self.get_user_by_phone(phone_number) is not None:
            raise ValidationError("User already exists with this phone number")
        return self.create_user(phone_number, name=name, email=email)

    def _apply_profile(self, identity: Identity, update: ProfileUpdate) -> Identity:
        if update.name:
            identity.name = update.name
        if update.email:
            identity.email = update.email
        self.save_user(identity)
        logger.info(f"Profile updated: {identity.id}")
        return identity

    def update_profile(self, phone_number: str, update: ProfileUpdate) -> Identity:
        return self._apply_profile(self.require_user_by_phone(phone_number), update)

    def update_user(self, user_id: str, update: ProfileUpdate) -> Identity:
        return self._apply_profile(self.require_user_by_id(user_id), update)

    def list_users(self) -> List[Identity]:
        try:
            docs = self._collection().order_by("created_at").stream()
            return [Identity.from_document(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Failed to list users: {e}", exc_info=True)
            raise PersistenceError() from e

    def list_recent_logins(self, since: datetime) -> List[Identity]:
        """Identities that logged in at or after `since`, most recent first."""
        try:
            query = where_filter(self._collection(), "last_login", ">=", since)
            docs = query.order_by("last_login", direction="DESCENDING").stream()
            return [Identity.from_document(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Failed to list recent logins: {e}", exc_info=True)
            raise PersistenceError() from e


# Global service instance (singleton pattern)
_user_service = None


def get_user_service() -> UserService:
    """
    Get or create UserService singleton instance.

    Returns:
        UserService: The global user service instance
    """
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
