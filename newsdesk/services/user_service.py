"""
User records and role management
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from newsdesk.config import settings
from newsdesk.exceptions import (
    Forbidden,
    InvalidIdentifier,
    NotFound,
    SelfDeleteDenied,
    ValidationError,
)
from newsdesk.models.user import User, UserRole, firestore_user_to_model
from newsdesk.schemas.user import UserUpsertSchema
from newsdesk.services.identity import VerifiedIdentity
from newsdesk.services.store import FirestoreStore, is_uid

logger = logging.getLogger(__name__)


def _check_uid(uid: str) -> None:
    if not is_uid(uid):
        raise InvalidIdentifier("Invalid user ID")


class UserService:
    """User operations backed by the users collection (document id = uid)"""

    def __init__(self, store: FirestoreStore, collection: Optional[str] = None):
        self.store = store
        self.collection = collection or settings.USERS_COLLECTION

    async def upsert(self, payload: UserUpsertSchema) -> Tuple[User, bool]:
        """
        Create the user on first login, otherwise refresh profile fields.

        Role and createdAt are only ever written on creation.

        Returns:
            The stored user and whether it was created.
        """
        now = datetime.now(timezone.utc)
        profile = {
            "name": payload.name,
            "email": payload.email,
            "photoURL": payload.photo_url,
            "lastLoginAt": now,
        }
        created = await self.store.create(
            self.collection,
            payload.uid,
            {
                "uid": payload.uid,
                **profile,
                "role": UserRole.USER.value,
                "premiumTaken": None,
                "createdAt": now,
            },
        )
        if created:
            logger.info("Created user %s", payload.uid)
        elif not await self.store.update(self.collection, payload.uid, profile):
            raise NotFound("User not found")

        return await self.get_by_uid(payload.uid), created

    async def get_by_uid(self, uid: str) -> User:
        if not uid or not uid.strip():
            raise ValidationError("uid is required")
        _check_uid(uid)
        data = await self.store.get(self.collection, uid)
        if not data:
            raise NotFound("User not found")
        return firestore_user_to_model(data, uid)

    async def find_by_uid(self, uid: str) -> Optional[User]:
        data = await self.store.get(self.collection, uid)
        return firestore_user_to_model(data, uid) if data else None

    async def get_by_email(self, email: str) -> User:
        docs = await self.store.find(self.collection, filters=[("email", "==", email)], limit=1)
        if not docs:
            raise NotFound("User not found")
        doc_id, data = docs[0]
        return firestore_user_to_model(data, doc_id)

    async def list_all(self) -> List[User]:
        docs = await self.store.find(self.collection, order_by="createdAt", descending=True)
        return [firestore_user_to_model(data, doc_id) for doc_id, data in docs]

    async def require_admin(self, identity: VerifiedIdentity) -> User:
        """Load the requester's own record and make sure it is an admin"""
        user = await self.find_by_uid(identity.uid)
        if user is None or not user.is_admin:
            raise Forbidden("Admin access required")
        return user

    async def update_role(self, target_id: str, role: str) -> User:
        try:
            new_role = UserRole(role)
        except ValueError:
            allowed = ", ".join(r.value for r in UserRole)
            raise ValidationError(f"Invalid role. Allowed roles: {allowed}")
        _check_uid(target_id)

        if not await self.store.update(self.collection, target_id, {"role": new_role.value}):
            raise NotFound("User not found")
        logger.info("User %s role set to %s", target_id, new_role.value)
        return await self.get_by_uid(target_id)

    async def delete(self, requester: VerifiedIdentity, target_id: str) -> dict:
        _check_uid(target_id)

        def guard(current: Optional[dict]) -> None:
            if current is None:
                raise NotFound("User not found")
            if target_id == requester.uid:
                raise SelfDeleteDenied()

        deleted = await self.store.guarded_delete(self.collection, target_id, guard)
        logger.info("User %s deleted by %s", target_id, requester.uid)
        return {
            "uid": target_id,
            "name": deleted.get("name"),
            "email": deleted.get("email"),
        }
