"""
Publisher registry
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from newsdesk.config import settings
from newsdesk.exceptions import Conflict, ValidationError
from newsdesk.models.publisher import Publisher, firestore_publisher_to_model
from newsdesk.schemas.publisher import PublisherCreateSchema
from newsdesk.services.store import FirestoreStore

logger = logging.getLogger(__name__)


class PublisherService:
    def __init__(self, store: FirestoreStore, collection: Optional[str] = None):
        self.store = store
        self.collection = collection or settings.PUBLISHERS_COLLECTION

    async def list_all(self) -> List[Publisher]:
        docs = await self.store.find(self.collection)
        publishers = [firestore_publisher_to_model(data, doc_id) for doc_id, data in docs]
        publishers.sort(key=lambda p: p.name.lower())
        return publishers

    async def create(self, payload: PublisherCreateSchema) -> Publisher:
        name = payload.name.strip()
        if not name:
            raise ValidationError("Publisher name is required")
        # names are compared case-insensitively; Firestore cannot, so compare here
        existing = await self.store.field_values(self.collection, "name")
        if any(isinstance(n, str) and n.strip().lower() == name.lower() for n in existing):
            raise Conflict(f"Publisher '{name}' already exists")

        data = {"name": name, "logo": payload.logo, "createdAt": datetime.now(timezone.utc)}
        publisher_id = await self.store.insert(self.collection, data)
        logger.info("Registered publisher %s (%s)", name, publisher_id)
        return firestore_publisher_to_model(data, publisher_id)
