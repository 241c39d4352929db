"""
Firestore document store used by the article, user and publisher services.

The Firebase Admin SDK is synchronous; every call is pushed onto a worker
thread with ``asyncio.to_thread`` so route handlers stay non-blocking.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import os
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions

from newsdesk.config import settings
from newsdesk.exceptions import Internal, NewsdeskError

logger = logging.getLogger(__name__)

Document = Tuple[str, Dict[str, Any]]
Guard = Callable[[Optional[Dict[str, Any]]], None]

_DOCUMENT_ID_RE = re.compile(r"^[A-Za-z0-9]{20}$")

# Value in an update that removes the field instead of setting it
DELETE_FIELD = firestore.DELETE_FIELD


def is_document_id(value: Optional[str]) -> bool:
    """Whether ``value`` looks like a Firestore auto-generated document id"""
    return bool(value) and bool(_DOCUMENT_ID_RE.match(value))


def is_uid(value: Optional[str]) -> bool:
    """Whether ``value`` is a usable Firebase Auth UID"""
    return bool(value) and len(value) <= 128 and "/" not in value and value.strip() == value


def merge_changes(current: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """Document data as it reads after applying ``changes``"""
    merged = dict(current)
    for key, value in changes.items():
        if value is DELETE_FIELD:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged


def _database_error(e: google_exceptions.GoogleAPIError) -> Internal:
    return Internal(f"Database error: {getattr(e, 'message', None) or e}")


def _load_credentials() -> credentials.Certificate:
    if settings.FB_SERVICE_KEY:
        decoded = base64.b64decode(settings.FB_SERVICE_KEY).decode("utf-8")
        logger.info("Using Firebase credentials from FB_SERVICE_KEY")
        return credentials.Certificate(json.loads(decoded))
    if settings.FIREBASE_CREDENTIALS_JSON:
        logger.info("Using Firebase credentials from FIREBASE_CREDENTIALS_JSON")
        return credentials.Certificate(json.loads(settings.FIREBASE_CREDENTIALS_JSON))
    logger.info("Using Firebase credentials from %s", settings.FIREBASE_CREDENTIALS_PATH)
    return credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)


def initialize_firebase() -> firebase_admin.App:
    """Initialize the Firebase Admin SDK once and return the default app"""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {}
    if settings.FIREBASE_PROJECT_ID:
        options["projectId"] = settings.FIREBASE_PROJECT_ID

    try:
        if settings.DEV_MODE and settings.FIREBASE_EMULATOR_HOST:
            os.environ["FIRESTORE_EMULATOR_HOST"] = settings.FIREBASE_EMULATOR_HOST
            app = firebase_admin.initialize_app(options=options or None)
            logger.info("Firebase initialized with emulator: %s", settings.FIREBASE_EMULATOR_HOST)
        else:
            app = firebase_admin.initialize_app(_load_credentials(), options or None)
            logger.info("Firebase Admin SDK initialization successful")
    except Exception:
        logger.exception("Firebase Admin SDK initialization failed")
        raise
    return app


class FirestoreStore:
    """Filter based access to Firestore collections"""

    def __init__(self, db):
        self.db = db

    @classmethod
    def from_app(cls, app: firebase_admin.App) -> "FirestoreStore":
        return cls(firestore.client(app))

    async def _call(self, fn: Callable, *args, **kwargs):
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except NewsdeskError:
            raise
        except google_exceptions.GoogleAPIError as e:
            logger.exception("Firestore call failed")
            raise _database_error(e) from e

    def _query(self, collection: str, filters: Optional[List[tuple]] = None):
        query = self.db.collection(collection)
        for f in filters or []:
            if len(f) != 3:
                raise ValueError(f"Invalid filter format: {f}. Expected (field, op, value)")
            query = query.where(f[0], f[1], f[2])
        return query

    # ============================================
    # READS
    # ============================================

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = await self._call(self.db.collection(collection).document(doc_id).get)
        return doc.to_dict() if doc.exists else None

    async def find(
        self,
        collection: str,
        filters: Optional[List[tuple]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        select: Optional[List[str]] = None,
    ) -> List[Document]:
        """
        Query a collection.

        Args:
            collection: The name of the Firestore collection.
            filters: A list of (field, op, value) tuples,
                     e.g. [("status", "==", "approved")]
            order_by: The field to order the results by.
            descending: Sort direction for ``order_by``.
            limit: The maximum number of documents to return.
            select: Restrict returned fields.

        Returns:
            A list of (document_id, document_data) tuples.
        """
        query = self._query(collection, filters)
        if select:
            query = query.select(select)
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit:
            query = query.limit(limit)

        def _stream():
            return [(doc.id, doc.to_dict()) for doc in query.stream()]

        return await self._call(_stream)

    async def field_values(
        self, collection: str, field: str, filters: Optional[List[tuple]] = None
    ) -> List[Any]:
        """Raw values of ``field`` across matching documents"""
        docs = await self.find(collection, filters=filters, select=[field])
        return [data.get(field) for _, data in docs if field in data]

    # ============================================
    # WRITES
    # ============================================

    async def insert(self, collection: str, data: Dict[str, Any]) -> str:
        ref = self.db.collection(collection).document()
        await self._call(ref.set, data)
        return ref.id

    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> bool:
        """Create a document with a fixed id; False if it already exists"""
        ref = self.db.collection(collection).document(doc_id)
        try:
            await asyncio.to_thread(ref.create, data)
        except google_exceptions.Conflict:
            return False
        except google_exceptions.GoogleAPIError as e:
            logger.exception("Firestore create failed")
            raise _database_error(e) from e
        return True

    async def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> bool:
        """Apply ``changes``; False if the document does not exist"""
        ref = self.db.collection(collection).document(doc_id)
        try:
            await asyncio.to_thread(ref.update, changes)
        except google_exceptions.NotFound:
            return False
        except google_exceptions.GoogleAPIError as e:
            logger.exception("Firestore update failed")
            raise _database_error(e) from e
        return True

    async def increment(self, collection: str, doc_id: str, field: str, amount: int = 1) -> bool:
        return await self.update(collection, doc_id, {field: firestore.Increment(amount)})

    async def guarded_update(
        self, collection: str, doc_id: str, guard: Guard, changes: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Read, check and update a document in one transaction.

        ``guard`` receives the current document (or None) and raises to abort.
        Returns the document as it reads after the update.
        """
        ref = self.db.collection(collection).document(doc_id)

        @firestore.transactional
        def _apply(transaction):
            snapshot = ref.get(transaction=transaction)
            current = snapshot.to_dict() if snapshot.exists else None
            guard(current)
            transaction.update(ref, changes)
            return merge_changes(current, changes)

        return await self._call(_apply, self.db.transaction())

    async def guarded_delete(self, collection: str, doc_id: str, guard: Guard) -> Dict[str, Any]:
        """Delete a document if ``guard`` accepts it; returns the deleted data"""
        ref = self.db.collection(collection).document(doc_id)

        @firestore.transactional
        def _apply(transaction):
            snapshot = ref.get(transaction=transaction)
            current = snapshot.to_dict() if snapshot.exists else None
            guard(current)
            transaction.delete(ref)
            return current

        return await self._call(_apply, self.db.transaction())
