"""
Article lifecycle: submission, moderation-gated visibility, owner edits.

Articles start ``pending``. Only ``approved`` articles are visible through
public reads. Authors may edit or delete their own articles until they are
approved; after that the article is frozen for them.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from newsdesk.config import settings
from newsdesk.exceptions import (
    Conflict,
    InvalidIdentifier,
    NewsdeskError,
    NotFound,
    ValidationError,
)
from newsdesk.models.article import Article, ArticleStatus, firestore_article_to_model
from newsdesk.schemas.article import ArticleCreateSchema, ArticleUpdateSchema
from newsdesk.services.filters import build_article_query, flatten_unique
from newsdesk.services.identity import VerifiedIdentity
from newsdesk.services.store import DELETE_FIELD, FirestoreStore, is_document_id

logger = logging.getLogger(__name__)

APPROVED_FILTER = ("status", "==", ArticleStatus.APPROVED.value)


def _check_id(article_id: str) -> None:
    if not is_document_id(article_id):
        raise InvalidIdentifier("Invalid article ID")


def _editable_by(uid: str):
    """Guard for owner mutations of a not-yet-approved article"""

    def guard(current: Optional[dict]) -> None:
        if current is None or current.get("authorId") != uid:
            raise NotFound("Article not found or you are not the owner")
        if current.get("status") == ArticleStatus.APPROVED.value:
            raise Conflict("Approved articles cannot be modified or deleted")

    return guard


def _exists(current: Optional[dict]) -> None:
    if current is None:
        raise NotFound("Article not found")


class ArticleService:
    """Article operations backed by the articles collection"""

    def __init__(
        self,
        store: FirestoreStore,
        collection: Optional[str] = None,
        trending_limit: Optional[int] = None,
    ):
        self.store = store
        self.collection = collection or settings.ARTICLES_COLLECTION
        self.trending_limit = trending_limit or settings.TRENDING_LIMIT

    def _to_models(self, docs) -> List[Article]:
        return [firestore_article_to_model(data, doc_id) for doc_id, data in docs]

    # ============================================
    # PUBLIC READS
    # ============================================

    async def list_public(
        self,
        search: Optional[str] = None,
        publisher: Optional[str] = None,
        tags: Optional[str] = None,
        newest_first: bool = False,
    ) -> List[Article]:
        query = build_article_query(search=search, publisher=publisher, tags=tags)
        docs = await self.store.find(self.collection, filters=query.filters)
        articles = self._to_models(query.apply(docs))
        if newest_first:
            articles.sort(
                key=lambda a: a.created_at or datetime.min.replace(tzinfo=timezone.utc),
                reverse=True,
            )
        return articles

    async def trending(self) -> List[Article]:
        docs = await self.store.find(
            self.collection,
            filters=[APPROVED_FILTER],
            order_by="views",
            descending=True,
            limit=self.trending_limit,
        )
        return self._to_models(docs)

    async def distinct_publishers(self) -> list:
        values = await self.store.field_values(self.collection, "publisher", [APPROVED_FILTER])
        return flatten_unique(values)

    async def distinct_tags(self) -> list:
        values = await self.store.field_values(self.collection, "tags", [APPROVED_FILTER])
        return flatten_unique(values)

    async def get_public(self, article_id: str) -> Article:
        """Fetch an approved article and count the view"""
        _check_id(article_id)
        data = await self.store.get(self.collection, article_id)
        if not data or data.get("status") != ArticleStatus.APPROVED.value:
            raise NotFound("Article not found")

        try:
            if await self.store.increment(self.collection, article_id, "views"):
                data["views"] = (data.get("views") or 0) + 1
        except NewsdeskError as e:
            logger.warning("Could not increment views for %s: %s", article_id, e.message)

        return firestore_article_to_model(data, article_id)

    # ============================================
    # AUTHOR OPERATIONS
    # ============================================

    async def create(self, identity: VerifiedIdentity, payload: ArticleCreateSchema) -> str:
        now = datetime.now(timezone.utc)
        article_data = {
            "title": payload.title,
            "image": payload.image,
            "publisher": payload.publisher,
            "tags": payload.tags,
            "description": payload.description,
            "status": ArticleStatus.PENDING.value,
            "author": identity.display_name,
            "authorId": identity.uid,
            "authorEmail": identity.email,
            "authorPhoto": identity.picture,
            "createdAt": now,
            "views": 0,
            "isPremium": False,
        }
        article_id = await self.store.insert(self.collection, article_data)
        logger.info("Article %s submitted by %s", article_id, identity.uid)
        return article_id

    async def list_mine(self, identity: VerifiedIdentity) -> List[Article]:
        docs = await self.store.find(
            self.collection,
            filters=[("authorId", "==", identity.uid)],
            order_by="createdAt",
            descending=True,
        )
        return self._to_models(docs)

    async def get_mine(self, identity: VerifiedIdentity, article_id: str) -> Article:
        _check_id(article_id)
        data = await self.store.get(self.collection, article_id)
        if not data or data.get("authorId") != identity.uid:
            raise NotFound("Article not found")
        return firestore_article_to_model(data, article_id)

    async def update(
        self, identity: VerifiedIdentity, article_id: str, payload: ArticleUpdateSchema
    ) -> Article:
        _check_id(article_id)
        changes = {
            "title": payload.title,
            "description": payload.description,
            "tags": payload.tags,
            "updatedAt": datetime.now(timezone.utc),
        }
        updated = await self.store.guarded_update(
            self.collection, article_id, _editable_by(identity.uid), changes
        )
        return firestore_article_to_model(updated, article_id)

    async def delete(self, identity: VerifiedIdentity, article_id: str) -> None:
        _check_id(article_id)
        await self.store.guarded_delete(self.collection, article_id, _editable_by(identity.uid))
        logger.info("Article %s deleted by %s", article_id, identity.uid)

    # ============================================
    # MODERATION (admin)
    # ============================================

    async def list_all(self, status: Optional[ArticleStatus] = None) -> List[Article]:
        filters = [("status", "==", status.value)] if status else None
        docs = await self.store.find(
            self.collection, filters=filters, order_by="createdAt", descending=True
        )
        return self._to_models(docs)

    async def moderate(
        self, article_id: str, status: ArticleStatus, decline_reason: Optional[str] = None
    ) -> Article:
        """Move an article to ``status``; a reason is kept only for declines"""
        _check_id(article_id)
        reason = decline_reason.strip() if decline_reason else None
        if reason and status != ArticleStatus.DECLINED:
            raise ValidationError("declineReason is only allowed when declining an article")

        changes = {
            "status": status.value,
            "declineReason": reason or DELETE_FIELD,
        }
        updated = await self.store.guarded_update(self.collection, article_id, _exists, changes)
        logger.info("Article %s moved to %s", article_id, status.value)
        return firestore_article_to_model(updated, article_id)

    async def set_premium(self, article_id: str, is_premium: bool) -> Article:
        _check_id(article_id)
        updated = await self.store.guarded_update(
            self.collection, article_id, _exists, {"isPremium": is_premium}
        )
        return firestore_article_to_model(updated, article_id)
