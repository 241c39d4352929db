"""Articles API routes"""

from fastapi import APIRouter, Depends, status, Query
from typing import List, Optional

from newsdesk.dependencies import get_article_service, get_current_identity, require_admin
from newsdesk.models.article import ArticleStatus
from newsdesk.schemas.article import (
    ArticleCreateSchema,
    ArticleCreatedResponse,
    ArticlePremiumSchema,
    ArticleResponse,
    ArticleStatusUpdateSchema,
    ArticleUpdateSchema,
    ArticleUpdatedResponse,
    MessageResponse,
)
from newsdesk.services.article_service import ArticleService
from newsdesk.services.identity import VerifiedIdentity


router = APIRouter(tags=["Articles"])


@router.get("/articles", response_model=List[ArticleResponse])
async def list_articles(
    search: Optional[str] = Query(None, description="Case-insensitive title search"),
    publisher: Optional[str] = Query(None),
    tags: Optional[str] = Query(None, description="Comma separated tags, any of which match"),
    sort: Optional[str] = Query(None, description="'desc' for newest first"),
    articles: ArticleService = Depends(get_article_service),
):
    """List approved articles"""
    return await articles.list_public(
        search=search,
        publisher=publisher,
        tags=tags,
        newest_first=(sort or "").lower() == "desc",
    )


@router.get("/articles/trending", response_model=List[ArticleResponse])
async def trending_articles(articles: ArticleService = Depends(get_article_service)):
    """Most viewed approved articles"""
    return await articles.trending()


@router.get("/articles/all", response_model=List[ArticleResponse])
async def list_all_articles(
    status_filter: Optional[ArticleStatus] = Query(None, alias="status"),
    _admin=Depends(require_admin),
    articles: ArticleService = Depends(get_article_service),
):
    """Every article regardless of moderation state (admin only)"""
    return await articles.list_all(status_filter)


@router.get("/articles/{article_id}", response_model=ArticleResponse)
async def get_article(article_id: str, articles: ArticleService = Depends(get_article_service)):
    """Get an approved article; each call counts as a view"""
    return await articles.get_public(article_id)


@router.post("/articles", response_model=ArticleCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    payload: ArticleCreateSchema,
    identity: VerifiedIdentity = Depends(get_current_identity),
    articles: ArticleService = Depends(get_article_service),
):
    """Submit an article for review. It stays pending until approved."""
    article_id = await articles.create(identity, payload)
    return ArticleCreatedResponse(message="Article submitted for review", article_id=article_id)


@router.put("/articles/{article_id}", response_model=ArticleUpdatedResponse)
async def update_article(
    article_id: str,
    payload: ArticleUpdateSchema,
    identity: VerifiedIdentity = Depends(get_current_identity),
    articles: ArticleService = Depends(get_article_service),
):
    article = await articles.update(identity, article_id, payload)
    return {"message": "Article updated successfully", "article": article}


@router.delete("/article/{article_id}", response_model=MessageResponse)
async def delete_article(
    article_id: str,
    identity: VerifiedIdentity = Depends(get_current_identity),
    articles: ArticleService = Depends(get_article_service),
):
    await articles.delete(identity, article_id)
    return {"message": "Article deleted successfully"}


@router.patch("/articles/{article_id}/status", response_model=ArticleUpdatedResponse)
async def moderate_article(
    article_id: str,
    payload: ArticleStatusUpdateSchema,
    _admin=Depends(require_admin),
    articles: ArticleService = Depends(get_article_service),
):
    """Approve, decline or return an article to pending (admin only)"""
    article = await articles.moderate(article_id, payload.status, payload.decline_reason)
    return {"message": f"Article {article.status.value}", "article": article}


@router.patch("/articles/{article_id}/premium", response_model=ArticleUpdatedResponse)
async def set_article_premium(
    article_id: str,
    payload: ArticlePremiumSchema,
    _admin=Depends(require_admin),
    articles: ArticleService = Depends(get_article_service),
):
    article = await articles.set_premium(article_id, payload.is_premium)
    return {"message": "Premium flag updated", "article": article}


@router.get("/my-articles", response_model=List[ArticleResponse])
async def my_articles(
    identity: VerifiedIdentity = Depends(get_current_identity),
    articles: ArticleService = Depends(get_article_service),
):
    """Articles submitted by the caller, newest first"""
    return await articles.list_mine(identity)


@router.get("/my-article/{article_id}", response_model=ArticleResponse)
async def my_article(
    article_id: str,
    identity: VerifiedIdentity = Depends(get_current_identity),
    articles: ArticleService = Depends(get_article_service),
):
    return await articles.get_mine(identity, article_id)


@router.get("/tags", response_model=list)
async def distinct_tags(articles: ArticleService = Depends(get_article_service)):
    """Every tag used by an approved article, once"""
    return await articles.distinct_tags()
