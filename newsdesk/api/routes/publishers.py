"""Publisher API routes"""

from fastapi import APIRouter, Depends, status
from typing import List

from newsdesk.dependencies import get_article_service, get_publisher_service, require_admin
from newsdesk.schemas.publisher import PublisherCreateSchema, PublisherResponse
from newsdesk.services.article_service import ArticleService
from newsdesk.services.publisher_service import PublisherService

router = APIRouter(tags=["Publishers"])


@router.get("/publishers", response_model=list)
async def distinct_publishers(articles: ArticleService = Depends(get_article_service)):
    """Publishers that have at least one approved article"""
    return await articles.distinct_publishers()


@router.get("/publishers/all", response_model=List[PublisherResponse])
async def list_publishers(publishers: PublisherService = Depends(get_publisher_service)):
    return await publishers.list_all()


@router.post("/publishers", response_model=PublisherResponse, status_code=status.HTTP_201_CREATED)
async def create_publisher(
    payload: PublisherCreateSchema,
    _admin=Depends(require_admin),
    publishers: PublisherService = Depends(get_publisher_service),
):
    """Register a publisher (admin only)"""
    return await publishers.create(payload)

