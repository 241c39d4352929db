"""
Article model and Firestore conversion helpers
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class ArticleStatus(str, Enum):
    """Moderation state of an article"""

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class Article(BaseModel):
    """
    Article as stored in Firestore

    Collection: articles/
    Document ID: Firestore auto id
    """

    article_id: str = Field(..., alias="_id")
    title: str
    image: str
    publisher: str
    tags: list[str] = Field(default_factory=list)
    description: str
    status: ArticleStatus = ArticleStatus.PENDING
    author: Optional[str] = None
    author_id: str = Field(..., alias="authorId")
    author_email: Optional[str] = Field(None, alias="authorEmail")
    author_photo: Optional[str] = Field(None, alias="authorPhoto")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    views: int = Field(0, ge=0)
    is_premium: bool = Field(False, alias="isPremium")
    decline_reason: Optional[str] = Field(None, alias="declineReason")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_as_list(cls, v):
        # older documents stored a single tag as a plain string
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return list(v)


def firestore_article_to_model(doc: dict, doc_id: str) -> Article:
    return Article.model_validate({**doc, "_id": doc_id})

