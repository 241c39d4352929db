"""
Article request/response schemas
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional

from newsdesk.models.article import Article, ArticleStatus
from newsdesk.services.filters import split_tags


def _required_text(v):
    if not isinstance(v, str) or not v.strip():
        raise ValueError("must be a non-empty string")
    return v.strip()


def _required_tags(v):
    if isinstance(v, (list, tuple)) and not all(isinstance(t, str) for t in v):
        raise ValueError("tags must be strings")
    tags = split_tags(v) if isinstance(v, (str, list, tuple)) else []
    if not tags:
        raise ValueError("at least one tag is required")
    return tags


class ArticleCreateSchema(BaseModel):
    title: str = Field(..., max_length=300)
    image: str
    publisher: str
    tags: list[str] = Field(..., description="List of tags or a comma separated string")
    description: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "City council approves new budget",
                "image": "https://example.com/images/council.jpg",
                "publisher": "Daily Ledger",
                "tags": ["politics", "local"],
                "description": "The council voted 7-2 in favour...",
            }
        }
    )

    @field_validator("title", "image", "publisher", "description", mode="before")
    @classmethod
    def validate_text(cls, v):
        return _required_text(v)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v):
        return _required_tags(v)


class ArticleUpdateSchema(BaseModel):
    title: str = Field(..., max_length=300)
    description: str
    tags: list[str]

    @field_validator("title", "description", mode="before")
    @classmethod
    def validate_text(cls, v):
        return _required_text(v)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v):
        return _required_tags(v)


class ArticleStatusUpdateSchema(BaseModel):
    status: ArticleStatus
    decline_reason: Optional[str] = Field(None, alias="declineReason", max_length=1000)

    model_config = ConfigDict(populate_by_name=True)


class ArticlePremiumSchema(BaseModel):
    is_premium: bool = Field(..., alias="isPremium")

    model_config = ConfigDict(populate_by_name=True)


class ArticleResponse(Article):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class ArticleCreatedResponse(BaseModel):
    message: str
    article_id: str = Field(..., alias="articleId")

    model_config = ConfigDict(populate_by_name=True)


class ArticleUpdatedResponse(BaseModel):
    message: str
    article: ArticleResponse


class MessageResponse(BaseModel):
    message: str
