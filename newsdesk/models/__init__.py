"""
Data models for Newsdesk
"""

from newsdesk.models.article import Article, ArticleStatus
from newsdesk.models.publisher import Publisher
from newsdesk.models.user import User, UserRole

__all__ = ["Article", "ArticleStatus", "Publisher", "User", "UserRole"]
