"""
FastAPI dependency injection for authentication and services
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from newsdesk.exceptions import Unauthorized, Unavailable
from newsdesk.models.user import User
from newsdesk.services.article_service import ArticleService
from newsdesk.services.identity import IdentityVerifier, VerifiedIdentity
from newsdesk.services.publisher_service import PublisherService
from newsdesk.services.store import FirestoreStore
from newsdesk.services.user_service import UserService

# Bearer scheme that lets us raise our own 401 when the header is missing
security = HTTPBearer(auto_error=False)


def get_store(request: Request) -> FirestoreStore:
    """Document store created during application startup"""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise Unavailable()
    return store


def get_identity_verifier(request: Request) -> IdentityVerifier:
    verifier = getattr(request.app.state, "identity_verifier", None)
    if verifier is None:
        raise Unavailable("Identity verification not initialized")
    return verifier


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> VerifiedIdentity:
    """
    Dependency to verify the Firebase ID token sent as ``Authorization: Bearer``

    Raises:
        Unauthorized: If the header is missing or not a Bearer credential
        InvalidCredential: If Firebase rejects the token
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized()
    verifier = get_identity_verifier(request)
    return await verifier.verify(credentials.credentials)


def get_article_service(store: FirestoreStore = Depends(get_store)) -> ArticleService:
    return ArticleService(store)


def get_user_service(store: FirestoreStore = Depends(get_store)) -> UserService:
    return UserService(store)


def get_publisher_service(store: FirestoreStore = Depends(get_store)) -> PublisherService:
    return PublisherService(store)


async def require_admin(
    identity: VerifiedIdentity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
) -> User:
    """Require the requester's stored role to be admin"""
    return await users.require_admin(identity)
