"""
Firebase ID token verification
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from firebase_admin import auth as firebase_auth

from newsdesk.exceptions import InvalidCredential

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedIdentity:
    """Subject of a verified Firebase ID token"""

    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or (self.email.split("@")[0] if self.email else self.uid)

    @classmethod
    def from_claims(cls, claims: dict) -> "VerifiedIdentity":
        return cls(
            uid=claims.get("uid") or claims.get("sub"),
            email=claims.get("email"),
            name=claims.get("name"),
            picture=claims.get("picture"),
        )


class IdentityVerifier:
    """Exchanges a bearer token for a verified identity"""

    def __init__(self, app: Optional[firebase_admin.App] = None, check_revoked: bool = False):
        self.app = app
        self.check_revoked = check_revoked

    async def verify(self, id_token: str) -> VerifiedIdentity:
        try:
            claims = await asyncio.to_thread(
                firebase_auth.verify_id_token, id_token, self.app, self.check_revoked
            )
        except (ValueError, firebase_auth.InvalidIdTokenError,
                firebase_auth.ExpiredIdTokenError, firebase_auth.RevokedIdTokenError,
                firebase_auth.CertificateFetchError, firebase_auth.UserDisabledError) as e:
            logger.warning("Firebase ID token verification failed: %s", e)
            raise InvalidCredential() from e

        identity = VerifiedIdentity.from_claims(claims)
        if not identity.uid:
            raise InvalidCredential("Invalid token (missing UID)")
        return identity
