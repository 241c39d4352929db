"""
User Models for Newsdesk Backend

Users are keyed by their Firebase Authentication UID, which is also the
Firestore document ID.
"""

from datetime import datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict


class UserRole(str, Enum):
    """User role enumeration"""

    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """
    Complete User model representing a user in Firestore

    Collection: users/
    Document ID: uid (Firebase Auth UID)
    """

    uid: str = Field(..., description="Firebase Authentication UID")
    name: Optional[str] = None
    email: str
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    role: UserRole = Field(default=UserRole.USER)
    premium_taken: Optional[datetime] = Field(
        default=None, description="Subscription marker", alias="premiumTaken")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    last_login_at: Optional[datetime] = Field(default=None, alias="lastLoginAt")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "uid": "firebase_user_uid_123",
                "name": "Jane Reporter",
                "email": "jane@example.com",
                "photoURL": "https://example.com/photos/jane.jpg",
                "role": "user",
                "premiumTaken": None,
                "createdAt": "2024-01-01T00:00:00Z",
            }
        }
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


# Helper function to convert Firestore document to User model
def firestore_user_to_model(doc_data: dict, uid: str) -> User:
    return User.model_validate({**doc_data, "uid": uid})

