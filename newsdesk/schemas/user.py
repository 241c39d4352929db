"""
User request/response schemas
"""

from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional

from newsdesk.models.user import User


class UserUpsertSchema(BaseModel):
    """Profile sent by the client after signing in with Firebase"""

    uid: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    name: Optional[str] = Field(None, max_length=100)
    photo_url: Optional[str] = Field(None, alias="photoURL")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "uid": "firebase_user_uid_123",
                "email": "jane@example.com",
                "name": "Jane Reporter",
                "photoURL": "https://example.com/photos/jane.jpg",
            }
        }
    )

    @field_validator("uid")
    @classmethod
    def validate_uid(cls, v):
        if not v.strip() or "/" in v:
            raise ValueError("uid is not a valid Firebase UID")
        return v


class RoleUpdateSchema(BaseModel):
    # validated in the service so unknown roles map to a 400 with a clear message
    role: str


class UserResponse(User):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class UserUpsertResponse(BaseModel):
    message: str
    created: bool
    user: UserResponse


class UserDeletedResponse(BaseModel):
    message: str
    deleted_user: dict = Field(..., alias="deletedUser")

    model_config = ConfigDict(populate_by_name=True)
