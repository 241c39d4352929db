"""
User management API endpoints
"""

from fastapi import APIRouter, Depends, Query, Response, status
from typing import List, Optional, Union

from newsdesk.dependencies import get_current_identity, get_user_service, require_admin
from newsdesk.schemas.user import (
    RoleUpdateSchema,
    UserDeletedResponse,
    UserResponse,
    UserUpsertResponse,
    UserUpsertSchema,
)
from newsdesk.services.identity import VerifiedIdentity
from newsdesk.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserUpsertResponse)
async def upsert_user(
    payload: UserUpsertSchema,
    response: Response,
    users: UserService = Depends(get_user_service),
):
    """
    Save the signed-in user's profile

    Creates the user with role ``user`` on first login; afterwards only
    name, email and photoURL are refreshed.
    """
    user, created = await users.upsert(payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return {
        "message": "User created" if created else "User updated",
        "created": created,
        "user": user,
    }


@router.get("", response_model=Union[UserResponse, List[UserResponse]])
async def get_users(
    email: Optional[str] = Query(None),
    identity: VerifiedIdentity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
):
    """
    Look up a user by email, or list every user (admin only)

    - **email**: when given, returns that single user
    """
    if email:
        return await users.get_by_email(email)

    await users.require_admin(identity)
    return await users.list_all()


@router.get("/{uid}", response_model=UserResponse)
async def get_user(
    uid: str,
    identity: VerifiedIdentity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
):
    return await users.get_by_uid(uid)


@router.put("/{user_id}/role")
async def update_user_role(
    user_id: str,
    payload: RoleUpdateSchema,
    _admin=Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """Change a user's role (admin only)"""
    user = await users.update_role(user_id, payload.role)
    return {"message": "Role updated successfully", "uid": user.uid, "role": user.role.value}


@router.delete("/{user_id}", response_model=UserDeletedResponse)
async def delete_user(
    user_id: str,
    identity: VerifiedIdentity = Depends(get_current_identity),
    _admin=Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """Delete a user record (admin only). Admins cannot delete themselves."""
    deleted = await users.delete(identity, user_id)
    return {"message": "User deleted successfully", "deletedUser": deleted}
