"""
Admin user management and password reset.

All endpoints require an active admin.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker.api.deps import get_db, require_admin
from label_tracker.models.enums import UserRole
from label_tracker.models.user import User
from label_tracker.schemas.auth import AdminPasswordReset
from label_tracker.schemas.user import UserCreate, UserListResponse, UserRead, UserUpdate
from label_tracker.services.users import USERS_PER_PAGE, UserService

router = APIRouter()


@router.get("/users", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = Query(None, max_length=5, description="Part of the NP"),
    role: Optional[UserRole] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(active|inactive)$"),
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    users, total, pages = await UserService(db).list_users(
        admin,
        search=search,
        role=role,
        status=status_filter,
        page=page,
    )
    return UserListResponse(
        items=[UserRead.model_validate(user) for user in users],
        total=total,
        page=page,
        per_page=USERS_PER_PAGE,
        pages=pages,
    )


@router.post("/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate = Body(...),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return await UserService(db).create_user(payload, admin)


@router.get("/users/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    return await UserService(db).get_user(user_id)


@router.put("/users/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    payload: UserUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """NP is immutable; an empty password leaves the current one in place."""
    return await UserService(db).update_user(user_id, payload, admin)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> Response:
    """Admins cannot delete their own account here (422)."""
    await UserService(db).delete_user(user_id, admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/change-password", response_model=UserRead)
async def reset_password(
    payload: AdminPasswordReset = Body(...),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Set a user's password to a custom value or to the default (prefix + NP)."""
    return await UserService(db).reset_password(payload, admin)
