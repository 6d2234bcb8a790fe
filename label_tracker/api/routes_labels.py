from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker.api.deps import get_current_user, get_db
from label_tracker.models.user import User
from label_tracker.schemas.label import LabelFinishRequest, LabelRead
from label_tracker.services.labels import LabelService

router = APIRouter()


@router.get("/inspected-by/{np}", response_model=List[LabelRead])
async def labels_inspected_by(
    np: str,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """Labels where this NP was primary or second inspector, newest first."""
    return await LabelService(db).labels_inspected_by(np)


@router.get("/{label_id}", response_model=LabelRead)
async def get_label(
    label_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await LabelService(db).get_label(label_id)


@router.post("/{label_id}/start", response_model=LabelRead)
async def start_inspection(
    label_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Start inspecting a pending label as the current user."""
    return await LabelService(db).start_inspection(label_id, user)


@router.post("/{label_id}/finish", response_model=LabelRead)
async def finish_inspection(
    label_id: int,
    payload: Optional[LabelFinishRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    payload = payload or LabelFinishRequest()
    return await LabelService(db).finish_inspection(
        label_id,
        user,
        second_inspector_np=payload.second_inspector_np,
        pack_sheets=payload.pack_sheets,
    )
