from typing import List

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker.api.deps import get_db, require_admin
from label_tracker.models.user import User
from label_tracker.models.workstation import Workstation
from label_tracker.schemas.workstation import WorkstationCreate, WorkstationRead, WorkstationUpdate
from label_tracker.services.workstations import WorkstationService

router = APIRouter()


def _read(workstation: Workstation, users_count: int = 0) -> WorkstationRead:
    return WorkstationRead.model_validate(workstation).model_copy(update={"users_count": users_count})


@router.get("", response_model=List[WorkstationRead])
async def list_workstations(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    rows = await WorkstationService(db).list_with_user_counts(admin)
    return [_read(workstation, count) for workstation, count in rows]


@router.post("", response_model=WorkstationRead, status_code=status.HTTP_201_CREATED)
async def create_workstation(
    payload: WorkstationCreate = Body(...),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return _read(await WorkstationService(db).create_workstation(payload, admin))


@router.get("/{workstation_id}", response_model=WorkstationRead)
async def get_workstation(
    workstation_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    service = WorkstationService(db)
    workstation = await service.get_workstation(workstation_id)
    return _read(workstation, await service.count_users(workstation_id))


@router.put("/{workstation_id}", response_model=WorkstationRead)
async def update_workstation(
    workstation_id: int,
    payload: WorkstationUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    service = WorkstationService(db)
    workstation = await service.update_workstation(workstation_id, payload, admin)
    return _read(workstation, await service.count_users(workstation_id))


@router.delete("/{workstation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workstation(
    workstation_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> Response:
    """Rejected with 422 while users are assigned; orders and labels are detached."""
    await WorkstationService(db).delete_workstation(workstation_id, admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{workstation_id}/toggle-active", response_model=WorkstationRead)
async def toggle_active(
    workstation_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    service = WorkstationService(db)
    workstation = await service.toggle_active(workstation_id, admin)
    return _read(workstation, await service.count_users(workstation_id))
