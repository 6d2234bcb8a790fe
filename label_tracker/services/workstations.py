"""Workstation administration."""

from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from label_tracker.core.logging import get_logger
from label_tracker.core.permissions import ensure_admin
from label_tracker.models.user import User
from label_tracker.models.workstation import Workstation
from label_tracker.schemas.workstation import WorkstationCreate, WorkstationUpdate

logger = get_logger(__name__)


class WorkstationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_workstation(self, workstation_id: int) -> Workstation:
        workstation = await self.db.get(Workstation, workstation_id)
        if workstation is None:
            raise NotFoundError(f"Workstation {workstation_id} not found")
        return workstation

    async def count_users(self, workstation_id: int) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(User.workstation_id == workstation_id)
        )
        return result.scalar_one()

    async def list_with_user_counts(self, actor: User) -> List[Tuple[Workstation, int]]:
        ensure_admin(actor)
        users_count = (
            select(User.workstation_id, func.count(User.id).label("users_count"))
            .group_by(User.workstation_id)
            .subquery()
        )
        result = await self.db.execute(
            select(Workstation, func.coalesce(users_count.c.users_count, 0))
            .outerjoin(users_count, users_count.c.workstation_id == Workstation.id)
            .order_by(Workstation.name.asc())
        )
        return [(workstation, count) for workstation, count in result.all()]

    async def create_workstation(self, payload: WorkstationCreate, actor: User) -> Workstation:
        ensure_admin(actor)
        await self._ensure_name_free(payload.name)

        workstation = Workstation(name=payload.name, is_active=payload.is_active)
        self.db.add(workstation)
        await self._commit_unique(payload.name)

        logger.info("Workstation created", workstation_id=workstation.id, name=workstation.name, by=actor.np)
        return workstation

    async def update_workstation(
        self,
        workstation_id: int,
        payload: WorkstationUpdate,
        actor: User,
    ) -> Workstation:
        ensure_admin(actor)
        workstation = await self.get_workstation(workstation_id)
        if payload.name != workstation.name:
            await self._ensure_name_free(payload.name)

        workstation.name = payload.name
        if payload.is_active is not None:
            workstation.is_active = payload.is_active
        await self._commit_unique(payload.name)

        logger.info("Workstation updated", workstation_id=workstation.id, name=workstation.name, by=actor.np)
        return workstation

    async def delete_workstation(self, workstation_id: int, actor: User) -> None:
        """
        Delete a workstation that has no users assigned.

        Orders and labels that reference it are kept; their reference is
        set to NULL.
        """
        ensure_admin(actor)
        workstation = await self.get_workstation(workstation_id)
        if await self.count_users(workstation_id) > 0:
            raise BusinessRuleError(
                "Cannot delete a workstation that still has users assigned",
                code="E_WORKSTATION_HAS_USERS",
            )

        name = workstation.name
        await self.db.delete(workstation)
        await self.db.commit()
        logger.info("Workstation deleted", workstation_id=workstation_id, name=name, by=actor.np)

    async def toggle_active(self, workstation_id: int, actor: User) -> Workstation:
        ensure_admin(actor)
        workstation = await self.get_workstation(workstation_id)
        workstation.is_active = not workstation.is_active
        await self.db.commit()

        logger.info(
            "Workstation toggled",
            workstation_id=workstation.id,
            is_active=workstation.is_active,
            by=actor.np,
        )
        return workstation

    async def _ensure_name_free(self, name: str) -> None:
        existing = await self.db.execute(select(Workstation.id).where(Workstation.name == name))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(f"Workstation name '{name}' is already in use", field="name")

    async def _commit_unique(self, name: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(f"Workstation name '{name}' is already in use", field="name") from exc
