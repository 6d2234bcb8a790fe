"""
User administration and self-service account operations.
"""

import math
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker.core.config import get_settings
from label_tracker.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from label_tracker.core.logging import get_logger
from label_tracker.core.password import default_password_for, hash_password, verify_password
from label_tracker.core.permissions import ensure_active, ensure_admin
from label_tracker.models.enums import UserRole
from label_tracker.models.user import User
from label_tracker.models.workstation import Workstation
from label_tracker.schemas.auth import AdminPasswordReset, PasswordChange
from label_tracker.schemas.user import UserCreate, UserUpdate

logger = get_logger(__name__)

USERS_PER_PAGE = 15


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def get_by_np(self, np: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.np == (np or "").strip().upper()))
        return result.scalar_one_or_none()

    async def list_users(
        self,
        actor: User,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
        status: Optional[str] = None,
        page: int = 1,
        per_page: int = USERS_PER_PAGE,
    ) -> Tuple[list, int, int]:
        """
        Users ordered by NP, filtered and paginated.

        ``search`` matches part of the NP; ``status`` is "active" or
        "inactive". Returns (users, total, pages).
        """
        ensure_admin(actor)
        stmt = select(User)
        if search and search.strip():
            stmt = stmt.where(User.np.contains(search.strip().upper(), autoescape=True))
        if role is not None:
            stmt = stmt.where(User.role == role)
        if status:
            stmt = stmt.where(User.is_active.is_(status == "active"))

        total = (await self.db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
        pages = max(1, math.ceil(total / per_page))

        result = await self.db.execute(
            stmt.order_by(User.np.asc()).offset((page - 1) * per_page).limit(per_page)
        )
        return list(result.scalars().all()), total, pages

    async def create_user(self, payload: UserCreate, actor: User) -> User:
        ensure_admin(actor)
        if await self.get_by_np(payload.np) is not None:
            raise ConflictError(f"NP {payload.np} is already registered", field="np")
        if payload.workstation_id is not None:
            await self._ensure_workstation_exists(payload.workstation_id)

        if payload.use_default:
            password = default_password_for(payload.np, get_settings().default_password_prefix)
        else:
            password = payload.password

        user = User(
            np=payload.np,
            name=payload.name,
            password_hash=hash_password(password),
            role=payload.role,
            workstation_id=payload.workstation_id,
            is_active=payload.is_active,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(f"NP {payload.np} is already registered", field="np") from exc

        logger.info("User created", user_id=user.id, np=user.np, role=user.role.value, by=actor.np)
        return user

    async def update_user(self, user_id: int, payload: UserUpdate, actor: User) -> User:
        ensure_admin(actor)
        user = await self.get_user(user_id)
        changes = payload.model_dump(exclude_unset=True)

        password = changes.pop("password", None)
        if password:
            user.password_hash = hash_password(password)
        if changes.get("workstation_id") is not None:
            await self._ensure_workstation_exists(changes["workstation_id"])
        for field in ("role", "is_active"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        for field, value in changes.items():
            setattr(user, field, value)
        await self.db.commit()

        logger.info(
            "User updated",
            user_id=user.id,
            np=user.np,
            fields=sorted(changes) + (["password"] if password else []),
            by=actor.np,
        )
        return user

    async def delete_user(self, user_id: int, actor: User) -> None:
        ensure_admin(actor)
        if actor.id == user_id:
            raise BusinessRuleError("You cannot delete your own account here", code="E_SELF_DELETE")
        user = await self.get_user(user_id)
        np = user.np

        await self.db.delete(user)
        await self.db.commit()
        logger.info("User deleted", user_id=user_id, np=np, by=actor.np)

    async def reset_password(self, payload: AdminPasswordReset, actor: User) -> User:
        """Admin password reset: custom password or prefix + NP."""
        ensure_admin(actor)
        user = await self.get_user(payload.user_id)

        if payload.use_default:
            password = default_password_for(user.np, get_settings().default_password_prefix)
        else:
            password = payload.new_password
        user.password_hash = hash_password(password)
        await self.db.commit()

        logger.info("Password reset", user_id=user.id, np=user.np, default=payload.use_default, by=actor.np)
        return user

    async def update_profile(self, actor: User, name: Optional[str]) -> User:
        ensure_active(actor)
        actor.name = name
        await self.db.commit()
        return actor

    async def change_own_password(self, actor: User, payload: PasswordChange) -> None:
        ensure_active(actor)
        if not verify_password(payload.current_password, actor.password_hash):
            raise BusinessRuleError("Current password is incorrect", field="current_password")
        actor.password_hash = hash_password(payload.new_password)
        await self.db.commit()
        logger.info("Own password changed", np=actor.np)

    async def delete_own_account(self, actor: User, password: str) -> None:
        ensure_active(actor)
        if not verify_password(password, actor.password_hash):
            raise BusinessRuleError("Password is incorrect", field="password")
        np = actor.np
        await self.db.delete(actor)
        await self.db.commit()
        logger.info("Own account deleted", np=np)

    async def _ensure_workstation_exists(self, workstation_id: int) -> None:
        if await self.db.get(Workstation, workstation_id) is None:
            raise BusinessRuleError(f"Workstation {workstation_id} does not exist", field="workstation_id")
