"""
First-start seed data.

On an empty database this creates three workstations and one admin whose
password follows the default convention (prefix + NP). Nothing happens
once any user exists.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker.core.config import get_settings
from label_tracker.core.logging import get_logger
from label_tracker.core.password import default_password_for, hash_password
from label_tracker.models.enums import UserRole
from label_tracker.models.user import User
from label_tracker.models.workstation import Workstation

logger = get_logger(__name__)

DEFAULT_WORKSTATIONS = ("Team 1", "Team 2", "Team 3")


async def seed_initial_data(db: AsyncSession) -> bool:
    """Returns True when seed data was written."""
    user_count = (await db.execute(select(func.count(User.id)))).scalar_one()
    if user_count:
        return False

    settings = get_settings()
    existing = set((await db.execute(select(Workstation.name))).scalars().all())
    workstations = [Workstation(name=name, is_active=True) for name in DEFAULT_WORKSTATIONS if name not in existing]
    db.add_all(workstations)
    await db.flush()

    first = workstations[0] if workstations else None
    admin_np = settings.seed_admin_np.strip().upper()
    db.add(
        User(
            np=admin_np,
            name="Administrator",
            password_hash=hash_password(default_password_for(admin_np, settings.default_password_prefix)),
            role=UserRole.ADMIN,
            workstation_id=first.id if first else None,
            is_active=True,
        )
    )
    await db.commit()

    logger.info("Seeded initial data", admin_np=admin_np, workstations=[w.name for w in workstations])
    return True
