"""
Workstation model

A workstation (production team) groups operators, production orders and
the labels processed there. Deleting a workstation detaches those rows
(their foreign keys become NULL); it never deletes them.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from label_tracker.core.database import Base
from label_tracker.models.base import IntegerIdMixin, TimestampMixin

if TYPE_CHECKING:
    from label_tracker.models.label import Label
    from label_tracker.models.production_order import ProductionOrder
    from label_tracker.models.user import User


class Workstation(IntegerIdMixin, TimestampMixin, Base):
    __tablename__ = "workstations"

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        comment='Workstation name, e.g. "Team 1", "WS-05"'
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # No delete cascade: on delete the ORM sets the children's FK to NULL,
    # matching ON DELETE SET NULL at the database level.
    users: Mapped[List["User"]] = relationship(back_populates="workstation")
    production_orders: Mapped[List["ProductionOrder"]] = relationship(back_populates="team")
    labels: Mapped[List["Label"]] = relationship(back_populates="workstation")

    def __repr__(self) -> str:
        return f"<Workstation(id={self.id}, name='{self.name}', is_active={self.is_active})>"
