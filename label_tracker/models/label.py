"""
Label model

A label is the smallest tracked unit: one per rim side for regular orders
(left + right), one per rim for MMEA orders (no cut side). Rim number 999
holds the inschiet (remainder sheets) labels.

The inspection lifecycle is not stored as a column; it is derived from the
timestamps (see ``derive_label_state``):

    pending --start_inspection--> in_progress --finish_inspection--> completed
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from label_tracker.core.database import Base
from label_tracker.core.exceptions import InvalidStateError
from label_tracker.models.base import IntegerIdMixin, TimestampMixin, utcnow
from label_tracker.models.enums import CutSide, LabelState, derive_label_state, enum_values

if TYPE_CHECKING:
    from label_tracker.models.production_order import ProductionOrder
    from label_tracker.models.workstation import Workstation

INSCHIET_RIM_NUMBER = 999


class Label(IntegerIdMixin, TimestampMixin, Base):
    __tablename__ = "labels"

    production_order_id: Mapped[int] = mapped_column(
        ForeignKey("production_orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rim_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rim number 1..N, or 999 for inschiet"
    )
    cut_side: Mapped[Optional[CutSide]] = mapped_column(
        SAEnum(CutSide, name="cut_side_enum", values_callable=enum_values, native_enum=False, length=10),
        nullable=True,
        comment="left/right for regular orders, NULL for MMEA"
    )
    is_inschiet: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    inspector_np: Mapped[Optional[str]] = mapped_column(String(5), nullable=True, index=True)
    inspector_2_np: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    pack_sheets: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Sheets per package (MMEA only)"
    )

    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    finished_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    workstation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("workstations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    order: Mapped["ProductionOrder"] = relationship(back_populates="labels")
    workstation: Mapped[Optional["Workstation"]] = relationship(back_populates="labels")

    __table_args__ = (
        UniqueConstraint(
            "production_order_id", "rim_number", "cut_side",
            name="uq_labels_order_rim_side",
        ),
    )

    @property
    def state(self) -> LabelState:
        return derive_label_state(self.started_at, self.finished_at)

    @property
    def is_pending(self) -> bool:
        return self.state is LabelState.PENDING

    @property
    def is_in_progress(self) -> bool:
        return self.state is LabelState.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        return self.state is LabelState.COMPLETED

    def start_inspection(
        self,
        inspector_np: str,
        workstation_id: Optional[int] = None,
        at: Optional[datetime] = None,
    ) -> None:
        """Assign the primary inspector and stamp the start time. Pending labels only."""
        if not self.is_pending:
            raise InvalidStateError(
                f"Label {self.id} is already {self.state.value}; inspection can only start on a pending label",
                code="E_LABEL_ALREADY_STARTED",
            )
        self.inspector_np = inspector_np
        self.started_at = at or utcnow()
        if workstation_id is not None:
            self.workstation_id = workstation_id

    def finish_inspection(
        self,
        second_inspector_np: Optional[str] = None,
        pack_sheets: Optional[int] = None,
        at: Optional[datetime] = None,
    ) -> None:
        """Stamp the finish time. Only a label whose inspection was started can be finished."""
        if not self.is_in_progress:
            raise InvalidStateError(
                f"Label {self.id} is {self.state.value}; only a label in progress can be finished",
                code="E_LABEL_NOT_IN_PROGRESS",
            )
        self.finished_at = at or utcnow()
        if second_inspector_np is not None:
            self.inspector_2_np = second_inspector_np
        if pack_sheets is not None:
            self.pack_sheets = pack_sheets

    def __repr__(self) -> str:
        side = self.cut_side.value if self.cut_side else None
        return (
            f"<Label(id={self.id}, order_id={self.production_order_id}, "
            f"rim={self.rim_number}, side={side}, state={self.state.value})>"
        )
