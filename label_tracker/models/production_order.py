"""
Production order model

An order is registered from a PO number that exists in SIRINE. Its sheets
are split into rims of 1000 sheets; leftover sheets (inschiet) are tracked
separately and only for regular orders.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import BigInteger, Enum as SAEnum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from label_tracker.core.database import Base
from label_tracker.models.base import IntegerIdMixin, TimestampMixin
from label_tracker.models.enums import OrderStatus, OrderType, enum_values

if TYPE_CHECKING:
    from label_tracker.models.label import Label
    from label_tracker.models.workstation import Workstation

SHEETS_PER_RIM = 1000


class ProductionOrder(IntegerIdMixin, TimestampMixin, Base):
    __tablename__ = "production_orders"

    po_number: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        unique=True,
        index=True,
        comment="PO number assigned by SIRINE"
    )
    obc_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    order_type: Mapped[OrderType] = mapped_column(
        SAEnum(OrderType, name="order_type_enum", values_callable=enum_values, native_enum=False, length=20),
        default=OrderType.REGULAR,
        nullable=False,
        index=True,
    )
    product_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    total_sheets: Mapped[int] = mapped_column(Integer, nullable=False)
    total_rims: Mapped[int] = mapped_column(Integer, nullable=False)
    start_rim: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    end_rim: Mapped[int] = mapped_column(Integer, nullable=False)
    inschiet_sheets: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Remainder sheets; always 0 for MMEA orders"
    )

    team_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("workstations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[OrderStatus] = mapped_column(
        SAEnum(OrderStatus, name="order_status_enum", values_callable=enum_values, native_enum=False, length=20),
        default=OrderStatus.REGISTERED,
        nullable=False,
        index=True,
    )

    team: Mapped[Optional["Workstation"]] = relationship(back_populates="production_orders")
    labels: Mapped[List["Label"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def has_inschiet(self) -> bool:
        return (self.inschiet_sheets or 0) > 0

    @property
    def is_regular(self) -> bool:
        return self.order_type == OrderType.REGULAR

    @property
    def is_mmea(self) -> bool:
        return self.order_type == OrderType.MMEA

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.COMPLETED

    def __repr__(self) -> str:
        return (
            f"<ProductionOrder(id={self.id}, po_number={self.po_number}, "
            f"type={self.order_type}, status={self.status})>"
        )
