"""
Label inspection service

Operators move labels through pending -> in_progress -> completed. Each
transition is a single-row update without locking: two inspectors acting
on the same label race and the last write wins.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from label_tracker.core.exceptions import BusinessRuleError, ConflictError, InvalidStateError, NotFoundError
from label_tracker.core.logging import get_logger
from label_tracker.core.permissions import ensure_active, ensure_admin
from label_tracker.models.enums import CutSide
from label_tracker.models.label import INSCHIET_RIM_NUMBER, Label
from label_tracker.models.production_order import ProductionOrder
from label_tracker.models.user import User
from label_tracker.services import queries

logger = get_logger(__name__)


class LabelService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_label(self, label_id: int) -> Label:
        result = await self.db.execute(
            select(Label).options(selectinload(Label.order)).where(Label.id == label_id)
        )
        label = result.scalar_one_or_none()
        if label is None:
            raise NotFoundError(f"Label {label_id} not found")
        return label

    async def start_inspection(self, label_id: int, actor: User) -> Label:
        """
        Assign the acting user as primary inspector.

        The label must be pending and its order must still accept processing.
        The label is attributed to the actor's workstation.
        """
        ensure_active(actor)
        label = await self.get_label(label_id)
        self._ensure_order_processable(label)

        label.start_inspection(actor.np, workstation_id=actor.workstation_id)
        await self.db.commit()

        logger.info(
            "Label inspection started",
            label_id=label.id,
            order_id=label.production_order_id,
            rim_number=label.rim_number,
            np=actor.np,
        )
        return label

    async def finish_inspection(
        self,
        label_id: int,
        actor: User,
        second_inspector_np: Optional[str] = None,
        pack_sheets: Optional[int] = None,
    ) -> Label:
        """
        Complete an inspection that was started.

        Finishing a pending label is rejected. ``pack_sheets`` is only
        recorded for MMEA labels.
        """
        ensure_active(actor)
        label = await self.get_label(label_id)
        self._ensure_order_processable(label)

        if second_inspector_np is not None:
            second_inspector_np = second_inspector_np.strip().upper() or None
        if second_inspector_np is not None and second_inspector_np == label.inspector_np:
            raise BusinessRuleError(
                "Second inspector must be different from the primary inspector",
                field="second_inspector_np",
            )
        if pack_sheets is not None and not label.order.is_mmea:
            raise BusinessRuleError(
                "pack_sheets is only recorded for MMEA orders",
                field="pack_sheets",
            )

        label.finish_inspection(second_inspector_np=second_inspector_np, pack_sheets=pack_sheets)
        await self.db.commit()

        logger.info(
            "Label inspection finished",
            label_id=label.id,
            order_id=label.production_order_id,
            rim_number=label.rim_number,
            np=actor.np,
            second_inspector_np=second_inspector_np,
        )
        return label

    async def add_label(
        self,
        order_id: int,
        rim_number: int,
        actor: User,
        cut_side: Optional[CutSide] = None,
    ) -> Label:
        """
        Add a single label to an order (e.g. a rim that was reprinted).

        Regular orders need a cut side, MMEA orders must not have one. The
        (order, rim, cut side) triple stays unique; for MMEA the NULL cut
        side is checked here because the unique index treats NULLs as
        distinct.
        """
        ensure_admin(actor)
        order = await self.db.get(ProductionOrder, order_id)
        if order is None:
            raise NotFoundError(f"Production order {order_id} not found")

        if order.order_type.requires_cut_side and cut_side is None:
            raise BusinessRuleError("Regular orders need a cut side", field="cut_side")
        if not order.order_type.requires_cut_side and cut_side is not None:
            raise BusinessRuleError("MMEA labels have no cut side", field="cut_side")

        if rim_number > INSCHIET_RIM_NUMBER:
            raise BusinessRuleError(
                f"Rim numbers stop at the inschiet rim {INSCHIET_RIM_NUMBER}",
                code="E_RIM_RANGE_TOO_LARGE",
                field="rim_number",
            )
        is_inschiet = rim_number == INSCHIET_RIM_NUMBER
        if is_inschiet and order.is_mmea:
            raise BusinessRuleError("MMEA orders carry no inschiet", field="rim_number")

        side_filter = Label.cut_side.is_(None) if cut_side is None else Label.cut_side == cut_side
        duplicate = await self.db.execute(
            select(Label.id).where(
                Label.production_order_id == order_id,
                Label.rim_number == rim_number,
                side_filter,
            )
        )
        if duplicate.scalar_one_or_none() is not None:
            raise ConflictError(
                f"Label for rim {rim_number} already exists on this order",
                field="rim_number",
            )

        label = Label(
            production_order_id=order_id,
            rim_number=rim_number,
            cut_side=cut_side,
            is_inschiet=is_inschiet,
        )
        self.db.add(label)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(
                f"Label for rim {rim_number} already exists on this order",
                field="rim_number",
            ) from exc

        logger.info("Label added", label_id=label.id, order_id=order_id, rim_number=rim_number, np=actor.np)
        return label

    async def next_pending_label(self, order_id: int) -> Optional[Label]:
        """Next label to pick up: lowest rim, left before right, inschiet last."""
        await self._get_order(order_id)
        stmt = queries.processing_order(queries.pending_labels(order_id)).limit(1)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def labels_for_order(self, order_id: int) -> List[Label]:
        await self._get_order(order_id)
        result = await self.db.execute(queries.processing_order(queries.labels_for_order(order_id)))
        return list(result.scalars().all())

    async def labels_inspected_by(self, np: str) -> List[Label]:
        stmt = queries.labels_inspected_by(np).order_by(Label.started_at.desc(), Label.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _get_order(self, order_id: int) -> ProductionOrder:
        order = await self.db.get(ProductionOrder, order_id)
        if order is None:
            raise NotFoundError(f"Production order {order_id} not found")
        return order

    @staticmethod
    def _ensure_order_processable(label: Label) -> None:
        if not label.order.status.is_processable:
            raise InvalidStateError(
                f"Order {label.order.po_number} is completed; its labels can no longer be processed",
                code="E_ORDER_NOT_PROCESSABLE",
            )
