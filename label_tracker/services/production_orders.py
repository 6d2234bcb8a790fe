"""
Production order service

Registration of orders from SIRINE specifications, decomposition of an
order into rim labels, explicit status progression and progress
aggregation.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from sqlalchemy import and_, case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker.core.config import get_settings
from label_tracker.core.exceptions import BusinessRuleError, ConflictError, InvalidStateError, NotFoundError
from label_tracker.core.logging import get_logger
from label_tracker.core.permissions import ensure_admin
from label_tracker.models.enums import CutSide, OrderStatus, OrderType
from label_tracker.models.label import INSCHIET_RIM_NUMBER, Label
from label_tracker.models.production_order import SHEETS_PER_RIM, ProductionOrder
from label_tracker.models.user import User
from label_tracker.models.workstation import Workstation
from label_tracker.schemas.production_order import OrderProgress, ProductionOrderCreate, ProductionOrderUpdate
from label_tracker.services import queries
from label_tracker.services.sirine_client import SirineApiClient

logger = get_logger(__name__)


class PlannedLabel(NamedTuple):
    rim_number: int
    cut_side: Optional[CutSide]
    is_inschiet: bool = False


def calculate_progress(completed: int, total: int) -> int:
    """
    Percentage of completed labels, rounded half up.

    1 of 3 -> 33, 2 of 3 -> 67, 1 of 8 -> 13. An order without labels is at 0.
    """
    if total <= 0:
        return 0
    ratio = Decimal(completed) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_rim_breakdown(total_sheets: int, order_type: OrderType) -> Tuple[int, int]:
    """Split sheets into full rims and remainder sheets. MMEA orders never carry inschiet."""
    total_rims, remainder = divmod(total_sheets, SHEETS_PER_RIM)
    if order_type == OrderType.MMEA:
        remainder = 0
    return total_rims, remainder


def plan_labels(order: ProductionOrder) -> List[PlannedLabel]:
    """
    Labels an order decomposes into, in processing order.

    Regular: a Left and a Right label per rim, plus Left/Right inschiet
    labels on rim 999 when there are remainder sheets.
    MMEA: a single label without cut side per rim.
    """
    sides: List[Optional[CutSide]]
    if order.order_type.requires_cut_side:
        sides = sorted(CutSide, key=lambda side: side.priority)
    else:
        sides = [None]

    planned = [
        PlannedLabel(rim_number=rim, cut_side=side)
        for rim in range(order.start_rim, order.end_rim + 1)
        for side in sides
    ]

    if order.order_type == OrderType.REGULAR and order.has_inschiet:
        planned.extend(
            PlannedLabel(rim_number=INSCHIET_RIM_NUMBER, cut_side=side, is_inschiet=True)
            for side in sides
        )
    return planned


def _as_int(value: Any) -> Optional[int]:
    """SIRINE sends numbers as strings sometimes."""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class ProductionOrderService:
    """Order operations. Mutations take the acting user explicitly."""

    def __init__(self, db: AsyncSession, sirine: Optional[SirineApiClient] = None):
        self.db = db
        self.sirine = sirine

    async def get_order(self, order_id: int) -> ProductionOrder:
        order = await self.db.get(ProductionOrder, order_id)
        if order is None:
            raise NotFoundError(f"Production order {order_id} not found")
        return order

    async def list_orders(
        self,
        order_type: Optional[OrderType] = None,
        status: Optional[OrderStatus] = None,
        team_id: Optional[int] = None,
    ) -> List[ProductionOrder]:
        stmt = queries.orders_query(order_type=order_type, status=status, team_id=team_id)
        stmt = stmt.order_by(ProductionOrder.created_at.desc(), ProductionOrder.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def register_order(self, payload: ProductionOrderCreate, actor: User) -> ProductionOrder:
        """
        Register an order and materialise its labels in one transaction.

        Raises:
            PermissionDeniedError: actor is not an active admin
            ConflictError: the PO number is already registered
            BusinessRuleError: PO unknown to SIRINE, too few sheets, rims reaching
                the inschiet rim, or an unknown team
        """
        ensure_admin(actor)
        settings = get_settings()

        existing = await self.db.execute(
            select(ProductionOrder.id).where(ProductionOrder.po_number == payload.po_number)
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(
                f"PO {payload.po_number} is already registered",
                field="po_number",
            )

        obc_number = payload.obc_number
        product_type = payload.product_type
        total_sheets = payload.total_sheets

        if settings.sirine_verify_on_register:
            if self.sirine is None:
                raise RuntimeError("SIRINE client is required when sirine_verify_on_register is enabled")
            spec = await self.sirine.get_parsed_specification(payload.po_number, payload.order_type)
            if spec is None:
                raise BusinessRuleError(
                    f"PO {payload.po_number} was not found in SIRINE",
                    code="E_PO_NOT_IN_SIRINE",
                    field="po_number",
                )
            obc_number = obc_number or _as_text(spec.get("obc_number"))
            product_type = product_type or _as_text(spec.get("product_type"))
            if total_sheets is None:
                total_sheets = _as_int(spec.get("total_sheets"))

        if total_sheets is None or total_sheets < SHEETS_PER_RIM:
            raise BusinessRuleError(
                f"total_sheets must be at least {SHEETS_PER_RIM} (one full rim)",
                field="total_sheets",
            )

        if payload.team_id is not None:
            await self._ensure_team_exists(payload.team_id)

        total_rims, inschiet_sheets = compute_rim_breakdown(total_sheets, payload.order_type)
        end_rim = payload.start_rim + total_rims - 1
        if end_rim >= INSCHIET_RIM_NUMBER:
            # rim 999 and above belong to the inschiet batch
            raise BusinessRuleError(
                f"Rims {payload.start_rim}-{end_rim} reach the inschiet rim {INSCHIET_RIM_NUMBER}",
                code="E_RIM_RANGE_TOO_LARGE",
                field="total_sheets" if total_rims >= INSCHIET_RIM_NUMBER else "start_rim",
            )

        order = ProductionOrder(
            po_number=payload.po_number,
            obc_number=obc_number,
            order_type=payload.order_type,
            product_type=product_type,
            total_sheets=total_sheets,
            total_rims=total_rims,
            start_rim=payload.start_rim,
            end_rim=end_rim,
            inschiet_sheets=inschiet_sheets,
            team_id=payload.team_id,
            status=OrderStatus.REGISTERED,
        )
        self.db.add(order)

        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning("Order registration conflict", po_number=payload.po_number, error=str(exc.orig))
            raise ConflictError(f"PO {payload.po_number} is already registered", field="po_number") from exc

        planned = plan_labels(order)
        self.db.add_all(
            Label(
                production_order_id=order.id,
                rim_number=item.rim_number,
                cut_side=item.cut_side,
                is_inschiet=item.is_inschiet,
            )
            for item in planned
        )
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.error("Label materialisation failed", po_number=payload.po_number, error=str(exc.orig))
            raise

        logger.info(
            "Production order registered",
            order_id=order.id,
            po_number=order.po_number,
            order_type=order.order_type.value,
            total_rims=total_rims,
            inschiet_sheets=inschiet_sheets,
            labels=len(planned),
            np=actor.np,
        )
        return order

    async def get_order_progress(self, order_id: int) -> OrderProgress:
        """Count the order's labels at query time; nothing is cached."""
        order = await self.get_order(order_id)

        in_progress = case(
            (and_(Label.started_at.is_not(None), Label.finished_at.is_(None)), 1),
        )
        result = await self.db.execute(
            select(
                func.count(Label.id),
                func.count(Label.finished_at),
                func.count(in_progress),
            ).where(Label.production_order_id == order_id)
        )
        total, completed, started = result.one()

        return OrderProgress(
            order_id=order.id,
            status=order.status,
            total_labels=total,
            completed_labels=completed,
            in_progress_labels=started,
            pending_labels=total - completed - started,
            progress=calculate_progress(completed, total),
        )

    async def advance_status(self, order_id: int, actor: User) -> ProductionOrder:
        """Move the order one step forward. Never triggered by label completion."""
        ensure_admin(actor)
        order = await self.get_order(order_id)

        next_status = order.status.next_status()
        if next_status is None:
            raise InvalidStateError(
                f"Order {order.po_number} is already {order.status.label.lower()}",
                code="E_ORDER_ALREADY_COMPLETED",
            )

        previous = order.status
        order.status = next_status
        await self.db.commit()

        logger.info(
            "Order status advanced",
            order_id=order.id,
            po_number=order.po_number,
            from_status=previous.value,
            to_status=next_status.value,
            np=actor.np,
        )
        return order

    async def update_order(self, order_id: int, payload: ProductionOrderUpdate, actor: User) -> ProductionOrder:
        """Team assignment and OBC/product type corrections. Omitted fields are left alone."""
        ensure_admin(actor)
        order = await self.get_order(order_id)
        changes: Dict[str, Any] = payload.model_dump(exclude_unset=True)

        if "team_id" in changes and changes["team_id"] is not None:
            await self._ensure_team_exists(changes["team_id"])

        for field, value in changes.items():
            setattr(order, field, value)
        await self.db.commit()

        logger.info("Order updated", order_id=order.id, fields=sorted(changes), np=actor.np)
        return order

    async def delete_order(self, order_id: int, actor: User) -> None:
        """Delete the order; its labels go with it."""
        ensure_admin(actor)
        order = await self.get_order(order_id)
        po_number = order.po_number

        await self.db.delete(order)
        await self.db.commit()

        logger.info("Order deleted", order_id=order_id, po_number=po_number, np=actor.np)

    async def _ensure_team_exists(self, team_id: int) -> None:
        if await self.db.get(Workstation, team_id) is None:
            raise BusinessRuleError(f"Workstation {team_id} does not exist", field="team_id")
