"""
Reusable select() builders for the common lookups.

Each helper returns a ``Select`` so callers can add ordering, filters or
pagination before executing it.
"""

from typing import Optional

from sqlalchemy import Select, case, select

from label_tracker.models.enums import CutSide, OrderStatus, OrderType, UserRole
from label_tracker.models.label import Label
from label_tracker.models.production_order import ProductionOrder
from label_tracker.models.user import User
from label_tracker.models.workstation import Workstation


# Production orders

def orders_query(
    order_type: Optional[OrderType] = None,
    status: Optional[OrderStatus] = None,
    team_id: Optional[int] = None,
) -> Select:
    stmt = select(ProductionOrder)
    if order_type is not None:
        stmt = stmt.where(ProductionOrder.order_type == order_type)
    if status is not None:
        stmt = stmt.where(ProductionOrder.status == status)
    if team_id is not None:
        stmt = stmt.where(ProductionOrder.team_id == team_id)
    return stmt


def regular_orders() -> Select:
    return orders_query(order_type=OrderType.REGULAR)


def mmea_orders() -> Select:
    return orders_query(order_type=OrderType.MMEA)


def orders_with_status(status: OrderStatus) -> Select:
    return orders_query(status=status)


def orders_for_team(team_id: int) -> Select:
    return orders_query(team_id=team_id)


# Labels

def labels_for_order(order_id: int) -> Select:
    return select(Label).where(Label.production_order_id == order_id)


def pending_labels(order_id: Optional[int] = None) -> Select:
    """Labels nobody has picked up yet (no inspector assigned)."""
    stmt = select(Label).where(Label.inspector_np.is_(None))
    if order_id is not None:
        stmt = stmt.where(Label.production_order_id == order_id)
    return stmt


def processed_labels(order_id: Optional[int] = None) -> Select:
    """Labels with an inspector assigned, whether finished or not."""
    stmt = select(Label).where(Label.inspector_np.is_not(None))
    if order_id is not None:
        stmt = stmt.where(Label.production_order_id == order_id)
    return stmt


def inschiet_labels(order_id: Optional[int] = None) -> Select:
    stmt = select(Label).where(Label.is_inschiet.is_(True))
    if order_id is not None:
        stmt = stmt.where(Label.production_order_id == order_id)
    return stmt


def labels_inspected_by(np: str) -> Select:
    """
    Labels where ``np`` is the primary or second inspector.

    This is a lookup by employee code, not an ownership relation: labels
    keep the NP even after the user account is deleted.
    """
    code = (np or "").strip().upper()
    return select(Label).where(
        (Label.inspector_np == code) | (Label.inspector_2_np == code)
    )


def processing_order(stmt: Select) -> Select:
    """Rim ascending (inschiet rim 999 sorts last), left before right."""
    side_priority = case(
        {side: side.priority for side in CutSide},
        value=Label.cut_side,
        else_=0,
    )
    return stmt.order_by(
        Label.rim_number.asc(),
        side_priority.asc(),
        Label.id.asc(),
    )


# Users and workstations

def active_users() -> Select:
    return select(User).where(User.is_active.is_(True))


def admin_users() -> Select:
    return select(User).where(User.role == UserRole.ADMIN)


def operator_users() -> Select:
    return select(User).where(User.role == UserRole.OPERATOR)


def active_workstations() -> Select:
    return select(Workstation).where(Workstation.is_active.is_(True))
