"""
Closed value sets used by the label tracking domain.

Each enum stores its lowercase value in the database and exposes the
display/behaviour attributes used by the API (labels, colours, priorities).
"""

from datetime import datetime
from enum import Enum
from typing import Optional


class OrderType(str, Enum):
    """Production order type; decides how rims decompose into labels."""
    REGULAR = "regular"
    MMEA = "mmea"

    @property
    def label(self) -> str:
        return {
            OrderType.REGULAR: "Regular",
            OrderType.MMEA: "MMEA",
        }[self]

    @property
    def description(self) -> str:
        return {
            OrderType.REGULAR: "Regular order with 2 labels per rim (left + right)",
            OrderType.MMEA: "MMEA order with 1 label per rim, no cut side",
        }[self]

    @property
    def labels_per_rim(self) -> int:
        return 2 if self is OrderType.REGULAR else 1

    @property
    def requires_cut_side(self) -> bool:
        return self is OrderType.REGULAR

    @classmethod
    def from_query(cls, value: Optional[str]) -> "OrderType":
        """Lenient parse for query strings: anything other than 'mmea' is Regular."""
        if value and value.strip().lower() == cls.MMEA.value:
            return cls.MMEA
        return cls.REGULAR


class OrderStatus(str, Enum):
    """Order workflow status: registered -> in_progress -> completed."""
    REGISTERED = "registered"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return {
            OrderStatus.REGISTERED: "Registered",
            OrderStatus.IN_PROGRESS: "In Progress",
            OrderStatus.COMPLETED: "Completed",
        }[self]

    @property
    def color(self) -> str:
        return {
            OrderStatus.REGISTERED: "gray",
            OrderStatus.IN_PROGRESS: "blue",
            OrderStatus.COMPLETED: "green",
        }[self]

    @property
    def is_processable(self) -> bool:
        """Whether labels of an order in this status may still be inspected."""
        return self is not OrderStatus.COMPLETED

    def next_status(self) -> Optional["OrderStatus"]:
        return {
            OrderStatus.REGISTERED: OrderStatus.IN_PROGRESS,
            OrderStatus.IN_PROGRESS: OrderStatus.COMPLETED,
            OrderStatus.COMPLETED: None,
        }[self]


class CutSide(str, Enum):
    """Half of a regular rim a label belongs to. Left is processed first."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def label(self) -> str:
        return "Left" if self is CutSide.LEFT else "Right"

    @property
    def short(self) -> str:
        return "L" if self is CutSide.LEFT else "R"

    @property
    def priority(self) -> int:
        return 1 if self is CutSide.LEFT else 2

    def opposite(self) -> "CutSide":
        return CutSide.RIGHT if self is CutSide.LEFT else CutSide.LEFT


class UserRole(str, Enum):
    """Application roles. Admins manage users, workstations and orders."""
    ADMIN = "admin"
    OPERATOR = "operator"

    @property
    def label(self) -> str:
        return "Administrator" if self is UserRole.ADMIN else "Operator"

    @property
    def description(self) -> str:
        if self is UserRole.ADMIN:
            return "Full access including user management and system configuration"
        return "Label processing and printing"

    @property
    def is_admin(self) -> bool:
        return self is UserRole.ADMIN

    @property
    def color(self) -> str:
        return "purple" if self is UserRole.ADMIN else "blue"


class LabelState(str, Enum):
    """Inspection lifecycle of a label, derived from its timestamps."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def derive_label_state(
    started_at: Optional[datetime],
    finished_at: Optional[datetime],
) -> LabelState:
    """
    Derive the lifecycle state of a label.

    A finish timestamp always means completed; a start timestamp without a
    finish means in progress; neither means pending.
    """
    if finished_at is not None:
        return LabelState.COMPLETED
    if started_at is not None:
        return LabelState.IN_PROGRESS
    return LabelState.PENDING


def enum_values(enum_cls) -> list[str]:
    """values_callable for SQLAlchemy Enum columns: persist the lowercase values."""
    return [member.value for member in enum_cls]
