"""Database models for the label tracker."""

from label_tracker.models.enums import (
    CutSide,
    LabelState,
    OrderStatus,
    OrderType,
    UserRole,
    derive_label_state,
)
from label_tracker.models.label import INSCHIET_RIM_NUMBER, Label
from label_tracker.models.production_order import SHEETS_PER_RIM, ProductionOrder
from label_tracker.models.user import User, UserApiKey
from label_tracker.models.workstation import Workstation

__all__ = [
    "CutSide",
    "LabelState",
    "OrderStatus",
    "OrderType",
    "UserRole",
    "derive_label_state",
    "INSCHIET_RIM_NUMBER",
    "Label",
    "SHEETS_PER_RIM",
    "ProductionOrder",
    "User",
    "UserApiKey",
    "Workstation",
]
