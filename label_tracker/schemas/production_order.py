"""
Production order Pydantic models

Request validation and response serialization for /api/orders.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from label_tracker.models.enums import OrderStatus, OrderType


class ProductionOrderCreate(BaseModel):
    """Register a new order. Missing details are filled from SIRINE."""

    po_number: int = Field(..., gt=0, description="PO number as known in SIRINE", examples=[1234567])
    order_type: OrderType = Field(default=OrderType.REGULAR, description="regular or mmea")
    obc_number: Optional[str] = Field(default=None, max_length=50)
    product_type: Optional[str] = Field(default=None, max_length=50)
    total_sheets: Optional[int] = Field(
        default=None,
        description="Planned sheets; at least one full rim (1000). Defaults to SIRINE 'rencet'"
    )
    start_rim: int = Field(default=1, ge=1, description="First rim number")
    team_id: Optional[int] = Field(default=None, description="Assigned workstation")

    @field_validator("obc_number", "product_type")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "po_number": 1234567,
                "order_type": "regular",
                "total_sheets": 10500,
                "team_id": 1,
            }
        }
    )


class ProductionOrderUpdate(BaseModel):
    """Corrections allowed after registration. Omitted fields stay unchanged."""

    team_id: Optional[int] = None
    obc_number: Optional[str] = Field(default=None, max_length=50)
    product_type: Optional[str] = Field(default=None, max_length=50)


class ProductionOrderRead(BaseModel):
    id: int
    po_number: int
    obc_number: Optional[str] = None
    order_type: OrderType
    product_type: Optional[str] = None
    total_sheets: int
    total_rims: int
    start_rim: int
    end_rim: int
    inschiet_sheets: int
    has_inschiet: bool
    team_id: Optional[int] = None
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderProgress(BaseModel):
    """Label counts and completion percentage, computed at request time."""

    order_id: int
    status: OrderStatus
    total_labels: int
    completed_labels: int
    in_progress_labels: int
    pending_labels: int
    progress: int = Field(..., ge=0, le=100, description="Percentage of completed labels")


class ProductionOrderDetail(ProductionOrderRead):
    progress: int = 0
    total_labels: int = 0
    completed_labels: int = 0
