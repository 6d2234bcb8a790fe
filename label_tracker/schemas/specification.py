"""Response envelopes for the SIRINE specification lookups."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class SpecificationData(BaseModel):
    """Normalized SIRINE record. Counters default to 0, everything else to None."""

    po_number: Optional[Any] = None
    obc_number: Optional[Any] = None
    product_type: Optional[Any] = None
    order_date: Optional[Any] = None
    due_date: Optional[Any] = None
    total_order: Any = 0
    total_sheets: Any = 0
    machine: Optional[Any] = None
    design_year: Optional[Any] = None
    status: Optional[Any] = None
    print_count: Any = 0
    verified_good: Any = 0
    verified_defect: Any = 0
    packed: Any = 0
    shipped: Any = 0
    raw: Dict[str, Any] = Field(default_factory=dict, description="Original SIRINE payload")


class SpecificationResponse(BaseModel):
    success: bool
    message: str
    data: Optional[SpecificationData] = None


class SpecificationValidation(BaseModel):
    success: bool
    valid: bool
    message: str
    data: Optional[SpecificationData] = None


class RawSpecificationResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
