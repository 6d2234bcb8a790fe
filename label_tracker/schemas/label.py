"""Label Pydantic models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from label_tracker.models.enums import CutSide, LabelState


class LabelRead(BaseModel):
    id: int
    production_order_id: int
    rim_number: int
    cut_side: Optional[CutSide] = None
    is_inschiet: bool
    inspector_np: Optional[str] = None
    inspector_2_np: Optional[str] = None
    pack_sheets: Optional[int] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    workstation_id: Optional[int] = None
    state: LabelState

    model_config = ConfigDict(from_attributes=True)


class LabelFinishRequest(BaseModel):
    second_inspector_np: Optional[str] = Field(
        default=None,
        max_length=5,
        description="NP of the second inspector, if any"
    )
    pack_sheets: Optional[int] = Field(
        default=None,
        ge=1,
        description="Sheets per package (MMEA labels only)"
    )

    @field_validator("second_inspector_np")
    @classmethod
    def normalize_np(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().upper()
        return value or None
