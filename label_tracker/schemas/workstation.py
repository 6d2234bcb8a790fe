"""Workstation Pydantic models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WorkstationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, examples=["Team 1"])
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class WorkstationUpdate(WorkstationCreate):
    is_active: Optional[bool] = None


class WorkstationRead(BaseModel):
    id: int
    name: str
    is_active: bool
    users_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
