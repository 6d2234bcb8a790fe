"""
User Pydantic models

NP (employee code) is at most 5 alphanumeric characters and is always
stored upper-case.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from label_tracker.core.password import MIN_PASSWORD_LENGTH
from label_tracker.models.enums import UserRole

NP_PATTERN = re.compile(r"^[A-Z0-9]{1,5}$")


def normalize_np(value: str) -> str:
    value = (value or "").strip().upper()
    if not NP_PATTERN.match(value):
        raise ValueError("NP must be 1-5 letters or digits")
    return value


class UserCreate(BaseModel):
    np: str = Field(..., min_length=1, max_length=5, examples=["A1234"])
    name: Optional[str] = Field(default=None, max_length=100)
    password: Optional[str] = Field(default=None, max_length=200)
    use_default: bool = Field(default=False, description="Use the default password (prefix + NP)")
    role: UserRole = UserRole.OPERATOR
    workstation_id: Optional[int] = None
    is_active: bool = True

    @field_validator("np", mode="before")
    @classmethod
    def check_np(cls, value: str) -> str:
        return normalize_np(value)

    @model_validator(mode="after")
    def password_or_default(self) -> "UserCreate":
        if self.use_default:
            return self
        if not self.password:
            raise ValueError("password is required unless use_default is set")
        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
        return self


class UserUpdate(BaseModel):
    """NP cannot be changed. An empty password keeps the current one."""

    name: Optional[str] = Field(default=None, max_length=100)
    password: Optional[str] = Field(default=None, max_length=200)
    role: Optional[UserRole] = None
    workstation_id: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
        return value


class UserRead(BaseModel):
    id: int
    np: str
    name: Optional[str] = None
    role: UserRole
    workstation_id: Optional[int] = None
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    items: List[UserRead]
    total: int
    page: int
    per_page: int
    pages: int
