"""Login, profile and password Pydantic models."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from label_tracker.core.password import MIN_PASSWORD_LENGTH
from label_tracker.schemas.user import UserRead


class LoginRequest(BaseModel):
    np: str = Field(min_length=1, max_length=5)
    password: str = Field(min_length=1, max_length=200)

    @field_validator("np")
    @classmethod
    def upper_np(cls, value: str) -> str:
        return value.strip().upper()


class LoginResponse(BaseModel):
    api_key: str
    api_key_header: str
    user: UserRead


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)


class PasswordChange(BaseModel):
    """Own password change; the current password must be supplied."""

    current_password: str = Field(min_length=1, max_length=200)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=200)
    new_password_confirmation: str = Field(max_length=200)

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordChange":
        if self.new_password != self.new_password_confirmation:
            raise ValueError("new_password_confirmation does not match")
        return self


class AccountDelete(BaseModel):
    password: str = Field(min_length=1, max_length=200)


class AdminPasswordReset(BaseModel):
    """Admin reset: either a custom password with confirmation, or the default one."""

    user_id: int
    new_password: Optional[str] = Field(default=None, max_length=200)
    new_password_confirmation: Optional[str] = Field(default=None, max_length=200)
    use_default: bool = False

    @model_validator(mode="after")
    def check_password(self) -> "AdminPasswordReset":
        if self.use_default:
            return self
        if not self.new_password:
            raise ValueError("new_password is required unless use_default is set")
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"new_password must be at least {MIN_PASSWORD_LENGTH} characters")
        if self.new_password != self.new_password_confirmation:
            raise ValueError("new_password_confirmation does not match")
        return self
