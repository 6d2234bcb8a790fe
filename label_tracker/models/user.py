"""
User and login-token models.

Users log in with their NP (employee code). The NP is also the inspector
attribution key on labels: "labels this person inspected" is a lookup by
``Label.inspector_np == User.np``, not a foreign-key relationship.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from label_tracker.core.database import Base
from label_tracker.models.base import IntegerIdMixin, TimestampMixin, utcnow
from label_tracker.models.enums import UserRole, enum_values

if TYPE_CHECKING:
    from label_tracker.models.workstation import Workstation


class User(IntegerIdMixin, TimestampMixin, Base):
    __tablename__ = "users"

    np: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        unique=True,
        index=True,
        comment="Employee code (NP), stored upper-case, login identifier"
    )
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role_enum", values_callable=enum_values, native_enum=False, length=20),
        default=UserRole.OPERATOR,
        nullable=False,
        index=True,
    )
    workstation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("workstations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    workstation: Mapped[Optional["Workstation"]] = relationship(back_populates="users")
    api_keys: Mapped[List["UserApiKey"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, np='{self.np}', role={self.role}, is_active={self.is_active})>"


class UserApiKey(IntegerIdMixin, Base):
    """Login token issued by POST /api/auth/login. Only the HMAC hash is stored."""

    __tablename__ = "user_api_keys"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # HMAC-SHA256(secret_key, raw_token) hex digest (64 chars). Never store raw tokens.
    key_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)

    label: Mapped[str] = mapped_column(String(100), nullable=False, default="default")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    revoked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship(back_populates="api_keys")
