"""Pydantic request/response models"""

from .auth import AccountDelete, AdminPasswordReset, LoginRequest, LoginResponse, PasswordChange, ProfileUpdate
from .label import LabelFinishRequest, LabelRead
from .production_order import (
    OrderProgress,
    ProductionOrderCreate,
    ProductionOrderDetail,
    ProductionOrderRead,
    ProductionOrderUpdate,
)
from .specification import (
    RawSpecificationResponse,
    SpecificationData,
    SpecificationResponse,
    SpecificationValidation,
)
from .user import UserCreate, UserListResponse, UserRead, UserUpdate
from .workstation import WorkstationCreate, WorkstationRead, WorkstationUpdate

__all__ = [
    "AccountDelete",
    "AdminPasswordReset",
    "LoginRequest",
    "LoginResponse",
    "PasswordChange",
    "ProfileUpdate",
    "LabelFinishRequest",
    "LabelRead",
    "OrderProgress",
    "ProductionOrderCreate",
    "ProductionOrderDetail",
    "ProductionOrderRead",
    "ProductionOrderUpdate",
    "RawSpecificationResponse",
    "SpecificationData",
    "SpecificationResponse",
    "SpecificationValidation",
    "UserCreate",
    "UserListResponse",
    "UserRead",
    "UserUpdate",
    "WorkstationCreate",
    "WorkstationRead",
    "WorkstationUpdate",
]
