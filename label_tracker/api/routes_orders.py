"""
Production order endpoints

Reads are open to any authenticated user; registration, corrections,
deletion and status changes need an admin.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker.api.deps import get_current_user, get_db, get_sirine_client, require_admin
from label_tracker.models.enums import CutSide, OrderStatus, OrderType
from label_tracker.models.user import User
from label_tracker.schemas.label import LabelRead
from label_tracker.schemas.production_order import (
    OrderProgress,
    ProductionOrderCreate,
    ProductionOrderDetail,
    ProductionOrderRead,
    ProductionOrderUpdate,
)
from label_tracker.services.labels import LabelService
from label_tracker.services.production_orders import ProductionOrderService
from label_tracker.services.sirine_client import SirineApiClient

router = APIRouter()


async def _detail(service: ProductionOrderService, order_id: int) -> ProductionOrderDetail:
    order = await service.get_order(order_id)
    progress = await service.get_order_progress(order_id)
    return ProductionOrderDetail.model_validate(order).model_copy(
        update={
            "progress": progress.progress,
            "total_labels": progress.total_labels,
            "completed_labels": progress.completed_labels,
        }
    )


@router.get("", response_model=List[ProductionOrderRead])
async def list_orders(
    order_type: Optional[OrderType] = Query(None),
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    team_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await ProductionOrderService(db).list_orders(
        order_type=order_type,
        status=status_filter,
        team_id=team_id,
    )


@router.post("", response_model=ProductionOrderDetail, status_code=status.HTTP_201_CREATED)
async def register_order(
    payload: ProductionOrderCreate = Body(...),
    db: AsyncSession = Depends(get_db),
    sirine: SirineApiClient = Depends(get_sirine_client),
    admin: User = Depends(require_admin),
):
    """Register an order from a SIRINE PO and create its labels."""
    service = ProductionOrderService(db, sirine)
    order = await service.register_order(payload, admin)
    return await _detail(service, order.id)


@router.get("/{order_id}", response_model=ProductionOrderDetail)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await _detail(ProductionOrderService(db), order_id)


@router.patch("/{order_id}", response_model=ProductionOrderRead)
async def update_order(
    order_id: int,
    payload: ProductionOrderUpdate = Body(...),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return await ProductionOrderService(db).update_order(order_id, payload, admin)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> Response:
    await ProductionOrderService(db).delete_order(order_id, admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{order_id}/advance-status", response_model=ProductionOrderRead)
async def advance_status(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """registered -> in_progress -> completed. A completed order gives 409."""
    return await ProductionOrderService(db).advance_status(order_id, admin)


@router.get("/{order_id}/progress", response_model=OrderProgress)
async def order_progress(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await ProductionOrderService(db).get_order_progress(order_id)


@router.get("/{order_id}/labels", response_model=List[LabelRead])
async def order_labels(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await LabelService(db).labels_for_order(order_id)


@router.post("/{order_id}/labels", response_model=LabelRead, status_code=status.HTTP_201_CREATED)
async def add_label(
    order_id: int,
    rim_number: int = Body(..., ge=1, embed=True),
    cut_side: Optional[CutSide] = Body(None, embed=True),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return await LabelService(db).add_label(order_id, rim_number, admin, cut_side=cut_side)


@router.get("/{order_id}/next-label", response_model=Optional[LabelRead])
async def next_label(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """Next pending label in processing order, or null when all are picked up."""
    return await LabelService(db).next_pending_label(order_id)
