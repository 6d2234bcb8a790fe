"""
Specification lookups proxied to SIRINE.

Nothing is stored locally. The ``type`` query parameter picks the SIRINE
endpoint; anything other than ``mmea`` means a regular order.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.responses import JSONResponse

from label_tracker.api.deps import get_current_user, get_sirine_client
from label_tracker.models.enums import OrderType
from label_tracker.schemas.specification import (
    RawSpecificationResponse,
    SpecificationResponse,
    SpecificationValidation,
)
from label_tracker.services.sirine_client import SirineApiClient

router = APIRouter(dependencies=[Depends(get_current_user)])

PoNumber = Annotated[int, Path(gt=0, description="PO number (digits only)")]
OrderTypeQuery = Annotated[Optional[str], Query(description="regular (default) or mmea")]


def _not_found(po_number: int) -> JSONResponse:
    body = SpecificationResponse(
        success=False,
        message=f"Specification not found for PO {po_number}",
        data=None,
    )
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=body.model_dump())


@router.get(
    "/{po_number}",
    response_model=SpecificationResponse,
    responses={404: {"model": SpecificationResponse}},
)
async def show_specification(
    po_number: PoNumber,
    type: OrderTypeQuery = None,
    sirine: SirineApiClient = Depends(get_sirine_client),
):
    spec = await sirine.get_parsed_specification(po_number, OrderType.from_query(type))
    if spec is None:
        return _not_found(po_number)
    return SpecificationResponse(success=True, message="Specification found", data=spec)


@router.get("/{po_number}/validate", response_model=SpecificationValidation)
async def validate_specification(
    po_number: PoNumber,
    type: OrderTypeQuery = None,
    sirine: SirineApiClient = Depends(get_sirine_client),
):
    """Check that the PO exists in SIRINE before registering an order; includes a preview."""
    spec = await sirine.get_parsed_specification(po_number, OrderType.from_query(type))
    if spec is None:
        return SpecificationValidation(
            success=False,
            valid=False,
            message=f"PO {po_number} was not found in SIRINE",
            data=None,
        )
    return SpecificationValidation(
        success=True,
        valid=True,
        message=f"PO {po_number} is valid and was found in SIRINE",
        data=spec,
    )


@router.get(
    "/{po_number}/raw",
    response_model=RawSpecificationResponse,
    responses={404: {"model": RawSpecificationResponse}},
)
async def raw_specification(
    po_number: PoNumber,
    type: OrderTypeQuery = None,
    sirine: SirineApiClient = Depends(get_sirine_client),
):
    raw = await sirine.get_specification(po_number, OrderType.from_query(type))
    if raw is None:
        return _not_found(po_number)
    return RawSpecificationResponse(success=True, message="Raw specification found", data=raw)
