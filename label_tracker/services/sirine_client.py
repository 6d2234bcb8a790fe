"""
SIRINE specification client

SIRINE is the external system of record for order specifications (OBC
number, product type, sheet counts, production counters). Nothing fetched
from it is stored locally; every lookup goes to the remote API.

Every failure mode (error payload, empty payload, non-2xx status, timeout,
connection error, invalid JSON) is logged and reported to the caller as
``None``. A single attempt is made per call.
"""

from typing import Any, Dict, Optional

import httpx

from label_tracker.core.config import get_settings
from label_tracker.core.logging import get_logger
from label_tracker.models.enums import OrderType

logger = get_logger(__name__)

REGULAR_ENDPOINT = "/detail-order-pcht/{po_number}"
MMEA_ENDPOINT = "/detail-order-mmea/{po_number}"

# SIRINE field -> (normalized field, default when missing)
FIELD_MAP: Dict[str, tuple] = {
    "no_po": ("po_number", None),
    "no_obc": ("obc_number", None),
    "jenis": ("product_type", None),
    "tgl_obc": ("order_date", None),
    "tgl_jt": ("due_date", None),
    "jml_order": ("total_order", 0),
    "rencet": ("total_sheets", 0),
    "mesin": ("machine", None),
    "desain": ("design_year", None),
    "status": ("status", None),
    "jml_cetak": ("print_count", 0),
    "hcs_verif": ("verified_good", 0),
    "hcts_verif": ("verified_defect", 0),
    "kemas": ("packed", 0),
    "kirim": ("shipped", 0),
}


class SirineApiClient:
    """Read-only client for the SIRINE specification API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        verify: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify = verify
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "SirineApiClient":
        settings = get_settings()
        return cls(
            base_url=settings.sirine_api_url,
            timeout=settings.sirine_timeout,
            verify=settings.sirine_verify_ssl,
        )

    async def get_regular_spec(self, po_number: int) -> Optional[Dict[str, Any]]:
        return await self._fetch_spec(REGULAR_ENDPOINT.format(po_number=po_number))

    async def get_mmea_spec(self, po_number: int) -> Optional[Dict[str, Any]]:
        return await self._fetch_spec(MMEA_ENDPOINT.format(po_number=po_number))

    async def get_specification(self, po_number: int, order_type: OrderType) -> Optional[Dict[str, Any]]:
        """Fetch the raw specification from the endpoint matching the order type."""
        if order_type == OrderType.MMEA:
            return await self.get_mmea_spec(po_number)
        return await self.get_regular_spec(po_number)

    async def validate_po(self, po_number: int, order_type: OrderType) -> bool:
        return await self.get_specification(po_number, order_type) is not None

    @staticmethod
    def parse_response(raw: Dict[str, Any]) -> Dict[str, Any]:
        """
        Map SIRINE field names onto stable names.

        Missing fields fall back to 0 for counters and None for everything
        else. The untouched payload is kept under ``raw``.
        """
        parsed: Dict[str, Any] = {}
        for source, (target, default) in FIELD_MAP.items():
            value = raw.get(source)
            parsed[target] = default if value is None else value
        parsed["raw"] = raw
        return parsed

    async def get_parsed_specification(
        self,
        po_number: int,
        order_type: OrderType,
    ) -> Optional[Dict[str, Any]]:
        raw = await self.get_specification(po_number, order_type)
        if raw is None:
            return None
        return self.parse_response(raw)

    async def _fetch_spec(self, endpoint: str) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}{endpoint}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                verify=self.verify,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.error(
                "SIRINE API error",
                endpoint=endpoint,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

        if not response.is_success:
            logger.warning(
                "SIRINE API unsuccessful response",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            return None

        try:
            data = response.json()
        except ValueError as exc:
            logger.error(
                "SIRINE API returned invalid JSON",
                endpoint=endpoint,
                status_code=response.status_code,
                error=str(exc),
            )
            return None

        if not data or not isinstance(data, dict) or data.get("error") is not None:
            logger.info(
                "SIRINE specification not found",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            return None

        return data
