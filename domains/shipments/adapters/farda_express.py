# domains/shipments/adapters/farda_express.py
import logging
from typing import Any

from django.conf import settings

from ..errors import ProviderError
from ..models import ShipmentStatus
from .base import CarrierAdapter, require_credential

logger = logging.getLogger(__name__)

# Farda Express 는 숫자 코드나 상태명 둘 다 돌려준다
_CODE_MAP = {
    "1": ShipmentStatus.PENDING,
    "2": ShipmentStatus.IN_TRANSIT,
    "3": ShipmentStatus.OUT_FOR_DELIVERY,
    "4": ShipmentStatus.DELIVERED,
    "5": ShipmentStatus.RETURNED,
    "6": ShipmentStatus.RESCHEDULED,
    "7": ShipmentStatus.EXCEPTION,
}

_NAME_MAP = {
    "pending": ShipmentStatus.PENDING,
    "received": ShipmentStatus.PENDING,
    "picked up": ShipmentStatus.IN_TRANSIT,
    "in transit": ShipmentStatus.IN_TRANSIT,
    "dispatched": ShipmentStatus.IN_TRANSIT,
    "out for delivery": ShipmentStatus.OUT_FOR_DELIVERY,
    "delivered": ShipmentStatus.DELIVERED,
    "returned": ShipmentStatus.RETURNED,
    "return to client": ShipmentStatus.RETURNED,
    "rescheduled": ShipmentStatus.RESCHEDULED,
}


def normalize_status(value: Any) -> str:
    key = str(value if value is not None else "").strip()
    if key in _CODE_MAP:
        return _CODE_MAP[key]
    return _NAME_MAP.get(key.lower(), ShipmentStatus.EXCEPTION)


class FardaExpressAdapter(CarrierAdapter):
    """Farda Express: client_id + api_key 를 요청 본문에 실어 조회"""

    code = "FARDA_EXPRESS"
    name = "Farda Express"

    def __init__(self, client_id: str, api_key: str, **kwargs):
        kwargs.setdefault("base_url", settings.FARDA_EXPRESS_API_URL)
        super().__init__(**kwargs)
        self.client_id = client_id
        self.api_key = api_key

    @classmethod
    def from_tenant(cls, tenant) -> "FardaExpressAdapter":
        client_id = require_credential(
            getattr(tenant, "farda_express_client_id", None),
            "Farda Express client id missing",
        )
        api_key = require_credential(
            getattr(tenant, "farda_express_api_key", None),
            "Farda Express API key missing",
        )
        return cls(client_id, api_key)

    def track_shipment(self, tracking_number: str) -> str:
        data = self._request_json(
            "POST",
            "/track",
            data={
                "client_id": self.client_id,
                "api_key": self.api_key,
                "waybill_id": tracking_number,
            },
        )
        if not isinstance(data, dict):
            raise ProviderError(f"Farda Express unexpected response: {str(data)[:200]}")

        if str(data.get("status", "")).lower() in ("error", "failed", "false"):
            raise ProviderError(f"Farda Express tracking error: {data.get('message')}")

        payload = data.get("data") or data
        raw = None
        if isinstance(payload, dict):
            raw = payload.get("status_code") or payload.get("current_status")
        if raw is None:
            logger.info("Farda Express: no tracking data yet for %s", tracking_number)
            return ShipmentStatus.PENDING

        status = normalize_status(raw)
        logger.info("Farda Express %s → %s", tracking_number, status)
        return status
