# domains/shipments/adapters/trans_express.py
import logging
from typing import Optional

from django.conf import settings

from ..errors import ProviderError
from ..models import ShipmentStatus
from .base import CarrierAdapter, require_credential

logger = logging.getLogger(__name__)

# Trans Express current_status → 내부 정규화 상태 (소문자 비교)
_STATUS_MAP = {
    "processing": ShipmentStatus.PENDING,
    "pending": ShipmentStatus.PENDING,
    "picked up": ShipmentStatus.IN_TRANSIT,
    "in transit": ShipmentStatus.IN_TRANSIT,
    "out for delivery": ShipmentStatus.OUT_FOR_DELIVERY,
    "delivered": ShipmentStatus.DELIVERED,
    "returned": ShipmentStatus.RETURNED,
    "returned to sender": ShipmentStatus.RETURNED,
    "return to client": ShipmentStatus.RETURNED,
    "rescheduled": ShipmentStatus.RESCHEDULED,
    "failed delivery": ShipmentStatus.EXCEPTION,
    "canceled": ShipmentStatus.EXCEPTION,
    "cancelled": ShipmentStatus.EXCEPTION,
}


def normalize_status(name: Optional[str]) -> str:
    return _STATUS_MAP.get((name or "").strip().lower(), ShipmentStatus.EXCEPTION)


class TransExpressAdapter(CarrierAdapter):
    """
    Trans Express 연동 어댑터 (API 키 Bearer 인증, 기본 조회만 지원)
    """

    code = "TRANS_EXPRESS"
    name = "Trans Express"

    def __init__(self, api_key: str, **kwargs):
        kwargs.setdefault("base_url", settings.TRANS_EXPRESS_API_URL)
        super().__init__(**kwargs)
        self.api_key = api_key

    @classmethod
    def from_tenant(cls, tenant) -> "TransExpressAdapter":
        api_key = require_credential(
            getattr(tenant, "trans_express_api_key", None),
            "Trans Express API key missing",
        )
        return cls(api_key)

    def track_shipment(self, tracking_number: str) -> str:
        data = self._request_json(
            "POST",
            "/tracking",
            json={"waybill_id": tracking_number},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        if not isinstance(data, dict):
            raise ProviderError(f"Trans Express unexpected response: {str(data)[:200]}")

        payload = data.get("data")
        if not payload:
            if data.get("error"):
                raise ProviderError(f"Trans Express tracking error: {data['error']}")
            # 아직 스캔 전인 운송장: 진행 없음
            logger.info("Trans Express: no tracking data yet for %s", tracking_number)
            return ShipmentStatus.PENDING

        if isinstance(payload, list):
            payload = payload[0]
        if not isinstance(payload, dict):
            raise ProviderError(f"Trans Express unexpected tracking payload: {str(payload)[:200]}")

        status = normalize_status(payload.get("current_status") or "Processing")
        logger.info("Trans Express %s → %s", tracking_number, status)
        return status
