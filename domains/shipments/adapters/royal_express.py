# domains/shipments/adapters/royal_express.py
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.utils import timezone

from ..errors import ConfigurationError, ProviderError
from ..models import ShipmentStatus
from .base import (
    CarrierAdapter,
    EnhancedTrackingResult,
    FinancialInfo,
    StatusHistoryEntry,
    parse_carrier_time,
    require_credential,
    split_composite_key,
)

logger = logging.getLogger(__name__)

# Royal Express(Curfox DMS) 21개 상태 → 정규화 상태 (소문자 비교)
ENHANCED_STATUS_MAP = {
    "order placed": ShipmentStatus.PENDING,
    "order confirmed": ShipmentStatus.PENDING,
    "payment pending": ShipmentStatus.PENDING,
    "payment confirmed": ShipmentStatus.PENDING,
    "processing": ShipmentStatus.PENDING,
    "ready for pickup": ShipmentStatus.PENDING,
    "picked up": ShipmentStatus.IN_TRANSIT,
    "in transit": ShipmentStatus.IN_TRANSIT,
    "arrived at hub": ShipmentStatus.IN_TRANSIT,
    "return in transit": ShipmentStatus.IN_TRANSIT,
    "out for delivery": ShipmentStatus.OUT_FOR_DELIVERY,
    "delivery attempted": ShipmentStatus.OUT_FOR_DELIVERY,
    "delivered": ShipmentStatus.DELIVERED,
    "delivery confirmed": ShipmentStatus.DELIVERED,
    "returned to hub": ShipmentStatus.RETURNED,
    "returned to sender": ShipmentStatus.RETURNED,
    "returned": ShipmentStatus.RETURNED,
    "rescheduled": ShipmentStatus.RESCHEDULED,
    "failed delivery": ShipmentStatus.EXCEPTION,
    "canceled": ShipmentStatus.EXCEPTION,
    "cancelled": ShipmentStatus.EXCEPTION,
    "refund initiated": ShipmentStatus.EXCEPTION,
    "refund completed": ShipmentStatus.EXCEPTION,
    "exception": ShipmentStatus.EXCEPTION,
}


def map_enhanced_status(name: Optional[str]) -> str:
    return ENHANCED_STATUS_MAP.get((name or "").strip().lower(), ShipmentStatus.EXCEPTION)


def _status_name(value: Any) -> str:
    # status 는 문자열이거나 {"name": ...} 객체로 온다
    if isinstance(value, dict):
        return str(value.get("name") or "")
    return str(value or "")


def _decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value)) if value is not None else Decimal("0")
    except (InvalidOperation, ValueError):
        return Decimal("0")


class RoyalExpressAdapter(CarrierAdapter):
    """
    Royal Express (Curfox DMS) 연동 어댑터
    - 자격증명: 테넌트의 "email:password" 합성 키 → /merchant/login 으로 토큰 발급
    - 토큰은 인스턴스 범위에서만 보관 (주문마다 새 인스턴스)
    - 확장 조회: 상태 이력(필수) + tracking-info/financial-info(선택)
    """

    code = "ROYAL_EXPRESS"
    name = "Royal Express"
    supports_enhanced = True

    def __init__(self, email: str, password: str, *, x_tenant: Optional[str] = None, **kwargs):
        kwargs.setdefault("base_url", settings.ROYAL_EXPRESS_API_URL)
        super().__init__(**kwargs)
        self.email = email
        self.password = password
        self.x_tenant = x_tenant or settings.ROYAL_EXPRESS_TENANT
        self._token: Optional[str] = None

    @classmethod
    def from_tenant(cls, tenant) -> "RoyalExpressAdapter":
        raw = require_credential(
            getattr(tenant, "royal_express_api_key", None),
            "Royal Express API key missing",
        )
        parts = split_composite_key(raw)
        if parts is None:
            raise ConfigurationError(
                "Royal Express API key format invalid (expected email:password)"
            )
        return cls(*parts)

    # ---- 인증/요청 ---------------------------------------------------------
    def _authenticate(self) -> str:
        if self._token:
            return self._token
        try:
            data = self._request_json(
                "POST",
                "/merchant/login",
                json={"email": self.email, "password": self.password},
                headers={"X-tenant": self.x_tenant},
            )
        except ProviderError as e:
            raise ProviderError(f"Authentication failed: {e}") from e

        if not isinstance(data, dict) or data.get("message") != "success" or not data.get("token"):
            message = data.get("message") if isinstance(data, dict) else data
            raise ProviderError(f"Authentication failed: {message}")

        self._token = data["token"]
        return self._token

    def _call(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        token = self._authenticate()
        headers = {"X-tenant": self.x_tenant, "Authorization": f"Bearer {token}"}
        try:
            data = self._request_json(method, path, headers=headers, **kwargs)
        except ProviderError as e:
            if e.status_code == 401:
                # 토큰 만료: 다음 호출에서 재로그인
                self._token = None
            raise
        if not isinstance(data, dict):
            raise ProviderError(f"Royal Express unexpected response: {str(data)[:200]}")
        return data

    # ---- 기본 조회 ---------------------------------------------------------
    def get_tracking_info(self, tracking_number: str) -> List[Dict[str, Any]]:
        data = self._call(
            "GET",
            "/merchant/order/tracking-info",
            params={"waybill_number": tracking_number},
        )
        rows = data.get("data")
        if rows is None:
            raise ProviderError(
                f"Invalid response format from Tracking Info API: {data.get('message')}"
            )
        if isinstance(rows, dict):
            rows = [rows]
        return [r for r in rows if isinstance(r, dict)]

    def track_shipment(self, tracking_number: str) -> str:
        rows = self.get_tracking_info(tracking_number)
        if not rows:
            logger.info("Royal Express: no tracking data yet for %s", tracking_number)
            return ShipmentStatus.PENDING

        # 기본 조회도 확장 조회와 같은 Curfox 상태 어휘
        status = map_enhanced_status(_status_name(rows[0].get("status")))
        logger.info("Royal Express %s → %s", tracking_number, status)
        return status

    # ---- 확장 조회 ---------------------------------------------------------
    def get_status_history(self, tracking_number: str) -> List[StatusHistoryEntry]:
        """
        GET /merchant/order/{id}/status → 최신순, 중복 제거된 이력.
        첫 항목이 현재 상태(is_current=True).
        """
        data = self._call("GET", f"/merchant/order/{tracking_number}/status")
        rows = data.get("data")
        if not data.get("status") or not isinstance(rows, list) or not rows:
            raise ProviderError(
                f"Invalid response format from Order Status API: {data.get('message')}"
            )

        entries: List[StatusHistoryEntry] = []
        seen = set()
        for row in rows:
            if not isinstance(row, dict):
                continue
            label = _status_name(row.get("status")).strip()
            ts = parse_carrier_time(row.get("created_at")) or timezone.now()
            description = str(row.get("description") or "")
            key = (label.lower(), ts, description)
            if key in seen:
                continue
            seen.add(key)
            entries.append(
                StatusHistoryEntry(
                    status=label or "Exception",
                    status_code=str(row.get("status_id") or map_enhanced_status(label)),
                    timestamp=ts,
                    description=description,
                )
            )

        if not entries:
            raise ProviderError("Order Status API returned no usable entries")

        entries.sort(key=lambda e: e.timestamp, reverse=True)
        entries[0].is_current = True
        return entries

    def get_financial_info(self, tracking_number: str) -> FinancialInfo:
        data = self._call(
            "POST", "/merchant/order/financial-info", json={"order_id": tracking_number}
        )
        info = data.get("data")
        if not data.get("status") or not isinstance(info, dict):
            raise ProviderError(
                f"Invalid response format from Financial Info API: {data.get('message')}"
            )
        return FinancialInfo(
            total_amount=_decimal(info.get("total_amount")),
            shipping_cost=_decimal(info.get("shipping_cost")),
            tax_amount=_decimal(info.get("tax_amount")),
            discount_amount=_decimal(info.get("discount_amount")),
            payment_status=str(info.get("payment_status") or ""),
            payment_method=str(info.get("payment_method") or ""),
            currency=str(info.get("currency") or "LKR")[:3],
        )

    def track_shipment_enhanced(self, tracking_number: str) -> EnhancedTrackingResult:
        # 상태 이력은 필수: 실패하면 그대로 올려서 호출 측이 기본 조회로 폴백
        history = self.get_status_history(tracking_number)
        result = EnhancedTrackingResult(
            basic_status=map_enhanced_status(history[0].status),
            status_history=history,
        )

        try:
            result.tracking_info = self.get_tracking_info(tracking_number)
        except ProviderError as e:
            logger.warning("Royal Express tracking-info skipped for %s: %s", tracking_number, e)
        if result.tracking_info:
            latest = result.tracking_info[0]
            result.current_location = str(latest.get("location") or "")
            history[0].location = result.current_location

        try:
            result.financial_info = self.get_financial_info(tracking_number)
        except ProviderError as e:
            logger.warning("Royal Express financial-info skipped for %s: %s", tracking_number, e)

        logger.info(
            "Royal Express enhanced %s → %s (%d history entries)",
            tracking_number,
            result.basic_status,
            len(history),
        )
        return result
