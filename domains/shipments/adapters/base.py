# domains/shipments/adapters/base.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from datetime import timezone as dt_timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import requests
from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from ..errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)


@dataclass
class StatusHistoryEntry:
    status: str
    status_code: str
    timestamp: datetime
    description: str = ""
    location: str = ""
    is_current: bool = False


@dataclass
class FinancialInfo:
    total_amount: Decimal
    shipping_cost: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    payment_status: str = ""
    payment_method: str = ""
    currency: str = "LKR"


@dataclass
class EnhancedTrackingResult:
    """
    확장 조회 결과. basic_status 는 기본 조회와 같은 정규화 상태.
    나머지는 택배사가 준 경우에만 채워진다.
    """

    basic_status: str
    status_history: List[StatusHistoryEntry] = field(default_factory=list)
    financial_info: Optional[FinancialInfo] = None
    tracking_info: List[Dict[str, Any]] = field(default_factory=list)
    current_location: str = ""


def split_composite_key(value: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    "identity:secret" → (identity, secret). 구분자가 없거나 한쪽이 비면 None.
    secret 안의 ':' 는 그대로 둔다.
    """
    identity, sep, secret = (value or "").partition(":")
    identity, secret = identity.strip(), secret.strip()
    if not sep or not identity or not secret:
        return None
    return identity, secret


class CarrierAdapter:
    """
    각 택배사 어댑터의 최소 공통 인터페이스
    - 인스턴스는 주문 1건 처리마다 테넌트 자격증명으로 새로 만든다 (from_tenant)
    - 조회 전용: 택배사에 아무것도 쓰지 않는다
    - 실패는 ProviderError 로 올린다 (기본 상태로 삼키지 않음)
    """

    code: str = ""
    name: str = ""
    supports_enhanced: bool = False

    def __init__(self, *, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CARRIER_HTTP_TIMEOUT

    @classmethod
    def from_tenant(cls, tenant) -> "CarrierAdapter":
        """테넌트에 저장된 자격증명으로 어댑터 생성. 누락/형식 오류는 ConfigurationError."""
        raise NotImplementedError

    def track_shipment(self, tracking_number: str) -> str:
        """운송장 번호 → 정규화된 ShipmentStatus 값"""
        raise NotImplementedError

    def track_shipment_enhanced(self, tracking_number: str) -> EnhancedTrackingResult:
        """
        (옵션) 이력/금액/위치까지 포함한 확장 조회.
        기본 구현은 기본 조회 결과만 감싼다.
        """
        return EnhancedTrackingResult(basic_status=self.track_shipment(tracking_number))

    # ---- HTTP 공통 ---------------------------------------------------------
    def _request_json(self, method: str, path: str, **kwargs) -> Any:
        """
        요청 1회 + JSON 디코드. 네트워크/HTTP/JSON 오류는 모두 ProviderError.
        """
        url = f"{self.base_url}{path}"
        kwargs.setdefault("timeout", self.timeout)
        headers = {"Accept": "application/json", **(kwargs.pop("headers", None) or {})}

        logger.debug("%s %s %s", self.name, method, url)
        try:
            resp = requests.request(method, url, headers=headers, **kwargs)
        except requests.Timeout as e:
            raise ProviderError(f"{self.name} request timed out: {url}") from e
        except requests.RequestException as e:
            raise ProviderError(f"{self.name} request failed: {e}") from e

        if not (200 <= resp.status_code < 300):
            logger.warning("%s non-2xx: %s %s", self.name, resp.status_code, resp.text[:500])
            raise ProviderError(
                f"{self.name} HTTP error! status: {resp.status_code}, body: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(f"{self.name} invalid JSON response: {resp.text[:200]}") from e


def parse_carrier_time(value: Any) -> Optional[datetime]:
    """택배사 시각 문자열(공백/ISO 구분자 모두 허용) → aware datetime. 못 읽으면 None."""
    if not value:
        return None
    parsed = parse_datetime(str(value).strip().replace(" ", "T", 1))
    if parsed is None:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def require_credential(value: Optional[str], message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ConfigurationError(message)
    return value
