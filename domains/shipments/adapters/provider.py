from __future__ import annotations

from typing import Dict, Type

from ..errors import UnsupportedProviderError
from .base import CarrierAdapter

# 어댑터 레지스트리
_REGISTRY: Dict[str, Type[CarrierAdapter]] = {}


def _norm(code: str) -> str:
    return (code or "").strip().lower().replace("-", "_").replace(" ", "_")


# 흔한 별칭 → 표준 코드
_ALIASES = {
    "trans": "trans_express",
    "transexpress": "trans_express",
    "royal": "royal_express",
    "royalexpress": "royal_express",
    "curfox": "royal_express",  # Royal Express 는 Curfox DMS 위에서 동작
    "farda": "farda_express",
    "fardaexpress": "farda_express",
}


def register_adapter(code: str, adapter_cls: Type[CarrierAdapter]) -> None:
    """캐리어 코드(별칭 포함)에 어댑터 클래스를 등록."""
    _REGISTRY[_norm(code)] = adapter_cls


def get_adapter_class(code: str) -> Type[CarrierAdapter]:
    """캐리어 코드/별칭으로 어댑터 클래스를 반환."""
    key = _norm(code)
    key = _ALIASES.get(key, key)
    cls = _REGISTRY.get(key)
    if not cls:
        raise UnsupportedProviderError(f"Unsupported shipping provider: {code or '-'}")
    return cls


def build_adapter(code: str, tenant) -> CarrierAdapter:
    """
    주문 1건용 어댑터 생성. 자격증명은 호출마다 테넌트에서 읽는다(캐시 없음).
    UnsupportedProviderError / ConfigurationError 를 그대로 올린다.
    """
    return get_adapter_class(code).from_tenant(tenant)
