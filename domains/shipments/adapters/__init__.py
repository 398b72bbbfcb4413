# domains/shipments/adapters/__init__.py
from .base import CarrierAdapter, EnhancedTrackingResult, FinancialInfo, StatusHistoryEntry
from .farda_express import FardaExpressAdapter
from .provider import build_adapter, get_adapter_class, register_adapter
from .royal_express import RoyalExpressAdapter
from .trans_express import TransExpressAdapter

# 새 택배사는 어댑터 작성 후 여기 등록만 추가하면 된다
register_adapter(TransExpressAdapter.code, TransExpressAdapter)
register_adapter(RoyalExpressAdapter.code, RoyalExpressAdapter)
register_adapter(FardaExpressAdapter.code, FardaExpressAdapter)


__all__ = [
    "CarrierAdapter",
    "EnhancedTrackingResult",
    "FinancialInfo",
    "StatusHistoryEntry",
    "TransExpressAdapter",
    "RoyalExpressAdapter",
    "FardaExpressAdapter",
    "build_adapter",
    "get_adapter_class",
    "register_adapter",
]
