from __future__ import annotations

from types import MappingProxyType

from domains.orders.models import OrderStatus

from .models import ShipmentStatus

# 정규화된 배송 상태 → 주문 상태 (고정 테이블)
# 진행 중/예외는 주문을 SHIPPED 로 유지한다
_ORDER_STATUS_BY_SHIPMENT = MappingProxyType(
    {
        ShipmentStatus.PENDING: OrderStatus.SHIPPED,
        ShipmentStatus.IN_TRANSIT: OrderStatus.SHIPPED,
        ShipmentStatus.OUT_FOR_DELIVERY: OrderStatus.SHIPPED,
        ShipmentStatus.EXCEPTION: OrderStatus.SHIPPED,
        ShipmentStatus.DELIVERED: OrderStatus.DELIVERED,
        ShipmentStatus.RETURNED: OrderStatus.RETURNED,
        ShipmentStatus.RESCHEDULED: OrderStatus.RESCHEDULED,
    }
)


def translate(shipment_status: str) -> OrderStatus:
    """배송 상태를 주문 상태로 변환. 테이블에 없는 값은 ValueError."""
    try:
        return _ORDER_STATUS_BY_SHIPMENT[ShipmentStatus(shipment_status)]
    except (KeyError, ValueError):
        raise ValueError(f"unknown shipment status: {shipment_status!r}") from None
