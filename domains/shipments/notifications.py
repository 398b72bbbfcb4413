# domains/shipments/notifications.py
from __future__ import annotations

import logging

from domains.notifications.models import NotificationCategory
from domains.notifications.services import create_notification
from domains.orders.models import OrderStatus

logger = logging.getLogger(__name__)

# 알림 대상 전이: 새 상태 → (분류, 제목)
_TRANSITIONS = {
    OrderStatus.DELIVERED: (NotificationCategory.DELIVERY, "Order Delivered"),
    OrderStatus.RETURNED: (NotificationCategory.RETURN, "Order Returned"),
    OrderStatus.RESCHEDULED: (NotificationCategory.RESCHEDULE, "Delivery Rescheduled"),
}


def _describe(order, new_status: str) -> str:
    ref = order.tracking_number or "-"
    if new_status == OrderStatus.DELIVERED:
        return f"Order {order.pk} has been delivered (tracking {ref})."
    if new_status == OrderStatus.RETURNED:
        return (
            f"Order {order.pk} was returned by the carrier (tracking {ref}). "
            f"Stock has been restored for {order.quantity} unit(s)."
        )
    return f"Delivery of order {order.pk} has been rescheduled by the carrier (tracking {ref})."


def notify_transition(order, previous_status: str, new_status: str) -> None:
    """
    상태가 실제로 바뀐 경우에만 호출. 실패는 로그만 남기고 삼킨다
    (주문 트랜잭션과 분리된 best-effort).
    """
    if previous_status == new_status or new_status not in _TRANSITIONS:
        return

    category, title = _TRANSITIONS[new_status]
    try:
        create_notification(
            order.tenant_id,
            title,
            _describe(order, new_status),
            category=category,
            order_id=order.pk,
        )
    except Exception:
        logger.exception("notification failed order=%s %s -> %s", order.pk, previous_status, new_status)
