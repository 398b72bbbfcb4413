# domains/shipments/tasks.py
from __future__ import annotations

import logging
from typing import Any, Dict

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(acks_late=True, name="domains.shipments.tasks.reconcile_shipped_orders")
def reconcile_shipped_orders(max_workers: int | None = None) -> Dict[str, Any]:
    """
    배송 중 주문 전체 동기화 (beat 가 매시간 호출)
    주문별 실패는 결과에만 남고, 대상 조회 실패만 태스크 실패가 된다.
    반환: 집계 요약
    """
    # 지연 임포트로 앱 로딩 순서 문제 회피
    from .services import run_reconciliation

    run = run_reconciliation(max_workers=max_workers)
    return {
        "processed": run.processed,
        "succeeded": run.succeeded,
        "failed": run.failed,
        "fallbacks": run.fallbacks,
    }


@shared_task(name="domains.shipments.tasks.reconcile_single_order")
def reconcile_single_order(order_id: str) -> Dict[str, Any]:
    """
    주문 1건 동기화 (관리자 화면에서 큐잉). 실패는 재시도하지 않고 결과로 돌려준다.
    """
    from domains.orders.models import Order

    from .services import reconcile_order

    order = Order.objects.select_related("tenant").filter(pk=order_id).first()
    if order is None:
        logger.warning("reconcile_single_order: order %s not found", order_id)
        return {"orderId": str(order_id), "success": False, "error": "Order not found"}

    return reconcile_order(order).as_dict()
