# domains/shipments/services.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import DatabaseError, connections, transaction
from django.utils import timezone

from domains.catalog import services as catalog_services
from domains.orders.models import TERMINAL_STATUSES, Order, OrderStatus

from .adapters import EnhancedTrackingResult, build_adapter
from .adapters.base import parse_carrier_time
from .errors import PersistenceError, ReconciliationError
from .models import (
    CarrierTrackingDetail,
    OrderFinancialInfo,
    OrderStatusHistory,
    TrackingUpdate,
)
from .notifications import notify_transition
from .status_map import translate

logger = logging.getLogger(__name__)

# 알림을 보내는 전이 대상
_NOTIFY_STATUSES = (OrderStatus.DELIVERED, OrderStatus.RETURNED, OrderStatus.RESCHEDULED)


# =============================================================================
# 결과 타입
# =============================================================================
@dataclass
class TrackingOutcome:
    shipment_status: str
    used_fallback: bool = False
    enhanced: Optional[EnhancedTrackingResult] = None


@dataclass
class ReconcileResult:
    order_id: str
    success: bool
    new_status: Optional[str] = None
    shipment_status: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    used_fallback: bool = False
    enhanced_data: Optional[Dict[str, Any]] = None

    def as_dict(self) -> Dict[str, Any]:
        """외부 응답 형태 (camelCase, 값이 없는 키는 생략)"""
        data: Dict[str, Any] = {"orderId": self.order_id, "success": self.success}
        if self.new_status is not None:
            data["newStatus"] = str(self.new_status)
        if self.shipment_status is not None:
            data["shipmentStatus"] = str(self.shipment_status)
        if self.error is not None:
            data["error"] = self.error
            data["errorType"] = self.error_type
        if self.enhanced_data is not None:
            data["enhancedData"] = self.enhanced_data
        if self.used_fallback:
            data["fallbackUsed"] = True
        return data


@dataclass
class ReconciliationRun:
    processed: int
    results: List[ReconcileResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.processed - self.succeeded

    @property
    def fallbacks(self) -> int:
        return sum(1 for r in self.results if r.used_fallback)

    def as_dict(self) -> Dict[str, Any]:
        return {"processed": self.processed, "updates": [r.as_dict() for r in self.results]}


# =============================================================================
# 대상 선정
# =============================================================================
def select_eligible_orders() -> List[Order]:
    """
    SHIPPED + 택배사/운송장 보유 + 미배송 주문 전체.
    실행당 한 번 목록으로 고정한다 (실행 중 바뀌는 행은 다음 실행에서 처리).
    """
    try:
        return list(
            Order.objects.select_related("tenant")
            .filter(
                status=OrderStatus.SHIPPED,
                shipping_provider__isnull=False,
                tracking_number__isnull=False,
                delivered_at__isnull=True,
            )
            .exclude(tracking_number="")
            .order_by("created_at")
        )
    except DatabaseError as e:
        raise PersistenceError(f"failed to load eligible orders: {e}") from e


# =============================================================================
# 조회 + 폴백
# =============================================================================
def fetch_shipment_status(adapter, tracking_number: str) -> TrackingOutcome:
    """
    확장 조회 지원 어댑터는 확장 조회 먼저, 실패하면 같은 어댑터로 기본 조회.
    기본 조회까지 실패하면 확장 조회 쪽 오류를 올린다.
    """
    if not adapter.supports_enhanced:
        return TrackingOutcome(shipment_status=adapter.track_shipment(tracking_number))

    try:
        enhanced = adapter.track_shipment_enhanced(tracking_number)
    except Exception as enhanced_error:
        logger.warning(
            "%s enhanced tracking failed for %s, falling back to basic: %s",
            adapter.name, tracking_number, enhanced_error,
        )
        try:
            status = adapter.track_shipment(tracking_number)
        except Exception as basic_error:
            logger.warning("%s basic tracking also failed for %s: %s", adapter.name, tracking_number, basic_error)
            raise enhanced_error
        return TrackingOutcome(shipment_status=status, used_fallback=True)

    return TrackingOutcome(shipment_status=enhanced.basic_status, enhanced=enhanced)


# =============================================================================
# 영속화
# =============================================================================
def _record_tracking_update(order: Order, outcome: TrackingOutcome) -> TrackingUpdate:
    description = "Status updated via scheduled sync"
    location = ""
    if outcome.enhanced is not None:
        location = outcome.enhanced.current_location
        if outcome.enhanced.status_history:
            description = outcome.enhanced.status_history[0].description or description
    elif outcome.used_fallback:
        description = "Basic tracking update (enhanced tracking failed)"

    try:
        return TrackingUpdate.objects.create(
            order=order,
            tenant_id=order.tenant_id,
            status=outcome.shipment_status,
            provider=order.shipping_provider or "",
            tracking_number=order.tracking_number or "",
            description=description,
            location=location,
            timestamp=timezone.now(),
        )
    except DatabaseError as e:
        raise PersistenceError(f"failed to record tracking update: {e}") from e


def _store_enhanced_data(order: Order, enhanced: EnhancedTrackingResult) -> None:
    """상태 이력 전체 교체 + 금액 정보 upsert + 택배사 추적 상세 추가 (한 트랜잭션)"""
    try:
        with transaction.atomic():
            if enhanced.status_history:
                OrderStatusHistory.objects.filter(order=order).delete()
                OrderStatusHistory.objects.bulk_create(
                    [
                        OrderStatusHistory(
                            order=order,
                            tenant_id=order.tenant_id,
                            status=entry.status,
                            status_code=entry.status_code,
                            description=entry.description,
                            location=entry.location,
                            timestamp=entry.timestamp,
                            is_current=entry.is_current,
                            position=i,
                        )
                        for i, entry in enumerate(enhanced.status_history)
                    ]
                )

            fin = enhanced.financial_info
            if fin is not None:
                OrderFinancialInfo.objects.update_or_create(
                    order=order,
                    defaults={
                        "tenant_id": order.tenant_id,
                        "total_amount": fin.total_amount,
                        "shipping_cost": fin.shipping_cost,
                        "tax_amount": fin.tax_amount,
                        "discount_amount": fin.discount_amount,
                        "payment_status": fin.payment_status,
                        "payment_method": fin.payment_method,
                        "currency": fin.currency,
                    },
                )

            if enhanced.tracking_info:
                CarrierTrackingDetail.objects.bulk_create(
                    [
                        CarrierTrackingDetail(
                            order=order,
                            tenant_id=order.tenant_id,
                            provider=order.shipping_provider or "",
                            tracking_number=str(row.get("tracking_number") or order.tracking_number),
                            status=_row_status(row),
                            description=str(row.get("description") or ""),
                            current_location=str(row.get("location") or ""),
                            event_at=_row_time(row),
                            raw_payload=row,
                        )
                        for row in enhanced.tracking_info
                    ]
                )
    except DatabaseError as e:
        raise PersistenceError(f"failed to store enhanced tracking data: {e}") from e


def _row_status(row: Dict[str, Any]) -> str:
    value = row.get("status")
    if isinstance(value, dict):
        value = value.get("name")
    return str(value or "")[:64]


def _row_time(row: Dict[str, Any]):
    return parse_carrier_time(row.get("timestamp") or row.get("created_at"))


def apply_return(order: Order, reason: str) -> bool:
    """
    반품 처리 (단일 트랜잭션)
      (a) 주문 행 잠금 → 이미 종료 상태면 아무것도 안 함 → RETURNED 로 변경
      (b) 상품 재고 += 주문 수량
      (c) 재고 조정 감사 로그 1행
    상품이 없으면 (a)만 수행. DB 오류 시 전부 롤백 후 PersistenceError.
    반환: 실제로 RETURNED 로 바뀌었는지
    """
    try:
        with transaction.atomic():
            locked = Order.objects.select_for_update().filter(pk=order.pk).first()
            if locked is None:
                raise PersistenceError(f"order not found: {order.pk}")
            if locked.status in TERMINAL_STATUSES:
                logger.info("order=%s already %s, return skipped", locked.pk, locked.status)
                return False

            locked.status = OrderStatus.RETURNED
            locked.delivered_at = None
            locked.save(update_fields=["status", "delivered_at", "updated_at"])

            if locked.product_id and locked.quantity > 0:
                try:
                    catalog_services.restock_product(
                        locked.product_id,
                        locked.quantity,
                        reason=reason,
                        tenant_id=locked.tenant_id,
                        user_id=locked.user_id,
                    )
                except catalog_services.StockRowMissing:
                    logger.warning("order=%s product %s missing, restock skipped", locked.pk, locked.product_id)
            else:
                logger.info("order=%s has no product, restock skipped", locked.pk)
    except DatabaseError as e:
        raise PersistenceError(f"return transaction failed for order {order.pk}: {e}") from e

    order.status = OrderStatus.RETURNED
    order.delivered_at = None
    return True


def _apply_status(order: Order, new_status: str, previous_status: str) -> bool:
    """
    종료 상태가 아닌 행에만 적용되는 조건부 UPDATE.
    동시 실행이 먼저 확정했으면 0행 → 변경 없음.
    """
    if new_status == previous_status:
        return False

    now = timezone.now()
    delivered_at = now if new_status == OrderStatus.DELIVERED else None
    try:
        updated = (
            Order.objects.filter(pk=order.pk)
            .exclude(status__in=TERMINAL_STATUSES)
            .update(status=new_status, delivered_at=delivered_at, updated_at=now)
        )
    except DatabaseError as e:
        raise PersistenceError(f"failed to update order {order.pk}: {e}") from e

    if not updated:
        return False
    order.status = new_status
    order.delivered_at = delivered_at
    return True


# =============================================================================
# 주문 1건 동기화
# =============================================================================
def _reconcile(order: Order) -> ReconcileResult:
    order_id = str(order.pk)

    try:
        previous_status = (
            Order.objects.filter(pk=order.pk).values_list("status", flat=True).first()
        )
    except DatabaseError as e:
        raise PersistenceError(f"failed to reload order {order_id}: {e}") from e
    if previous_status is None:
        raise PersistenceError(f"order not found: {order_id}")

    # 이미 확정된 주문: 택배사 호출/쓰기 없이 성공 처리
    if previous_status in TERMINAL_STATUSES:
        logger.info("order=%s already %s, nothing to do", order_id, previous_status)
        return ReconcileResult(order_id=order_id, success=True, new_status=previous_status)

    adapter = build_adapter(order.shipping_provider, order.tenant)
    outcome = fetch_shipment_status(adapter, order.tracking_number)
    new_status = translate(outcome.shipment_status)

    _record_tracking_update(order, outcome)

    enhanced_data = None
    if outcome.enhanced is not None:
        _store_enhanced_data(order, outcome.enhanced)
        enhanced_data = {
            "statusHistory": len(outcome.enhanced.status_history),
            "hasFinancialInfo": outcome.enhanced.financial_info is not None,
            "hasTrackingInfo": bool(outcome.enhanced.tracking_info),
        }

    if new_status == OrderStatus.RETURNED:
        changed = apply_return(order, reason=f"Order Returned (Carrier: {order.tracking_number})")
    else:
        changed = _apply_status(order, new_status, previous_status)

    if changed and new_status in _NOTIFY_STATUSES:
        notify_transition(order, previous_status, new_status)

    logger.info(
        "order=%s %s → %s (carrier=%s%s)",
        order_id, previous_status, new_status, outcome.shipment_status,
        ", fallback" if outcome.used_fallback else "",
    )
    return ReconcileResult(
        order_id=order_id,
        success=True,
        new_status=new_status,
        shipment_status=outcome.shipment_status,
        used_fallback=outcome.used_fallback,
        enhanced_data=enhanced_data,
    )


def reconcile_order(order: Order) -> ReconcileResult:
    """
    주문 1건을 택배사 상태와 맞춘다. 어떤 오류도 밖으로 던지지 않고 실패 결과로 돌려준다.
    """
    try:
        return _reconcile(order)
    except ReconciliationError as e:
        logger.warning("reconcile failed order=%s [%s]: %s", order.pk, e.code, e)
        return ReconcileResult(
            order_id=str(order.pk), success=False, error=str(e), error_type=e.code
        )
    except Exception as e:
        logger.exception("unexpected error while reconciling order=%s", order.pk)
        return ReconcileResult(
            order_id=str(order.pk),
            success=False,
            error=str(e) or e.__class__.__name__,
            error_type="unexpected",
        )


# =============================================================================
# 배치 실행
# =============================================================================
def _resolve_workers(max_workers: Optional[int]) -> int:
    raw = max_workers if max_workers is not None else getattr(settings, "RECONCILE_MAX_WORKERS", 5)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid RECONCILE_MAX_WORKERS=%r, defaulting to 5", raw)
        return 5
    return max(1, value)


def _reconcile_in_worker(order: Order) -> ReconcileResult:
    try:
        return reconcile_order(order)
    finally:
        # 워커 스레드의 DB 커넥션 반환
        connections.close_all()


def run_reconciliation(max_workers: Optional[int] = None) -> ReconciliationRun:
    """
    대상 주문 전체를 동기화. 주문별 결과를 정확히 1개씩 모은다.
    대상 조회 실패(PersistenceError)만 배치 전체 실패로 올린다.
    """
    orders = select_eligible_orders()
    logger.info("Found %d orders to check for updates", len(orders))

    workers = min(_resolve_workers(max_workers), max(len(orders), 1))
    if workers == 1:
        results = [reconcile_order(order) for order in orders]
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reconcile") as pool:
            results = list(pool.map(_reconcile_in_worker, orders))

    run = ReconciliationRun(processed=len(orders), results=results)
    logger.info(
        "Tracking sync finished: processed=%d succeeded=%d failed=%d fallback=%d",
        run.processed, run.succeeded, run.failed, run.fallbacks,
    )
    return run
