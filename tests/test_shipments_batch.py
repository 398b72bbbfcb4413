"""
run_reconciliation 배치 테스트
"""

from unittest.mock import patch

from django.db import DatabaseError
from django.utils import timezone

import pytest

from domains.orders.models import Order, OrderStatus, ShippingProvider
from domains.shipments.errors import PersistenceError, ProviderError
from domains.shipments.models import ShipmentStatus
from domains.shipments.services import _resolve_workers, run_reconciliation, select_eligible_orders


@pytest.mark.django_db
class TestRunReconciliation:
    def test_one_result_per_order_and_failures_isolated(self, order_factory, fake_carrier):
        orders = [order_factory() for _ in range(5)]
        fake_carrier.statuses[orders[2].tracking_number] = ProviderError("HTTP error! status: 500")
        for o in (orders[0], orders[4]):
            fake_carrier.statuses[o.tracking_number] = ShipmentStatus.DELIVERED

        run = run_reconciliation()

        assert run.processed == 5
        assert len(run.results) == 5
        assert run.succeeded == 4
        assert run.failed == 1
        failed = [r for r in run.results if not r.success]
        assert [r.order_id for r in failed] == [str(orders[2].pk)]
        assert Order.objects.get(pk=orders[2].pk).status == OrderStatus.SHIPPED
        assert Order.objects.filter(status=OrderStatus.DELIVERED).count() == 2

    def test_only_eligible_orders_processed(self, order_factory, fake_carrier):
        shipped = order_factory()
        done = order_factory(status=OrderStatus.DELIVERED, delivered_at=timezone.now())

        run = run_reconciliation()

        assert run.processed == 1
        assert [r.order_id for r in run.results] == [str(shipped.pk)]
        assert ("basic", done.tracking_number) not in fake_carrier.calls

    def test_empty_batch(self, db):
        run = run_reconciliation()
        assert run.processed == 0
        assert run.as_dict() == {"processed": 0, "updates": []}

    def test_second_run_skips_finalized(self, order_factory, fake_carrier):
        order = order_factory()
        fake_carrier.statuses[order.tracking_number] = ShipmentStatus.DELIVERED

        first = run_reconciliation()
        second = run_reconciliation()

        assert first.processed == 1
        assert second.processed == 0
        assert fake_carrier.calls.count(("basic", order.tracking_number)) == 1

    def test_fallback_counted(self, order_factory, fake_enhanced_carrier):
        order = order_factory(provider=ShippingProvider.ROYAL_EXPRESS)
        fake_enhanced_carrier.enhanced[order.tracking_number] = ProviderError("down")

        run = run_reconciliation()

        assert run.fallbacks == 1
        assert run.as_dict()["updates"][0]["fallbackUsed"] is True

    def test_selector_failure_raises(self, db):
        with patch.object(Order.objects, "select_related", side_effect=DatabaseError("gone")):
            with pytest.raises(PersistenceError):
                select_eligible_orders()
            with pytest.raises(PersistenceError):
                run_reconciliation()


@pytest.mark.django_db(transaction=True)
def test_thread_pool_run_isolates_failures(order_factory, fake_carrier):
    """워커 스레드 여러 개로 돌려도 주문당 결과 1개, 실패는 해당 주문에만"""
    orders = [order_factory() for _ in range(5)]
    fake_carrier.statuses[orders[1].tracking_number] = ProviderError("HTTP error! status: 502")
    fake_carrier.statuses[orders[3].tracking_number] = ShipmentStatus.DELIVERED

    run = run_reconciliation(max_workers=3)

    assert run.processed == 5
    assert sorted(r.order_id for r in run.results) == sorted(str(o.pk) for o in orders)
    assert run.succeeded == 4
    assert [r.order_id for r in run.results if not r.success] == [str(orders[1].pk)]
    assert Order.objects.get(pk=orders[1].pk).status == OrderStatus.SHIPPED
    assert Order.objects.get(pk=orders[3].pk).status == OrderStatus.DELIVERED
    assert len(fake_carrier.calls) == 5


@pytest.mark.parametrize(
    "configured, explicit, expected",
    [
        (5, None, 5),
        (5, 2, 2),
        (0, None, 1),
        (-3, None, 1),
        ("8", None, 8),
        ("lots", None, 5),
    ],
)
def test_resolve_workers(settings, configured, explicit, expected):
    settings.RECONCILE_MAX_WORKERS = configured
    assert _resolve_workers(explicit) == expected
