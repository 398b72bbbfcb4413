"""
domains/shipments/status_map.py 테스트 (DB 불필요)
"""

import pytest

from domains.orders.models import OrderStatus
from domains.shipments.models import ShipmentStatus
from domains.shipments.status_map import translate


@pytest.mark.parametrize(
    "shipment_status, expected",
    [
        (ShipmentStatus.PENDING, OrderStatus.SHIPPED),
        (ShipmentStatus.IN_TRANSIT, OrderStatus.SHIPPED),
        (ShipmentStatus.OUT_FOR_DELIVERY, OrderStatus.SHIPPED),
        (ShipmentStatus.EXCEPTION, OrderStatus.SHIPPED),
        (ShipmentStatus.DELIVERED, OrderStatus.DELIVERED),
        (ShipmentStatus.RETURNED, OrderStatus.RETURNED),
        (ShipmentStatus.RESCHEDULED, OrderStatus.RESCHEDULED),
    ],
)
def test_translate_table(shipment_status, expected):
    assert translate(shipment_status) == expected


def test_translate_is_total_over_enum():
    for value in ShipmentStatus:
        assert translate(value) in OrderStatus.values


def test_translate_accepts_plain_strings():
    assert translate("DELIVERED") == OrderStatus.DELIVERED


def test_translate_is_deterministic():
    assert {translate(ShipmentStatus.RETURNED) for _ in range(5)} == {OrderStatus.RETURNED}


@pytest.mark.parametrize("bad", ["delivered", "LOST", "", None])
def test_translate_rejects_unknown(bad):
    with pytest.raises(ValueError):
        translate(bad)
