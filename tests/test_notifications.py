"""
알림 생성 (best-effort) 테스트
"""

from unittest.mock import patch

from django.db import DatabaseError

import pytest

from domains.notifications.models import Notification, NotificationCategory
from domains.notifications.services import create_notification
from domains.orders.models import OrderStatus
from domains.shipments.notifications import notify_transition


@pytest.mark.django_db
class TestNotifyTransition:
    def test_delivered(self, order_factory):
        order = order_factory()
        notify_transition(order, OrderStatus.SHIPPED, OrderStatus.DELIVERED)

        note = Notification.objects.get()
        assert note.tenant_id == order.tenant_id
        assert note.order_id == order.pk
        assert note.category == NotificationCategory.DELIVERY
        assert order.tracking_number in note.description

    def test_no_change_no_notification(self, order_factory):
        order = order_factory()
        notify_transition(order, OrderStatus.SHIPPED, OrderStatus.SHIPPED)
        notify_transition(order, OrderStatus.RESCHEDULED, OrderStatus.RESCHEDULED)
        assert not Notification.objects.exists()

    def test_untracked_target_ignored(self, order_factory):
        order = order_factory(status=OrderStatus.RESCHEDULED)
        notify_transition(order, OrderStatus.RESCHEDULED, OrderStatus.SHIPPED)
        assert not Notification.objects.exists()


@pytest.mark.django_db
def test_create_notification_swallows_db_errors(tenant):
    with patch.object(Notification.objects, "create", side_effect=DatabaseError("down")):
        assert create_notification(tenant.pk, "t", "d") is None
