# domains/orders/serializers.py
from __future__ import annotations

from rest_framework import serializers

from domains.shipments.serializers import (
    CarrierTrackingDetailSerializer,
    OrderFinancialInfoSerializer,
    OrderStatusHistorySerializer,
    TrackingUpdateSerializer,
)

from .models import Order


class ShippedOrderReadSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(source="id", read_only=True)
    tenant_name = serializers.CharField(source="tenant.name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True, default=None)

    class Meta:
        model = Order
        fields = (
            "order_id",
            "tenant",
            "tenant_name",
            "product",
            "product_name",
            "quantity",
            "customer_name",
            "status",
            "shipping_provider",
            "tracking_number",
            "delivered_at",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class OrderTrackingTimelineSerializer(serializers.ModelSerializer):
    """운영자용 주문 추적 타임라인 (최신 기록이 먼저)"""

    order_id = serializers.UUIDField(source="id", read_only=True)
    tracking_updates = serializers.SerializerMethodField()
    status_history = OrderStatusHistorySerializer(many=True, read_only=True)
    financial_info = serializers.SerializerMethodField()
    carrier_tracking_details = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = (
            "order_id",
            "status",
            "shipping_provider",
            "tracking_number",
            "delivered_at",
            "tracking_updates",
            "status_history",
            "financial_info",
            "carrier_tracking_details",
        )

    def get_tracking_updates(self, obj):
        qs = obj.tracking_updates.order_by("-timestamp")
        return TrackingUpdateSerializer(qs, many=True).data

    def get_financial_info(self, obj):
        info = getattr(obj, "financial_info", None)
        return OrderFinancialInfoSerializer(info).data if info else None

    def get_carrier_tracking_details(self, obj):
        qs = obj.carrier_tracking_details.order_by("-created_at")[:20]
        return CarrierTrackingDetailSerializer(qs, many=True).data
