from __future__ import annotations

from rest_framework import serializers

from .models import (
    CarrierTrackingDetail,
    OrderFinancialInfo,
    OrderStatusHistory,
    TrackingUpdate,
)


# ---------------------------
# 출력용: 추적 기록
# ---------------------------
class TrackingUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = TrackingUpdate
        fields = (
            "id",
            "status",
            "provider",
            "tracking_number",
            "description",
            "location",
            "timestamp",
        )


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = (
            "status",
            "status_code",
            "description",
            "location",
            "timestamp",
            "is_current",
        )


class OrderFinancialInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderFinancialInfo
        fields = (
            "total_amount",
            "shipping_cost",
            "tax_amount",
            "discount_amount",
            "payment_status",
            "payment_method",
            "currency",
            "updated_at",
        )


class CarrierTrackingDetailSerializer(serializers.ModelSerializer):
    class Meta:
        model = CarrierTrackingDetail
        fields = (
            "provider",
            "tracking_number",
            "status",
            "description",
            "current_location",
            "event_at",
            "created_at",
        )


# ---------------------------
# 문서화용: 동기화 결과 (camelCase 외부 계약)
# ---------------------------
class EnhancedDataSerializer(serializers.Serializer):
    statusHistory = serializers.IntegerField()
    hasFinancialInfo = serializers.BooleanField()
    hasTrackingInfo = serializers.BooleanField()


class ReconcileResultSerializer(serializers.Serializer):
    orderId = serializers.UUIDField()
    success = serializers.BooleanField()
    newStatus = serializers.CharField(required=False)
    shipmentStatus = serializers.CharField(required=False)
    error = serializers.CharField(required=False)
    errorType = serializers.CharField(required=False)
    enhancedData = EnhancedDataSerializer(required=False)
    fallbackUsed = serializers.BooleanField(required=False)


class ReconciliationRunSerializer(serializers.Serializer):
    processed = serializers.IntegerField()
    updates = ReconcileResultSerializer(many=True)
