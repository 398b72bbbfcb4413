from __future__ import annotations

import uuid

from django.db import models


class ShipmentStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    IN_TRANSIT = "IN_TRANSIT", "In Transit"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY", "Out For Delivery"
    DELIVERED = "DELIVERED", "Delivered"
    RETURNED = "RETURNED", "Returned"
    EXCEPTION = "EXCEPTION", "Exception"
    RESCHEDULED = "RESCHEDULED", "Rescheduled"


class TrackingUpdate(models.Model):
    """
    동기화 1회당 주문별 1행(상태 변화 여부와 무관). 추가만 하고 수정하지 않는다.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(
        "orders.Order", on_delete=models.CASCADE, related_name="tracking_updates"
    )
    tenant = models.ForeignKey(
        "tenants.Tenant", on_delete=models.CASCADE, related_name="tracking_updates"
    )
    status = models.CharField(max_length=24, choices=ShipmentStatus.choices)
    provider = models.CharField(max_length=20, blank=True, default="")
    tracking_number = models.CharField(max_length=64, blank=True, default="")
    description = models.TextField(blank=True, default="")
    location = models.CharField(max_length=200, blank=True, default="")
    timestamp = models.DateTimeField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "tracking_updates"
        indexes = [
            models.Index(fields=["order", "timestamp"], name="trk_upd_order_ts_idx"),
            models.Index(fields=["tenant", "timestamp"], name="trk_upd_tenant_ts_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.order_id}@{self.timestamp} {self.status}"


class OrderStatusHistory(models.Model):
    """
    확장 조회(enhanced tracking) 결과의 상태 이력.
    조회에 성공할 때마다 주문 단위로 전체 삭제 후 재생성한다.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(
        "orders.Order", on_delete=models.CASCADE, related_name="status_history"
    )
    tenant = models.ForeignKey(
        "tenants.Tenant", on_delete=models.CASCADE, related_name="status_history"
    )
    status = models.CharField(max_length=64)
    status_code = models.CharField(max_length=64)
    description = models.TextField(blank=True, default="")
    location = models.CharField(max_length=200, blank=True, default="")
    timestamp = models.DateTimeField()
    is_current = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "order_status_history"
        ordering = ["order", "position"]
        indexes = [
            models.Index(fields=["order", "timestamp"], name="status_hist_order_ts_idx"),
            models.Index(fields=["status_code"], name="status_hist_code_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} #{self.position} {self.status}"


class OrderFinancialInfo(models.Model):
    """택배사가 보고한 금액 정보 (주문당 1행, 참고용)"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.OneToOneField(
        "orders.Order", on_delete=models.CASCADE, related_name="financial_info"
    )
    tenant = models.ForeignKey(
        "tenants.Tenant", on_delete=models.CASCADE, related_name="financial_infos"
    )
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    payment_status = models.CharField(max_length=40, blank=True, default="")
    payment_method = models.CharField(max_length=40, blank=True, default="")
    currency = models.CharField(max_length=3, default="LKR")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "order_financial_info"
        indexes = [
            models.Index(fields=["payment_status"], name="fin_info_payment_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} {self.total_amount} {self.currency}"


class CarrierTrackingDetail(models.Model):
    """택배사 원본 추적 정보 (확장 조회 시 매 실행마다 추가)"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(
        "orders.Order", on_delete=models.CASCADE, related_name="carrier_tracking_details"
    )
    tenant = models.ForeignKey(
        "tenants.Tenant", on_delete=models.CASCADE, related_name="carrier_tracking_details"
    )
    provider = models.CharField(max_length=20)
    tracking_number = models.CharField(max_length=64)
    status = models.CharField(max_length=64, blank=True, default="")
    description = models.TextField(blank=True, default="")
    current_location = models.CharField(max_length=200, blank=True, default="")
    event_at = models.DateTimeField(null=True, blank=True)
    raw_payload = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "carrier_tracking_details"
        indexes = [
            models.Index(fields=["order", "created_at"], name="carrier_trk_order_idx"),
            models.Index(fields=["tracking_number"], name="carrier_trk_number_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.provider}:{self.tracking_number} {self.status}"
