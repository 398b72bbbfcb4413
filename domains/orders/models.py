from __future__ import annotations

import uuid

from django.conf import settings
from django.db import models


class OrderStatus(models.TextChoices):
    # 배송 전 단계 (다른 서브시스템 소유, 여기서는 건드리지 않음)
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    PROCESSING = "PROCESSING", "Processing"
    CANCELLED = "CANCELLED", "Cancelled"
    # 배송 동기화가 소유하는 단계
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"
    RETURNED = "RETURNED", "Returned"
    RESCHEDULED = "RESCHEDULED", "Rescheduled"


# 동기화 관점의 종료 상태: 다시 조회해도 아무것도 바꾸지 않는다
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.RETURNED})


class ShippingProvider(models.TextChoices):
    TRANS_EXPRESS = "TRANS_EXPRESS", "Trans Express"
    ROYAL_EXPRESS = "ROYAL_EXPRESS", "Royal Express"
    FARDA_EXPRESS = "FARDA_EXPRESS", "Farda Express"


class Order(models.Model):
    id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False, db_column="order_id"
    )

    # --- FK ---
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        related_name="orders",
        db_column="tenant_id",
    )
    # 주문을 등록/처리한 사용자 (재고 조정 감사용)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    # 상품이 삭제돼도 주문은 남는다 → 반품 시 재고 복구만 생략
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        db_column="product_id",
    )
    quantity = models.PositiveIntegerField(default=1)

    customer_name = models.CharField(max_length=120, blank=True, default="")
    customer_phone = models.CharField(max_length=32, blank=True, default="")

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    # --- 배송 정보 (둘 다 있거나 둘 다 없음) ---
    shipping_provider = models.CharField(
        max_length=20, choices=ShippingProvider.choices, null=True, blank=True
    )
    tracking_number = models.CharField(max_length=64, null=True, blank=True)

    delivered_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "orders"
        indexes = [
            models.Index(fields=["tenant", "status"], name="orders_tenant_status_idx"),
            models.Index(fields=["status", "delivered_at"], name="orders_status_deliv_idx"),
            models.Index(fields=["tracking_number"], name="orders_tracking_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(shipping_provider__isnull=True, tracking_number__isnull=True)
                    | models.Q(shipping_provider__isnull=False, tracking_number__isnull=False)
                ),
                name="ck_order_provider_tracking_pair",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(status=OrderStatus.DELIVERED, delivered_at__isnull=False)
                    | (~models.Q(status=OrderStatus.DELIVERED) & models.Q(delivered_at__isnull=True))
                ),
                name="ck_order_delivered_at_iff_delivered",
            ),
        ]

    def __str__(self) -> str:
        return f"Order({self.id}) tenant={self.tenant_id} status={self.status}"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
