from __future__ import annotations

import uuid

from django.conf import settings
from django.db import models


# ------------------------
# Products
# ------------------------
class Product(models.Model):
    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        db_column="product_id",
    )
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        related_name="products",
        db_column="tenant_id",
    )

    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=64, blank=True, default="")
    price = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    # 재고 수량 (반품 감지 시 자동 복구 대상)
    stock = models.IntegerField(default=0)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        indexes = [
            models.Index(fields=["tenant", "name"], name="products_tenant_name_idx"),
        ]

    def __str__(self) -> str:
        return self.name or f"Product {self.pk}"


# ------------------------
# 재고 조정 감사 로그 (불변)
# ------------------------
class StockAdjustment(models.Model):
    """
    재고 변동 1건 = 1행. 생성 후 수정하지 않는다.
    quantity 는 부호 있는 변동량(+ 입고/반품, - 출고).
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        db_column="adjustment_id",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="adjustments",
        db_column="product_id",
    )
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        related_name="stock_adjustments",
        db_column="tenant_id",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_adjustments",
    )

    quantity = models.IntegerField()
    reason = models.CharField(max_length=255)
    previous_stock = models.IntegerField()
    new_stock = models.IntegerField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "stock_adjustments"
        indexes = [
            models.Index(fields=["product", "created_at"], name="stock_adj_product_idx"),
            models.Index(fields=["tenant", "created_at"], name="stock_adj_tenant_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.product_id} {self.quantity:+d} ({self.previous_stock}→{self.new_stock})"
