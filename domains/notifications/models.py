from __future__ import annotations

import uuid

from django.db import models


class NotificationCategory(models.TextChoices):
    DELIVERY = "DELIVERY", "Delivery"
    RETURN = "RETURN", "Return"
    RESCHEDULE = "RESCHEDULE", "Reschedule"
    SYSTEM = "SYSTEM", "System"


class Notification(models.Model):
    """대시보드 알림. 외부 알림 서브시스템이 읽어 간다."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        related_name="notifications",
        db_column="tenant_id",
    )
    title = models.CharField(max_length=120)
    description = models.TextField(blank=True)
    category = models.CharField(
        max_length=20,
        choices=NotificationCategory.choices,
        default=NotificationCategory.SYSTEM,
    )
    # 주문이 지워져도 알림은 남긴다 (FK 대신 식별자만 보관)
    order_id = models.UUIDField(null=True, blank=True, db_index=True)
    is_read = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "notifications"
        indexes = [
            models.Index(fields=["tenant", "is_read", "created_at"], name="notif_tenant_read_idx"),
        ]

    def __str__(self) -> str:
        return f"[{self.category}] {self.title}"
