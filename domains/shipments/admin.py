from __future__ import annotations

import json

from django.contrib import admin
from django.utils.html import format_html

from . import models


class ReadOnlyAdminMixin:
    """감사용 테이블: 화면에서 추가/수정 불가"""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


# ---------- TrackingUpdate ----------
@admin.register(models.TrackingUpdate)
class TrackingUpdateAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("order", "status", "provider", "tracking_number", "location", "timestamp")
    list_filter = ("status", "provider")
    search_fields = ("tracking_number", "order__id")
    ordering = ("-timestamp",)
    list_select_related = ("order",)


# ---------- OrderStatusHistory ----------
@admin.register(models.OrderStatusHistory)
class OrderStatusHistoryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("order", "position", "status", "status_code", "is_current", "timestamp")
    list_filter = ("is_current",)
    search_fields = ("order__id", "status")
    ordering = ("order", "position")


# ---------- OrderFinancialInfo ----------
@admin.register(models.OrderFinancialInfo)
class OrderFinancialInfoAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("order", "total_amount", "shipping_cost", "payment_status", "currency", "updated_at")
    list_filter = ("payment_status", "currency")
    search_fields = ("order__id",)


# ---------- CarrierTrackingDetail ----------
@admin.register(models.CarrierTrackingDetail)
class CarrierTrackingDetailAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("order", "provider", "tracking_number", "status", "current_location", "created_at")
    list_filter = ("provider",)
    search_fields = ("tracking_number",)
    readonly_fields = ("raw_payload_pretty",)
    exclude = ("raw_payload",)
    ordering = ("-created_at",)

    def raw_payload_pretty(self, obj):
        if obj.raw_payload is None:
            return "-"
        body = json.dumps(obj.raw_payload, ensure_ascii=False, indent=2)
        return format_html("<pre style='white-space:pre-wrap'>{}</pre>", body)

    raw_payload_pretty.short_description = "Raw payload"
