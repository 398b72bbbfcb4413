# domains/orders/admin.py
from django.contrib import admin, messages

from domains.shipments.services import reconcile_order
from domains.shipments.tasks import reconcile_single_order

from .models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "tenant",
        "product",
        "quantity",
        "status",
        "shipping_provider",
        "tracking_number",
        "delivered_at",
        "created_at",
    )
    list_filter = ("status", "shipping_provider", "tenant")
    search_fields = ("id", "tracking_number", "customer_name", "customer_phone")
    ordering = ("-created_at",)
    list_select_related = ("tenant", "product")
    readonly_fields = ("delivered_at", "created_at", "updated_at")
    actions = ("sync_tracking_now", "queue_tracking_sync")

    @admin.action(description="Sync tracking now")
    def sync_tracking_now(self, request, queryset):
        ok = failed = 0
        for order in queryset.select_related("tenant"):
            result = reconcile_order(order)
            if result.success:
                ok += 1
            else:
                failed += 1
                self.message_user(request, f"{order.pk}: {result.error}", level=messages.WARNING)
        self.message_user(request, f"Tracking synced: {ok} ok, {failed} failed")

    @admin.action(description="Queue tracking sync (background)")
    def queue_tracking_sync(self, request, queryset):
        ids = list(queryset.values_list("id", flat=True))
        for order_id in ids:
            reconcile_single_order.delay(str(order_id))
        self.message_user(request, f"Queued {len(ids)} order(s) for tracking sync")
