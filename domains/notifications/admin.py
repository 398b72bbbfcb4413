from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("created_at", "tenant", "category", "title", "order_id", "is_read")
    list_filter = ("category", "is_read")
    search_fields = ("title", "description")
    ordering = ("-created_at",)
