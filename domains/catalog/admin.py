from __future__ import annotations

from django.contrib import admin

from .models import Product, StockAdjustment


# -------- Inline: StockAdjustment (읽기 전용) -----------------------
class StockAdjustmentInline(admin.TabularInline):
    model = StockAdjustment
    extra = 0
    can_delete = False
    fields = ("created_at", "quantity", "previous_stock", "new_stock", "reason", "user")
    readonly_fields = fields
    ordering = ("-created_at",)

    def has_add_permission(self, request, obj=None):
        return False


# -------- Product ---------------------------------------------------
@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    inlines = [StockAdjustmentInline]
    list_display = ("name", "tenant", "sku", "stock", "is_active", "updated_at")
    list_filter = ("is_active", "tenant")
    search_fields = ("name", "sku")
    readonly_fields = ("id", "created_at", "updated_at")


# -------- StockAdjustment (감사 로그: 수정 불가) ---------------------
@admin.register(StockAdjustment)
class StockAdjustmentAdmin(admin.ModelAdmin):
    list_display = ("created_at", "product", "quantity", "previous_stock", "new_stock", "reason")
    list_filter = ("tenant",)
    search_fields = ("reason",)
    ordering = ("-created_at",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
