"""Admin configuration for the sales app."""
from django.contrib import admin

from .models import Order, OrderItem


# ---------------------------------------------------------------------------
# Inlines
# ---------------------------------------------------------------------------

class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("product", "quantity_bags", "quantity_kg", "price_per_bag", "subtotal")
    readonly_fields = fields
    can_delete = False


# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------

@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "customer",
        "total_amount",
        "payment_type",
        "is_paid",
        "order_date",
    )
    list_filter = ("payment_type", "is_paid")
    search_fields = ("customer__name", "customer__shop_name")
    readonly_fields = ("id", "total_amount", "created_at", "updated_at")
    list_select_related = ("customer",)
    date_hierarchy = "order_date"
    inlines = [OrderItemInline]
