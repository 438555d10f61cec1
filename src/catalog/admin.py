"""Admin configuration for the catalog app."""
from django.contrib import admin

from .models import Product


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "price_per_bag",
        "bag_weight_kg",
        "stock_kg",
        "updated_at",
    )
    search_fields = ("name", "description")
    readonly_fields = ("id", "stock_version", "created_at", "updated_at")
    fieldsets = (
        (None, {
            "fields": ("name", "description"),
        }),
        ("Pricing", {
            "fields": ("price_per_bag", "bag_weight_kg"),
        }),
        ("Stock", {
            "fields": ("stock_kg", "stock_version"),
        }),
        ("Metadata", {
            "classes": ("collapse",),
            "fields": ("id", "created_at", "updated_at"),
        }),
    )
