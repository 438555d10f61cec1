"""Admin configuration for the customers app."""
from django.contrib import admin

from .models import Customer
from .services import classify_customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "shop_name",
        "phone",
        "trust_score",
        "total_debt",
        "status",
        "risk_status",
        "created_at",
    )
    list_filter = ("status",)
    search_fields = ("name", "shop_name", "phone")
    readonly_fields = ("id", "created_at", "updated_at")
    date_hierarchy = "created_at"
    fieldsets = (
        (None, {
            "fields": ("name", "shop_name", "phone", "location_geo"),
        }),
        ("Credit", {
            "fields": ("trust_score", "total_debt", "status"),
        }),
        ("Metadata", {
            "classes": ("collapse",),
            "fields": ("id", "created_at", "updated_at"),
        }),
    )

    @admin.display(description="classified")
    def risk_status(self, obj):
        return classify_customer(obj).label
