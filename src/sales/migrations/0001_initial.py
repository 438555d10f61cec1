import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("customers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="total amount")),
                ("payment_type", models.CharField(choices=[("cash", "Cash"), ("credit", "Credit")], db_index=True, max_length=10, verbose_name="payment type")),
                ("is_paid", models.BooleanField(default=False, verbose_name="paid")),
                ("order_date", models.DateField(db_index=True, default=django.utils.timezone.localdate, verbose_name="order date")),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="orders", to="customers.customer", verbose_name="customer")),
            ],
            options={
                "verbose_name": "order",
                "verbose_name_plural": "orders",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("quantity_bags", models.PositiveIntegerField(verbose_name="quantity (bags)")),
                ("quantity_kg", models.DecimalField(decimal_places=3, help_text="quantity_bags x bag weight at order time.", max_digits=14, verbose_name="quantity (kg)")),
                ("price_per_bag", models.DecimalField(decimal_places=2, help_text="Product price at order time.", max_digits=12, verbose_name="price per bag")),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="subtotal")),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="sales.order", verbose_name="order")),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="order_items", to="catalog.product", verbose_name="product")),
            ],
            options={
                "verbose_name": "order item",
                "verbose_name_plural": "order items",
                "ordering": ["created_at"],
            },
        ),
    ]
