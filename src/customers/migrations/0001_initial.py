import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("shop_name", models.CharField(max_length=200, verbose_name="shop name")),
                ("phone", models.CharField(db_index=True, max_length=20, verbose_name="phone")),
                ("location_geo", models.CharField(blank=True, default="", max_length=255, verbose_name="location")),
                ("trust_score", models.PositiveSmallIntegerField(default=50, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)], verbose_name="trust score")),
                ("total_debt", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))], verbose_name="total debt")),
                ("status", models.CharField(choices=[("active", "Active"), ("risk", "Risk"), ("vip", "VIP")], db_index=True, default="active", help_text="Stored status. Debt above the risk threshold classifies as risk regardless.", max_length=10, verbose_name="status")),
            ],
            options={
                "verbose_name": "customer",
                "verbose_name_plural": "customers",
                "ordering": ["-created_at"],
            },
        ),
    ]
