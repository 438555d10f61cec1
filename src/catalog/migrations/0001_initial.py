import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("description", models.TextField(blank=True, default="", verbose_name="description")),
                ("stock_kg", models.DecimalField(decimal_places=3, default=Decimal("0.000"), help_text="May go negative: a signal for replenishment, not an error.", max_digits=14, verbose_name="stock (kg)")),
                ("price_per_bag", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))], verbose_name="price per bag")),
                ("bag_weight_kg", models.DecimalField(decimal_places=3, max_digits=8, validators=[django.core.validators.MinValueValidator(Decimal("0.001"))], verbose_name="bag weight (kg)")),
                ("stock_version", models.PositiveIntegerField(default=0, editable=False, help_text="Bumped on every stock write; used for compare-and-set updates.", verbose_name="stock version")),
            ],
            options={
                "verbose_name": "product",
                "verbose_name_plural": "products",
                "ordering": ["name"],
            },
        ),
    ]
