"""Models for the catalog app (bagged products and their stock)."""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------

class Product(TimeStampedModel):
    """A bagged commodity sold by the bag, stocked in kilograms."""

    name = models.CharField("name", max_length=255)
    description = models.TextField("description", blank=True, default="")
    stock_kg = models.DecimalField(
        "stock (kg)",
        max_digits=14,
        decimal_places=3,
        default=Decimal("0.000"),
        help_text="May go negative: a signal for replenishment, not an error.",
    )
    price_per_bag = models.DecimalField(
        "price per bag",
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    bag_weight_kg = models.DecimalField(
        "bag weight (kg)",
        max_digits=8,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0.001"))],
    )
    stock_version = models.PositiveIntegerField(
        "stock version",
        default=0,
        editable=False,
        help_text="Bumped on every stock write; used for compare-and-set updates.",
    )

    class Meta:
        verbose_name = "product"
        verbose_name_plural = "products"
        ordering = ["name"]

    def __str__(self):
        return self.name

    # ------------------------------------------------------------------
    # Computed properties
    # ------------------------------------------------------------------

    @property
    def stock_bags(self) -> Decimal:
        """Current stock expressed in bags (may be fractional)."""
        if self.bag_weight_kg:
            return self.stock_kg / self.bag_weight_kg
        return Decimal("0")

    @property
    def needs_replenishment(self) -> bool:
        return self.stock_kg < 0
