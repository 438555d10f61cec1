"""Models for the customers app."""
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class CustomerStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    RISK = "risk", "Risk"
    VIP = "vip", "VIP"


class Customer(TimeStampedModel):
    """A retail shop buying on cash or credit from the distributor."""

    Status = CustomerStatus

    name = models.CharField("name", max_length=200)
    shop_name = models.CharField("shop name", max_length=200)
    phone = models.CharField("phone", max_length=20, db_index=True)
    location_geo = models.CharField(
        "location",
        max_length=255,
        blank=True,
        default="",
    )
    trust_score = models.PositiveSmallIntegerField(
        "trust score",
        default=50,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    total_debt = models.DecimalField(
        "total debt",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    status = models.CharField(
        "status",
        max_length=10,
        choices=CustomerStatus.choices,
        default=CustomerStatus.ACTIVE,
        db_index=True,
        help_text="Stored status. Debt above the risk threshold classifies as risk regardless.",
    )

    class Meta:
        verbose_name = "customer"
        verbose_name_plural = "customers"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.shop_name})"
