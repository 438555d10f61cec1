"""Models for the sales app."""
from decimal import Decimal

from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


class PaymentType(models.TextChoices):
    CASH = "cash", "Cash"
    CREDIT = "credit", "Credit"


# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------

class Order(TimeStampedModel):
    """A priced order placed by a customer.

    ``total_amount`` is the sum of the line subtotals at creation time and is
    never recomputed afterwards.
    """

    PaymentType = PaymentType

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name="customer",
    )
    total_amount = models.DecimalField(
        "total amount",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    payment_type = models.CharField(
        "payment type",
        max_length=10,
        choices=PaymentType.choices,
        db_index=True,
    )
    is_paid = models.BooleanField("paid", default=False)
    order_date = models.DateField("order date", default=timezone.localdate, db_index=True)

    class Meta:
        verbose_name = "order"
        verbose_name_plural = "orders"
        ordering = ["-created_at"]

    def __str__(self):
        return f"Order {self.invoice_number}"

    @property
    def invoice_number(self) -> str:
        return str(self.pk)[:8].upper()


# ---------------------------------------------------------------------------
# OrderItem
# ---------------------------------------------------------------------------

class OrderItem(TimeStampedModel):
    """One order line with the product price and bag weight snapshotted."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name="order",
    )
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
        verbose_name="product",
    )
    quantity_bags = models.PositiveIntegerField("quantity (bags)")
    quantity_kg = models.DecimalField(
        "quantity (kg)",
        max_digits=14,
        decimal_places=3,
        help_text="quantity_bags x bag weight at order time.",
    )
    price_per_bag = models.DecimalField(
        "price per bag",
        max_digits=12,
        decimal_places=2,
        help_text="Product price at order time.",
    )
    subtotal = models.DecimalField("subtotal", max_digits=14, decimal_places=2)

    class Meta:
        verbose_name = "order item"
        verbose_name_plural = "order items"
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.quantity_bags} x {self.product} ({self.order})"

    @property
    def product_name(self) -> str:
        return self.product.name
