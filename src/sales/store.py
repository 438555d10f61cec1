"""Data-store contract consumed by the order processor and the analytics engine.

``OrderStore`` describes the reads and writes the core needs; the core never
touches the ORM directly. ``DjangoOrderStore`` is the production
implementation. One instance is built at process start (see
``api.wiring``) and passed to every service function.
"""
from __future__ import annotations

import contextlib
import functools
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db import DatabaseError, transaction
from django.db.models import Count, F, Max, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from catalog.models import Product
from core.exceptions import NotFound, StockConflict, StoreUnavailable
from customers.models import Customer
from sales.models import Order, OrderItem, PaymentType

logger = logging.getLogger("m7")


# ---------------------------------------------------------------------------
# Derived rows
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DailySalesRow:
    order_date: date
    total_orders: int
    total_sales: Decimal
    cash_sales: Decimal
    credit_sales: Decimal


@dataclass(frozen=True)
class ProductPerformanceRow:
    product_id: str
    name: str
    times_ordered: int
    total_bags_sold: int
    total_kg_sold: Decimal
    total_revenue: Decimal


@dataclass(frozen=True)
class CustomerSummary:
    id: str
    name: str
    shop_name: str
    phone: str
    trust_score: int
    total_debt: Decimal
    status: str
    total_orders: int
    cash_sales: Decimal
    credit_sales: Decimal
    last_order_date: Optional[date]


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------

class OrderStore(ABC):
    """Abstract store. Implementations raise ``StoreUnavailable`` on transient
    failures and ``NotFound`` for missing single rows."""

    #: True when ``atomic()`` gives a real all-or-nothing transaction.
    supports_transactions = False

    def atomic(self):
        """Context manager grouping writes; a no-op without transactions."""
        return contextlib.nullcontext()

    # -- reads ---------------------------------------------------------------

    @abstractmethod
    def fetch_products(self, ids) -> list:
        """Products whose id is in *ids*; unknown ids are simply absent."""

    @abstractmethod
    def fetch_customer(self, customer_id):
        ...

    @abstractmethod
    def fetch_customers(self) -> list:
        ...

    @abstractmethod
    def count_customers(self) -> int:
        ...

    @abstractmethod
    def fetch_orders(self, limit=None, payment_type=None, is_paid=None) -> list:
        """Orders newest first; ``limit=None`` returns all of them.

        *payment_type* and *is_paid* narrow the result when given."""

    @abstractmethod
    def fetch_order(self, order_id):
        ...

    @abstractmethod
    def fetch_order_items(self, order_id) -> list:
        ...

    @abstractmethod
    def fetch_daily_sales(self, limit) -> list:
        """``DailySalesRow`` list, newest day first."""

    @abstractmethod
    def fetch_product_performance(self) -> list:
        """``ProductPerformanceRow`` list, highest revenue first."""

    @abstractmethod
    def fetch_customer_summaries(self) -> list:
        """``CustomerSummary`` list, highest debt first."""

    # -- writes --------------------------------------------------------------

    @abstractmethod
    def insert_order(self, **record):
        """Persist an order and return it with its generated id."""

    @abstractmethod
    def insert_order_items(self, records) -> list:
        ...

    @abstractmethod
    def delete_order(self, order_id) -> None:
        ...

    @abstractmethod
    def update_product_stock(self, product_id, new_stock, expected_version=None) -> None:
        """Set ``stock_kg``. With *expected_version*, only if the product's
        ``stock_version`` still matches (``StockConflict`` otherwise)."""

    @abstractmethod
    def update_customer_debt(self, customer_id, total_debt) -> None:
        ...

    @abstractmethod
    def mark_order_paid(self, order_id):
        ...


# ---------------------------------------------------------------------------
# Django implementation
# ---------------------------------------------------------------------------

def _translate_db_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.warning("Store call %s failed: %s", func.__name__, exc)
            raise StoreUnavailable(str(exc)) from exc
    return wrapper


def _as_uuid(value):
    try:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


class DjangoOrderStore(OrderStore):
    """``OrderStore`` backed by the Django ORM (default database)."""

    supports_transactions = True

    def __init__(self, using="default"):
        self.using = using

    def atomic(self):
        return transaction.atomic(using=self.using)

    # -- reads ---------------------------------------------------------------

    @_translate_db_errors
    def fetch_products(self, ids) -> list:
        pks = [pk for pk in (_as_uuid(i) for i in ids) if pk is not None]
        if not pks:
            return []
        return list(Product.objects.using(self.using).filter(pk__in=pks))

    @_translate_db_errors
    def fetch_customer(self, customer_id):
        pk = _as_uuid(customer_id)
        customer = Customer.objects.using(self.using).filter(pk=pk).first() if pk else None
        if customer is None:
            raise NotFound("Customer", [customer_id])
        return customer

    @_translate_db_errors
    def fetch_customers(self) -> list:
        return list(Customer.objects.using(self.using).order_by("-created_at"))

    @_translate_db_errors
    def count_customers(self) -> int:
        return Customer.objects.using(self.using).count()

    @_translate_db_errors
    def fetch_orders(self, limit=None, payment_type=None, is_paid=None) -> list:
        qs = Order.objects.using(self.using).select_related("customer").order_by("-created_at")
        if payment_type is not None:
            qs = qs.filter(payment_type=payment_type)
        if is_paid is not None:
            qs = qs.filter(is_paid=is_paid)
        if limit is not None:
            qs = qs[:limit]
        return list(qs)

    @_translate_db_errors
    def fetch_order(self, order_id):
        pk = _as_uuid(order_id)
        order = (
            Order.objects.using(self.using).select_related("customer").filter(pk=pk).first()
            if pk else None
        )
        if order is None:
            raise NotFound("Order", [order_id])
        return order

    @_translate_db_errors
    def fetch_order_items(self, order_id) -> list:
        return list(
            OrderItem.objects.using(self.using)
            .filter(order_id=order_id)
            .select_related("product")
            .order_by("created_at")
        )

    @_translate_db_errors
    def fetch_daily_sales(self, limit) -> list:
        zero = Value(Decimal("0.00"))
        rows = (
            Order.objects.using(self.using)
            .values("order_date")
            .annotate(
                total_orders=Count("id"),
                total_sales=Coalesce(Sum("total_amount"), zero),
                cash_sales=Coalesce(
                    Sum("total_amount", filter=Q(payment_type=PaymentType.CASH)), zero,
                ),
                credit_sales=Coalesce(
                    Sum("total_amount", filter=Q(payment_type=PaymentType.CREDIT)), zero,
                ),
            )
            .order_by("-order_date")[:limit]
        )
        return [DailySalesRow(**row) for row in rows]

    @_translate_db_errors
    def fetch_product_performance(self) -> list:
        products = (
            Product.objects.using(self.using)
            .annotate(
                times_ordered=Count("order_items__order", distinct=True),
                bags_sold=Coalesce(Sum("order_items__quantity_bags"), Value(0)),
                kg_sold=Coalesce(Sum("order_items__quantity_kg"), Value(Decimal("0.000"))),
                revenue=Coalesce(Sum("order_items__subtotal"), Value(Decimal("0.00"))),
            )
            .order_by("-revenue", "name")
        )
        return [
            ProductPerformanceRow(
                product_id=str(p.pk),
                name=p.name,
                times_ordered=p.times_ordered,
                total_bags_sold=p.bags_sold,
                total_kg_sold=p.kg_sold,
                total_revenue=p.revenue,
            )
            for p in products
        ]

    @_translate_db_errors
    def fetch_customer_summaries(self) -> list:
        zero = Value(Decimal("0.00"))
        customers = (
            Customer.objects.using(self.using)
            .annotate(
                order_count=Count("orders"),
                cash_total=Coalesce(
                    Sum("orders__total_amount", filter=Q(orders__payment_type=PaymentType.CASH)), zero,
                ),
                credit_total=Coalesce(
                    Sum("orders__total_amount", filter=Q(orders__payment_type=PaymentType.CREDIT)), zero,
                ),
                last_order=Max("orders__order_date"),
            )
            .order_by("-total_debt", "name")
        )
        return [
            CustomerSummary(
                id=str(c.pk),
                name=c.name,
                shop_name=c.shop_name,
                phone=c.phone,
                trust_score=c.trust_score,
                total_debt=c.total_debt,
                status=c.status,
                total_orders=c.order_count,
                cash_sales=c.cash_total,
                credit_sales=c.credit_total,
                last_order_date=c.last_order,
            )
            for c in customers
        ]

    # -- writes --------------------------------------------------------------

    @_translate_db_errors
    def insert_order(self, **record):
        return Order.objects.using(self.using).create(**record)

    @_translate_db_errors
    def insert_order_items(self, records) -> list:
        return OrderItem.objects.using(self.using).bulk_create(
            [OrderItem(**record) for record in records]
        )

    @_translate_db_errors
    def delete_order(self, order_id) -> None:
        Order.objects.using(self.using).filter(pk=order_id).delete()

    @_translate_db_errors
    def update_product_stock(self, product_id, new_stock, expected_version=None) -> None:
        qs = Product.objects.using(self.using).filter(pk=product_id)
        if expected_version is not None:
            qs = qs.filter(stock_version=expected_version)
        updated = qs.update(
            stock_kg=new_stock,
            stock_version=F("stock_version") + 1,
            updated_at=timezone.now(),
        )
        if updated:
            return
        if expected_version is not None and Product.objects.using(self.using).filter(pk=product_id).exists():
            raise StockConflict(product_id)
        raise NotFound("Product", [product_id])

    @_translate_db_errors
    def update_customer_debt(self, customer_id, total_debt) -> None:
        pk = _as_uuid(customer_id)
        updated = pk and Customer.objects.using(self.using).filter(pk=pk).update(
            total_debt=total_debt,
            updated_at=timezone.now(),
        )
        if not updated:
            raise NotFound("Customer", [customer_id])

    @_translate_db_errors
    def mark_order_paid(self, order_id):
        pk = _as_uuid(order_id)
        updated = pk and Order.objects.using(self.using).filter(pk=pk).update(
            is_paid=True,
            updated_at=timezone.now(),
        )
        if not updated:
            raise NotFound("Order", [order_id])
        return self.fetch_order(order_id)
