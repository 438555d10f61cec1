"""Business-logic / service functions for the sales app.

Every function takes the data store as its first argument; the store is
built once at process start and injected by the caller.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.conf import settings

from catalog.services import product_key, resolve_products
from core.exceptions import (
    DistributionError,
    EmptyOrder,
    InvalidQuantity,
    PartialCommit,
    StockConflict,
)
from sales.models import PaymentType

logger = logging.getLogger("m7")


@dataclass(frozen=True)
class PricedLine:
    """An order line priced against the product snapshot taken at resolve time."""

    product: object
    quantity_bags: int
    quantity_kg: Decimal
    price_per_bag: Decimal
    subtotal: Decimal


# ---------------------------------------------------------------------------
# Validation / pricing helpers
# ---------------------------------------------------------------------------

def _normalize_lines(items) -> list:
    """Return ``[(product_id, quantity_bags)]`` or raise on a malformed request."""
    lines = []
    for item in items or ():
        if isinstance(item, dict):
            product_id, qty = item.get("product_id"), item.get("quantity_bags")
        else:
            product_id, qty = item
        if isinstance(qty, bool):
            raise InvalidQuantity(f"Invalid quantity for product {product_id}: {qty!r}")
        try:
            bags = Decimal(str(qty))
        except (InvalidOperation, ValueError):
            raise InvalidQuantity(f"Invalid quantity for product {product_id}: {qty!r}")
        if not bags.is_finite() or bags <= 0 or bags != bags.to_integral_value():
            raise InvalidQuantity(
                f"Quantity for product {product_id} must be a whole number of bags above zero, got {qty!r}."
            )
        lines.append((product_id, int(bags)))
    if not lines:
        raise EmptyOrder("An order needs at least one item.")
    return lines


def price_lines(lines, products) -> list:
    """Compute kg and subtotal of every line from the resolved product records.

    ``products`` maps ``product_key(product_id)`` to the snapshot; the same snapshot
    is used later for the stock decrement.
    """
    priced = []
    for product_id, bags in lines:
        product = products[product_key(product_id)]
        price = Decimal(str(product.price_per_bag))
        weight = Decimal(str(product.bag_weight_kg))
        priced.append(PricedLine(
            product=product,
            quantity_bags=bags,
            quantity_kg=bags * weight,
            price_per_bag=price,
            subtotal=bags * price,
        ))
    return priced


def _stock_decrements(priced) -> "OrderedDict":
    """Group kg to deduct per product, keeping first-seen order."""
    decrements = OrderedDict()
    for line in priced:
        key = str(line.product.pk)
        product, kg = decrements.get(key, (line.product, Decimal("0")))
        decrements[key] = (product, kg + line.quantity_kg)
    return decrements


# ---------------------------------------------------------------------------
# create_order
# ---------------------------------------------------------------------------

def create_order(store, customer_id, payment_type, items, order_date=None):
    """Price, persist and deduct stock for a new order.

    Parameters
    ----------
    store : sales.store.OrderStore
    customer_id : uuid or str
    payment_type : "cash" | "credit"
    items : iterable of ``(product_id, quantity_bags)`` or dicts with those keys
    order_date : date, optional
        Defaults to today.

    Returns
    -------
    Order
        The created order with its generated id and total.

    Raises
    ------
    EmptyOrder, InvalidQuantity, NotFound
        Before any write.
    StockConflict
        Transactional stores only; nothing was committed.
    PartialCommit
        Non-transactional stores only; the order and items stand but some
        stock updates failed.
    StoreUnavailable
        Propagated as is.

    Not idempotent: calling twice creates two orders and deducts stock twice.
    """
    if payment_type not in PaymentType.values:
        raise ValueError(f"Unknown payment type {payment_type!r}.")

    lines = _normalize_lines(items)
    customer = store.fetch_customer(customer_id)
    products = resolve_products(store, lines)
    priced = price_lines(lines, products)
    total_amount = sum((line.subtotal for line in priced), Decimal("0"))

    order_record = {
        "customer_id": customer.pk,
        "total_amount": total_amount,
        "payment_type": payment_type,
        "is_paid": payment_type == PaymentType.CASH,
    }
    if order_date is not None:
        order_record["order_date"] = order_date

    if store.supports_transactions:
        try:
            with store.atomic():
                order = _write_order(store, order_record, priced, versioned=True)
        except StockConflict as exc:
            logger.warning("Order for customer %s rolled back: %s", customer.pk, exc)
            raise
    else:
        order = _write_order_best_effort(store, order_record, priced)

    logger.info(
        "Order %s created for customer %s: %d item(s), total %s (%s)",
        order.pk, customer.pk, len(priced), total_amount, payment_type,
    )
    return order


def _item_records(order, priced) -> list:
    return [
        {
            "order_id": order.pk,
            "product_id": line.product.pk,
            "quantity_bags": line.quantity_bags,
            "quantity_kg": line.quantity_kg,
            "price_per_bag": line.price_per_bag,
            "subtotal": line.subtotal,
        }
        for line in priced
    ]


def _write_order(store, order_record, priced, versioned):
    """All writes in sequence; any failure aborts the surrounding transaction."""
    order = store.insert_order(**order_record)
    store.insert_order_items(_item_records(order, priced))
    for product_id, (product, kg) in _stock_decrements(priced).items():
        store.update_product_stock(
            product.pk,
            Decimal(str(product.stock_kg)) - kg,
            expected_version=getattr(product, "stock_version", None) if versioned else None,
        )
    return order


def _write_order_best_effort(store, order_record, priced):
    """Write path for stores without transactions.

    An order is never left without items: if the item insert fails the order
    row is deleted again. Stock update failures do not undo the order; they
    are collected and raised together as ``PartialCommit``.
    """
    order = store.insert_order(**order_record)
    try:
        store.insert_order_items(_item_records(order, priced))
    except DistributionError:
        logger.error("Item insert failed for order %s; removing the order row.", order.pk, exc_info=True)
        try:
            store.delete_order(order.pk)
        except DistributionError:
            logger.error("Could not remove order %s after failed item insert.", order.pk, exc_info=True)
        raise

    failures = {}
    for product_id, (product, kg) in _stock_decrements(priced).items():
        try:
            # Last-writer-wins: based on the stock observed at resolve time.
            store.update_product_stock(product.pk, Decimal(str(product.stock_kg)) - kg)
        except DistributionError as exc:
            failures[product_id] = exc

    if failures:
        logger.error(
            "Order %s committed but stock update failed for %s",
            order.pk, ", ".join(sorted(failures)),
            extra={"order_id": str(order.pk)},
        )
        raise PartialCommit(order, failures)
    return order


# ---------------------------------------------------------------------------
# Payment / listing
# ---------------------------------------------------------------------------

def mark_order_paid(store, order_id):
    """Flag an order as paid. Paying an already paid order is a no-op."""
    order = store.mark_order_paid(order_id)
    logger.info("Order %s marked as paid", order_id)
    return order


def list_orders(store, limit=None, payment_type=None, is_paid=None) -> list:
    """Most recent orders first; default limit from ``ORDER_LIST_LIMIT``."""
    if limit is None:
        limit = getattr(settings, "ORDER_LIST_LIMIT", 50)
    return store.fetch_orders(limit=limit, payment_type=payment_type, is_paid=is_paid)


def get_order_with_items(store, order_id):
    """Return ``(order, customer, items)`` for invoice rendering."""
    order = store.fetch_order(order_id)
    customer = store.fetch_customer(order.customer_id)
    items = store.fetch_order_items(order.pk)
    return order, customer, items
