"""Invoice layout for a priced order.

``render_invoice`` is a pure function from ``(order, customer, items)`` to
an ``InvoiceDocument``: an ordered sequence of typed blocks with every value
already formatted for display. Turning the blocks into HTML / PDF is left to
``core.pdf`` so the layout can be checked without producing files.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from django.conf import settings
from django.utils import dateformat, numberformat
from django.utils.dateparse import parse_date, parse_datetime

from sales.models import PaymentType

# ---------------------------------------------------------------------------
# Block types, in layout order
# ---------------------------------------------------------------------------

BLOCK_HEADER = "HEADER"
BLOCK_META = "META"
BLOCK_BILLER = "BILLER"
BLOCK_RECIPIENT = "RECIPIENT"
BLOCK_ITEM_TABLE = "ITEM_TABLE"
BLOCK_TOTAL = "TOTAL"
BLOCK_PAYMENT = "PAYMENT"
BLOCK_DUE_DATE = "DUE_DATE"
BLOCK_FOOTER = "FOOTER"

ITEM_COLUMNS = ("Product", "Bags", "Weight", "Price/Bag", "Subtotal")

# Indian digit grouping: 12,34,567
_GROUPING = (3, 2, 0)

DEFAULT_ISSUER = {
    "name": "M7 Distribution",
    "tagline": "Intelligent B2B Distribution Platform",
    "address": "Azadpur Mandi, Delhi, India",
    "phone": "+91-9876543210",
    "gst": "GST123456789",
}


@dataclass(frozen=True)
class Block:
    """One layout instruction. ``lines`` for text blocks, ``columns``/``rows`` for tables."""

    kind: str
    title: str = ""
    lines: tuple = ()
    columns: tuple = ()
    rows: tuple = ()
    tone: str = ""


@dataclass(frozen=True)
class InvoiceDocument:
    number: str
    filename: str
    order_date: date
    due_date: Optional[date]
    blocks: tuple = field(default_factory=tuple)

    def block(self, kind) -> Optional[Block]:
        for candidate in self.blocks:
            if candidate.kind == kind:
                return candidate
        return None

    @property
    def kinds(self) -> tuple:
        return tuple(b.kind for b in self.blocks)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_amount(value) -> str:
    """Locale-grouped number with at most three fraction digits and no
    trailing zeros (``2500.50`` prints as ``2,500.5``)."""
    amount = Decimal(str(value)).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP).normalize()
    return numberformat.format(
        amount,
        ".",
        grouping=_GROUPING,
        thousand_sep=",",
        force_grouping=True,
    )


def format_money(value) -> str:
    symbol = getattr(settings, "CURRENCY_SYMBOL", "₹")
    return f"{symbol}{format_amount(value)}"


def format_weight(value) -> str:
    return f"{Decimal(str(value)).quantize(Decimal('0.01'))} kg"


def format_local_date(value: date) -> str:
    return dateformat.format(value, "j/n/Y")


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    parsed = parse_date(text[:10]) or (parse_datetime(text) and parse_datetime(text).date())
    if parsed is None:
        raise ValueError(f"Unreadable order date {value!r}")
    return parsed


def invoice_number(order) -> str:
    return str(order.pk)[:8].upper()


def invoice_filename(order, customer) -> str:
    name = re.sub(r"\s+", "_", customer.name)
    return f"M7_Invoice_{invoice_number(order)}_{name}.pdf"


def due_date_for(order) -> Optional[date]:
    """Order date plus the credit term, only for unpaid credit orders."""
    if order.payment_type == PaymentType.CREDIT and not order.is_paid:
        days = getattr(settings, "INVOICE_DUE_DAYS", 7)
        return _as_date(order.order_date) + timedelta(days=days)
    return None


def _item_product_name(item) -> str:
    name = getattr(item, "product_name", None)
    if name:
        return name
    return item.product.name


# ---------------------------------------------------------------------------
# render_invoice
# ---------------------------------------------------------------------------

def render_invoice(order, customer, items, issuer=None) -> InvoiceDocument:
    """Lay out the invoice for one order.

    The total line shows ``order.total_amount`` exactly as persisted; it is
    not recomputed from the items.
    """
    issuer = {**DEFAULT_ISSUER, **(issuer or getattr(settings, "INVOICE_ISSUER", {}) or {})}
    number = invoice_number(order)
    order_date = _as_date(order.order_date)
    due_date = due_date_for(order)

    blocks = [
        Block(BLOCK_HEADER, title="INVOICE", lines=(issuer["name"], issuer["tagline"])),
        Block(BLOCK_META, lines=(
            f"Invoice #: {number}",
            f"Date: {format_local_date(order_date)}",
        )),
    ]

    biller_lines = [issuer["name"], issuer["address"], issuer["phone"]]
    if issuer.get("gst"):
        biller_lines.append(f"GST: {issuer['gst']}")
    blocks.append(Block(BLOCK_BILLER, title="From:", lines=tuple(biller_lines)))

    recipient_lines = [customer.name, customer.shop_name, customer.phone]
    if getattr(customer, "location_geo", ""):
        recipient_lines.append(customer.location_geo)
    blocks.append(Block(BLOCK_RECIPIENT, title="Bill To:", lines=tuple(recipient_lines)))

    rows = tuple(
        (
            _item_product_name(item),
            str(item.quantity_bags),
            format_weight(item.quantity_kg),
            format_money(item.price_per_bag),
            format_money(item.subtotal),
        )
        for item in items
    )
    blocks.append(Block(BLOCK_ITEM_TABLE, columns=ITEM_COLUMNS, rows=rows))
    blocks.append(Block(BLOCK_TOTAL, title="TOTAL:", lines=(format_money(order.total_amount),)))

    paid_label = "PAID" if order.is_paid else "UNPAID"
    blocks.append(Block(
        BLOCK_PAYMENT,
        title=paid_label,
        lines=(f"Payment Type: {str(order.payment_type).upper()}",),
        tone="paid" if order.is_paid else "unpaid",
    ))

    if due_date is not None:
        blocks.append(Block(BLOCK_DUE_DATE, title="Due Date:", lines=(format_local_date(due_date),)))

    blocks.append(Block(BLOCK_FOOTER, lines=(
        "Thank you for your business! For queries, contact us at the above details.",
        f"Generated by {issuer['name']} Platform",
    )))

    return InvoiceDocument(
        number=number,
        filename=invoice_filename(order, customer),
        order_date=order_date,
        due_date=due_date,
        blocks=tuple(blocks),
    )
