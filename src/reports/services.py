"""Service functions for the reports app.

The dashboard figures are computed by ``aggregate_dashboard_stats`` from
plain collections so the arithmetic can be checked without a database;
``get_dashboard_stats`` fetches those collections from the injected store
and swaps in a static snapshot when the store cannot be reached.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from django.conf import settings

from core.exceptions import StoreUnavailable
from customers.models import CustomerStatus
from sales.models import PaymentType

logger = logging.getLogger("m7")

TOP_DEBTORS_LIMIT = 5
TOP_PRODUCTS_LIMIT = 5
WEEKLY_SALES_DAYS = 7


@dataclass(frozen=True)
class DashboardStats:
    total_revenue: Decimal
    cash_revenue: Decimal
    credit_revenue: Decimal
    total_orders: int
    total_customers: int
    risk_customers: int
    vip_customers: int
    top_debtors: list = field(default_factory=list)
    weekly_sales: list = field(default_factory=list)
    product_performance: list = field(default_factory=list)
    is_fallback: bool = False

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to show yet (no orders, no customers)."""
        return self.total_orders == 0 and self.total_customers == 0


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def _decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


def _revenue(orders, payment_type=None) -> Decimal:
    return sum(
        (
            _decimal(order.total_amount)
            for order in orders
            if payment_type is None or order.payment_type == payment_type
        ),
        Decimal("0"),
    )


def _iso(value) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def aggregate_dashboard_stats(orders, customers, daily_sales, product_performance) -> DashboardStats:
    """Build ``DashboardStats`` from one snapshot of the four collections.

    Parameters
    ----------
    orders : list of Order
    customers : list of Customer
    daily_sales : list of DailySalesRow, newest day first
    product_performance : list of ProductPerformanceRow

    Notes
    -----
    Risk and VIP counts use the stored ``status`` column only; a customer
    that the risk classifier would flag through debt alone is not counted.
    ``sorted`` is stable, so ties keep their input order.
    """
    orders = list(orders)
    customers = list(customers)

    debtors = sorted(customers, key=lambda c: _decimal(c.total_debt), reverse=True)
    top_debtors = [
        {
            "name": c.name,
            "shop_name": c.shop_name,
            "debt": _decimal(c.total_debt),
            "trust_score": c.trust_score,
        }
        for c in debtors[:TOP_DEBTORS_LIMIT]
    ]

    weekly_sales = [
        {
            "date": _iso(row.order_date),
            "cash": _decimal(row.cash_sales),
            "credit": _decimal(row.credit_sales),
            "total": _decimal(row.total_sales),
        }
        for row in reversed(list(daily_sales)[:WEEKLY_SALES_DAYS])
    ]

    ranked = sorted(product_performance, key=lambda r: _decimal(r.total_revenue), reverse=True)
    products = [
        {
            "name": row.name,
            "revenue": _decimal(row.total_revenue),
            "quantity": row.total_bags_sold,
        }
        for row in ranked[:TOP_PRODUCTS_LIMIT]
    ]

    return DashboardStats(
        total_revenue=_revenue(orders),
        cash_revenue=_revenue(orders, PaymentType.CASH),
        credit_revenue=_revenue(orders, PaymentType.CREDIT),
        total_orders=len(orders),
        total_customers=len(customers),
        risk_customers=sum(1 for c in customers if c.status == CustomerStatus.RISK),
        vip_customers=sum(1 for c in customers if c.status == CustomerStatus.VIP),
        top_debtors=top_debtors,
        weekly_sales=weekly_sales,
        product_performance=products,
    )


# ---------------------------------------------------------------------------
# Degraded mode
# ---------------------------------------------------------------------------

_FALLBACK_DEBTORS = (
    ("Sunita Devi", "Sunita Wholesale", "125000", 30),
    ("Priya Singh", "Singh Trading Co.", "78000", 45),
    ("Ravi Verma", "Verma Enterprises", "45000", 50),
    ("Neha Gupta", "Gupta Store", "30000", 60),
    ("Amit Sharma", "Sharma Fresh Mart", "15000", 70),
)

# (date, cash, credit, total)
_FALLBACK_WEEK = (
    ("2024-02-01", "125000", "85000", "210000"),
    ("2024-02-02", "198000", "112000", "310000"),
    ("2024-02-03", "156000", "94000", "250000"),
    ("2024-02-04", "245000", "165000", "410000"),
    ("2024-02-05", "187000", "123000", "310000"),
    ("2024-02-06", "223000", "147000", "370000"),
    ("2024-02-07", "264000", "189000", "453000"),
)

_FALLBACK_PRODUCTS = (
    ("Potato (Frying)", "1125000", 450),
    ("Onion (Red)", "684000", 380),
    ("Potato (Regular)", "560000", 280),
    ("Onion (White)", "478500", 299),
)


def fallback_dashboard_stats() -> DashboardStats:
    """Static snapshot shown while the store is unreachable."""
    return DashboardStats(
        total_revenue=Decimal("2847500"),
        cash_revenue=Decimal("1698500"),
        credit_revenue=Decimal("1149000"),
        total_orders=127,
        total_customers=7,
        risk_customers=2,
        vip_customers=2,
        top_debtors=[
            {"name": name, "shop_name": shop, "debt": Decimal(debt), "trust_score": trust}
            for name, shop, debt, trust in _FALLBACK_DEBTORS
        ],
        weekly_sales=[
            {"date": day, "cash": Decimal(cash), "credit": Decimal(credit), "total": Decimal(total)}
            for day, cash, credit, total in _FALLBACK_WEEK
        ],
        product_performance=[
            {"name": name, "revenue": Decimal(revenue), "quantity": quantity}
            for name, revenue, quantity in _FALLBACK_PRODUCTS
        ],
        is_fallback=True,
    )


def get_dashboard_stats(store) -> DashboardStats:
    """Dashboard figures for the presentation layer. Never raises
    ``StoreUnavailable``: the static snapshot is returned instead."""
    try:
        orders = store.fetch_orders(limit=None)
        customers = store.fetch_customers()
        daily_sales = store.fetch_daily_sales(getattr(settings, "DASHBOARD_DAILY_SALES_LIMIT", 30))
        performance = store.fetch_product_performance()
    except StoreUnavailable as exc:
        logger.warning("Dashboard store unreachable, serving fallback stats: %s", exc)
        return fallback_dashboard_stats()
    return aggregate_dashboard_stats(orders, customers, daily_sales, performance)
