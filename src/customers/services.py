"""Business-logic / service functions for the customers app."""
from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings

from .models import CustomerStatus

logger = logging.getLogger("m7")

DEFAULT_RISK_DEBT_THRESHOLD = Decimal("50000")


def risk_debt_threshold() -> Decimal:
    """Debt above which a customer is classified as risk."""
    return Decimal(str(getattr(settings, "CUSTOMER_RISK_DEBT_THRESHOLD", DEFAULT_RISK_DEBT_THRESHOLD)))


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------

def classify(status, total_debt) -> CustomerStatus:
    """Map a stored status and outstanding debt to a risk tag.

    Precedence is RISK > VIP > ACTIVE. The debt check runs first and uses a
    strict ``>``: a debt of exactly the threshold is not risk. A VIP whose
    debt crosses the threshold is classified RISK.
    """
    debt = Decimal(str(total_debt or 0))
    if status == CustomerStatus.RISK or debt > risk_debt_threshold():
        return CustomerStatus.RISK
    if status == CustomerStatus.VIP:
        return CustomerStatus.VIP
    return CustomerStatus.ACTIVE


def classify_customer(customer) -> CustomerStatus:
    """Classify a customer record (anything with ``status`` and ``total_debt``)."""
    return classify(customer.status, customer.total_debt)


# ---------------------------------------------------------------------------
# Read helpers
# ---------------------------------------------------------------------------

def get_customer_summaries(store) -> list:
    """Customers with order counts and cash / credit totals, biggest debt first."""
    return store.fetch_customer_summaries()
