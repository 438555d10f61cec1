from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from core.exceptions import StoreUnavailable
from customers.models import Customer
from fakes import InMemoryOrderStore
from reports.services import (
    aggregate_dashboard_stats,
    fallback_dashboard_stats,
    get_dashboard_stats,
)
from sales.models import PaymentType
from sales.services import create_order
from sales.store import DailySalesRow, ProductPerformanceRow


def _order(amount, payment_type):
    return SimpleNamespace(total_amount=Decimal(amount), payment_type=payment_type)


def _customer(name, debt, status="active", trust=50):
    return SimpleNamespace(
        name=name, shop_name=f"{name} Store", total_debt=Decimal(debt), status=status, trust_score=trust,
    )


def _day(offset, cash, credit):
    return DailySalesRow(
        order_date=date(2024, 2, 10) - timedelta(days=offset),
        total_orders=1,
        total_sales=Decimal(cash) + Decimal(credit),
        cash_sales=Decimal(cash),
        credit_sales=Decimal(credit),
    )


def _perf(name, revenue, bags):
    return ProductPerformanceRow(
        product_id=name, name=name, times_ordered=1, total_bags_sold=bags,
        total_kg_sold=Decimal(bags * 50), total_revenue=Decimal(revenue),
    )


class TestAggregateDashboardStats:
    def test_revenue_split_by_payment_type(self):
        orders = [
            _order("7500", PaymentType.CASH),
            _order("2500", PaymentType.CREDIT),
            _order("1000", "barter"),
        ]
        stats = aggregate_dashboard_stats(orders, [], [], [])
        assert stats.total_revenue == Decimal("11000")
        assert stats.cash_revenue == Decimal("7500")
        assert stats.credit_revenue == Decimal("2500")
        assert stats.total_orders == 3

    def test_customer_counts_use_stored_status(self):
        customers = [
            _customer("A", "60000", "active"),
            _customer("B", "0", "risk"),
            _customer("C", "90000", "vip"),
            _customer("D", "0", "vip"),
        ]
        stats = aggregate_dashboard_stats([], customers, [], [])
        assert stats.total_customers == 4
        # A would classify as risk through its debt; the dashboard does not count it.
        assert stats.risk_customers == 1
        assert stats.vip_customers == 2

    def test_top_debtors(self):
        customers = [_customer(f"C{i}", str(debt)) for i, debt in enumerate([10, 500, 70, 500, 3, 900, 40])]
        stats = aggregate_dashboard_stats([], customers, [], [])
        assert [d["name"] for d in stats.top_debtors] == ["C5", "C1", "C3", "C2", "C6"]
        assert stats.top_debtors[0] == {
            "name": "C5", "shop_name": "C5 Store", "debt": Decimal("900"), "trust_score": 50,
        }

    def test_weekly_sales_oldest_first(self):
        rows = [_day(offset, 100 * (offset + 1), 10) for offset in range(10)]
        stats = aggregate_dashboard_stats([], [], rows, [])
        assert len(stats.weekly_sales) == 7
        dates = [entry["date"] for entry in stats.weekly_sales]
        assert dates == sorted(dates)
        assert dates[0] == "2024-02-04"
        assert dates[-1] == "2024-02-10"
        assert stats.weekly_sales[-1] == {
            "date": "2024-02-10", "cash": Decimal("100"), "credit": Decimal("10"), "total": Decimal("110"),
        }

    def test_weekly_sales_with_few_days(self):
        stats = aggregate_dashboard_stats([], [], [_day(0, 5, 5), _day(1, 1, 1)], [])
        assert [e["date"] for e in stats.weekly_sales] == ["2024-02-09", "2024-02-10"]

    def test_product_performance_top_five_by_revenue(self):
        rows = [_perf(f"P{i}", revenue, i) for i, revenue in enumerate([5, 80, 20, 80, 1, 60])]
        stats = aggregate_dashboard_stats([], [], [], rows)
        assert [p["name"] for p in stats.product_performance] == ["P1", "P3", "P5", "P2", "P0"]
        assert stats.product_performance[0] == {"name": "P1", "revenue": Decimal("80"), "quantity": 1}

    def test_empty_inputs(self):
        stats = aggregate_dashboard_stats([], [], [], [])
        assert stats.is_empty
        assert stats.total_revenue == Decimal("0")
        assert stats.is_fallback is False


class TestFallback:
    def test_snapshot_is_internally_consistent(self):
        stats = fallback_dashboard_stats()
        assert stats.is_fallback
        assert stats.cash_revenue + stats.credit_revenue == stats.total_revenue
        assert len(stats.top_debtors) <= 5
        assert len(stats.weekly_sales) == 7
        for day in stats.weekly_sales:
            assert day["cash"] + day["credit"] == day["total"]
        debts = [d["debt"] for d in stats.top_debtors]
        assert debts == sorted(debts, reverse=True)

    @pytest.mark.parametrize(
        "method", ["fetch_orders", "fetch_customers", "fetch_daily_sales", "fetch_product_performance"],
    )
    def test_unreachable_store_serves_fallback(self, method):
        store = InMemoryOrderStore()
        store.failures[method] = StoreUnavailable("no route to host")
        stats = get_dashboard_stats(store)
        assert stats == fallback_dashboard_stats()


class TestGetDashboardStats:
    def test_reads_through_the_store(self):
        from catalog.models import Product

        customer = Customer(name="Sunita Devi", shop_name="Sunita Wholesale", phone="1", status="risk",
                            total_debt=Decimal("125000"), trust_score=30)
        potato = Product(name="Potato (Frying)", price_per_bag=Decimal("2500"),
                         bag_weight_kg=Decimal("50"), stock_kg=Decimal("1000"))
        store = InMemoryOrderStore(products=[potato], customers=[customer])
        create_order(store, customer.pk, PaymentType.CASH, [(potato.pk, 2)], order_date=date(2024, 2, 1))
        create_order(store, customer.pk, PaymentType.CREDIT, [(potato.pk, 1)], order_date=date(2024, 2, 2))

        stats = get_dashboard_stats(store)
        assert stats.is_fallback is False
        assert stats.total_revenue == Decimal("7500")
        assert stats.cash_revenue == Decimal("5000")
        assert stats.risk_customers == 1
        assert [d["date"] for d in stats.weekly_sales] == ["2024-02-01", "2024-02-02"]
        assert stats.product_performance == [{"name": "Potato (Frying)", "revenue": Decimal("7500"), "quantity": 3}]
