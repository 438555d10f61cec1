import uuid
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from api import wiring
from catalog.models import Product
from core import pdf
from core.exceptions import StoreUnavailable
from fakes import InMemoryOrderStore
from sales.models import Order, OrderItem
from sales.services import create_order
from sales.store import DjangoOrderStore


class _RacingStore(DjangoOrderStore):
    """Another writer changes the stock between resolution and the write."""

    def fetch_products(self, ids):
        products = super().fetch_products(ids)
        for product in products:
            Product.objects.filter(pk=product.pk).update(stock_version=product.stock_version + 1)
        return products


def _order_request(customer, *lines):
    return {
        "customer_id": str(customer.pk),
        "payment_type": "cash",
        "items": [{"product_id": str(p.pk), "quantity_bags": bags} for p, bags in lines],
    }


@pytest.mark.django_db
class TestOrderEndpoints:
    def test_requires_authentication(self):
        response = APIClient().get("/api/v1/orders/")
        assert response.status_code == 401

    def test_create_order(self, api_client, customer, product):
        response = api_client.post(
            "/api/v1/orders/",
            {
                "customer_id": str(customer.pk),
                "payment_type": "credit",
                "items": [{"product_id": str(product.pk), "quantity_bags": 3}],
            },
            format="json",
        )
        assert response.status_code == 201
        body = response.json()
        assert Decimal(body["total_amount"]) == Decimal("7500")
        assert body["is_paid"] is False
        assert body["invoice_number"] == body["id"][:8].upper()
        assert len(body["items"]) == 1
        assert Decimal(body["items"][0]["quantity_kg"]) == Decimal("75")

        product.refresh_from_db()
        assert product.stock_kg == Decimal("925")

    def test_invalid_quantity_is_400(self, api_client, customer, product):
        response = api_client.post(
            "/api/v1/orders/",
            {
                "customer_id": str(customer.pk),
                "payment_type": "cash",
                "items": [{"product_id": str(product.pk), "quantity_bags": 0}],
            },
            format="json",
        )
        assert response.status_code == 400
        assert Order.objects.count() == 0

    def test_empty_order_is_400(self, api_client, customer):
        response = api_client.post(
            "/api/v1/orders/",
            {"customer_id": str(customer.pk), "payment_type": "cash", "items": []},
            format="json",
        )
        assert response.status_code == 400

    def test_unknown_product_is_404(self, api_client, customer):
        missing = uuid.uuid4()
        response = api_client.post(
            "/api/v1/orders/",
            {
                "customer_id": str(customer.pk),
                "payment_type": "cash",
                "items": [{"product_id": str(missing), "quantity_bags": 1}],
            },
            format="json",
        )
        assert response.status_code == 404
        assert response.json()["missing_ids"] == [str(missing)]

    def test_store_unavailable_is_503(self, api_client, customer, product):
        class DownStore(DjangoOrderStore):
            def fetch_customer(self, customer_id):
                raise StoreUnavailable("connection refused")

        wiring.configure_store(DownStore())
        response = api_client.post(
            "/api/v1/orders/",
            {
                "customer_id": str(customer.pk),
                "payment_type": "cash",
                "items": [{"product_id": str(product.pk), "quantity_bags": 1}],
            },
            format="json",
        )
        assert response.status_code == 503

    def test_stock_conflict_is_409(self, api_client, customer, product):
        wiring.configure_store(_RacingStore())
        response = api_client.post("/api/v1/orders/", _order_request(customer, (product, 3)), format="json")
        assert response.status_code == 409
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0
        product.refresh_from_db()
        assert product.stock_kg == Decimal("1000")

    def test_partial_commit_is_201_with_warnings(self, api_client, customer, product, onion):
        memory = InMemoryOrderStore(products=[product, onion], customers=[customer])
        memory.stock_failures[str(onion.pk)] = StoreUnavailable("timeout")
        wiring.configure_store(memory)

        response = api_client.post(
            "/api/v1/orders/", _order_request(customer, (product, 2), (onion, 1)), format="json",
        )
        assert response.status_code == 201
        body = response.json()
        assert Decimal(body["total_amount"]) == Decimal("6800")
        assert len(body["items"]) == 2
        assert len(body["warnings"]) == 1
        assert str(onion.pk) in body["warnings"][0]
        assert memory.products[str(product.pk)].stock_kg == Decimal("950")
        assert memory.products[str(onion.pk)].stock_kg == Decimal("500")

    def test_list_retrieve_and_mark_paid(self, api_client, store, customer, product):
        order = create_order(store, customer.pk, "credit", [(product.pk, 2)])

        listing = api_client.get("/api/v1/orders/")
        assert listing.status_code == 200
        assert [row["id"] for row in listing.json()] == [str(order.pk)]

        detail = api_client.get(f"/api/v1/orders/{order.pk}/")
        assert detail.status_code == 200
        assert detail.json()["items"][0]["product_name"] == product.name

        paid = api_client.post(f"/api/v1/orders/{order.pk}/mark-paid/")
        assert paid.status_code == 200
        assert paid.json()["is_paid"] is True

    def test_unknown_order_is_404(self, api_client):
        assert api_client.get(f"/api/v1/orders/{uuid.uuid4()}/").status_code == 404

    def test_invoice_download_and_preview(self, api_client, store, customer, product, monkeypatch):
        monkeypatch.setattr(pdf, "html_to_pdf", lambda html: b"%PDF-1.7")
        order = create_order(store, customer.pk, "credit", [(product.pk, 1)])
        number = str(order.pk)[:8].upper()

        download = api_client.get(f"/api/v1/orders/{order.pk}/invoice/")
        assert download.status_code == 200
        assert download["Content-Disposition"] == (
            f'attachment; filename="M7_Invoice_{number}_Ravi_Verma.pdf"'
        )

        preview = api_client.get(f"/api/v1/orders/{order.pk}/invoice/?preview=1")
        assert preview["Content-Disposition"].startswith("inline;")


@pytest.mark.django_db
class TestCustomerAndProductEndpoints:
    def test_customer_risk_status(self, api_client, customer):
        customer.total_debt = Decimal("60000")
        customer.save()
        body = api_client.get(f"/api/v1/customers/{customer.pk}/").json()
        assert body["status"] == "active"
        assert body["risk_status"] == "risk"

    def test_customer_summaries(self, api_client, store, customer, product):
        create_order(store, customer.pk, "cash", [(product.pk, 1)])
        create_order(store, customer.pk, "credit", [(product.pk, 2)])
        rows = api_client.get("/api/v1/customers/summaries/").json()
        assert rows[0]["total_orders"] == 2
        assert Decimal(rows[0]["cash_sales"]) == Decimal("2500")
        assert Decimal(rows[0]["credit_sales"]) == Decimal("5000")

    def test_set_stock(self, api_client, product):
        response = api_client.post(f"/api/v1/products/{product.pk}/stock/", {"stock_kg": "-12.5"}, format="json")
        assert response.status_code == 200
        assert Decimal(response.json()["stock_kg"]) == Decimal("-12.5")
        assert response.json()["needs_replenishment"] is True

    def test_set_stock_with_uppercase_id(self, api_client, product):
        response = api_client.post(
            f"/api/v1/products/{str(product.pk).upper()}/stock/", {"stock_kg": "40"}, format="json",
        )
        assert response.status_code == 200
        assert response.json()["id"] == str(product.pk)
        product.refresh_from_db()
        assert product.stock_kg == Decimal("40")

    def test_product_performance(self, api_client, store, customer, product, onion):
        create_order(store, customer.pk, "cash", [(onion.pk, 4)])
        rows = api_client.get("/api/v1/products/performance/").json()
        assert [r["name"] for r in rows] == ["Onion (Red)", "Potato (Frying)"]
        assert rows[0]["total_bags_sold"] == 4


@pytest.mark.django_db
class TestDashboardEndpoint:
    def test_empty_dashboard(self, api_client):
        body = api_client.get("/api/v1/dashboard/stats/").json()
        assert body["totalOrders"] == 0
        assert body["isEmpty"] is True
        assert body["isFallback"] is False

    def test_live_figures(self, api_client, store, customer, product):
        create_order(store, customer.pk, "cash", [(product.pk, 3)])
        body = api_client.get("/api/v1/dashboard/stats/").json()
        assert body["totalRevenue"] == 7500
        assert body["cashRevenue"] == 7500
        assert body["totalCustomers"] == 1
        assert body["topDebtors"][0]["name"] == "Ravi Verma"
        assert body["productPerformance"][0] == {"name": "Potato (Frying)", "revenue": 7500, "quantity": 3}

    def test_fallback_when_store_is_down(self, api_client):
        class DownStore(DjangoOrderStore):
            def fetch_orders(self, limit=None):
                raise StoreUnavailable("connection refused")

        wiring.configure_store(DownStore())
        response = api_client.get("/api/v1/dashboard/stats/")
        assert response.status_code == 200
        body = response.json()
        assert body["isFallback"] is True
        assert body["totalRevenue"] == 2847500
        assert len(body["weeklySales"]) == 7


@pytest.mark.django_db
def test_order_list_filters(api_client, store, customer, product):
    cash = create_order(store, customer.pk, "cash", [(product.pk, 1)])
    credit = create_order(store, customer.pk, "credit", [(product.pk, 1)])

    by_type = api_client.get("/api/v1/orders/?payment_type=credit").json()
    assert [row["id"] for row in by_type] == [str(credit.pk)]

    paid = api_client.get("/api/v1/orders/?is_paid=true").json()
    assert [row["id"] for row in paid] == [str(cash.pk)]

    assert api_client.get("/api/v1/orders/?payment_type=barter").status_code == 400
    assert api_client.get("/api/v1/orders/?limit=0").status_code == 400
