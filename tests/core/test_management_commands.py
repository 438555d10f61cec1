from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from api import wiring
from catalog.models import Product
from core.exceptions import StoreUnavailable
from customers.models import Customer
from sales.models import Order, OrderItem
from sales.store import DjangoOrderStore


@pytest.mark.django_db
def test_check_store_reports_customer_count(customer):
    out = StringIO()
    call_command("check_store", stdout=out)
    assert "1 customers" in out.getvalue()


@pytest.mark.django_db
def test_check_store_fails_when_unreachable():
    class DownStore(DjangoOrderStore):
        def count_customers(self):
            raise StoreUnavailable("connection refused")

    wiring.configure_store(DownStore())
    with pytest.raises(CommandError):
        call_command("check_store", stdout=StringIO())


@pytest.mark.django_db
def test_seed_demo_data_goes_through_order_processor():
    call_command("seed_demo_data", orders=5, days=3, stdout=StringIO())
    assert Customer.objects.count() == 7
    assert Product.objects.count() == 4
    assert Order.objects.count() == 5
    for order in Order.objects.all():
        items = OrderItem.objects.filter(order=order)
        assert order.total_amount == sum(item.subtotal for item in items)
        assert order.is_paid == (order.payment_type == "cash")
