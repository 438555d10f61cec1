from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from api import wiring
from catalog.models import Product
from customers.models import Customer
from sales.store import DjangoOrderStore


@pytest.fixture(autouse=True)
def _reset_store_wiring():
    wiring.configure_store(None)
    yield
    wiring.configure_store(None)


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(
        username="dispatcher",
        email="dispatcher@test.com",
        password="testpass123",
    )


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def store(db):
    return DjangoOrderStore()


@pytest.fixture
def customer(db):
    return Customer.objects.create(
        name="Ravi Verma",
        shop_name="Verma Enterprises",
        phone="+91-9810000003",
        location_geo="Ghaziabad, UP",
        trust_score=50,
        total_debt=Decimal("45000.00"),
    )


@pytest.fixture
def product(db):
    return Product.objects.create(
        name="Potato (Frying)",
        price_per_bag=Decimal("2500.00"),
        bag_weight_kg=Decimal("25.000"),
        stock_kg=Decimal("1000.000"),
    )


@pytest.fixture
def onion(db):
    return Product.objects.create(
        name="Onion (Red)",
        price_per_bag=Decimal("1800.00"),
        bag_weight_kg=Decimal("50.000"),
        stock_kg=Decimal("500.000"),
    )


@pytest.fixture
def order_date():
    return date(2024, 2, 1)
