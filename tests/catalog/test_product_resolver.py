import uuid
from decimal import Decimal

import pytest

from catalog.models import Product
from catalog.services import resolve_products, set_product_stock
from catalog.tasks import check_negative_stock
from core.exceptions import NotFound


@pytest.mark.django_db
class TestResolveProducts:
    def test_returns_requested_products_by_id(self, store, product, onion):
        resolved = resolve_products(store, [(product.pk, 2), (onion.pk, 1)])
        assert set(resolved) == {str(product.pk), str(onion.pk)}
        assert resolved[str(product.pk)].price_per_bag == Decimal("2500.00")

    def test_missing_product_is_not_found(self, store, product):
        missing = uuid.uuid4()
        with pytest.raises(NotFound) as excinfo:
            resolve_products(store, [(product.pk, 1), (missing, 1)])
        assert excinfo.value.kind == "Product"
        assert excinfo.value.missing_ids == [str(missing)]

    def test_malformed_id_is_not_found(self, store):
        with pytest.raises(NotFound):
            resolve_products(store, [("not-a-uuid", 1)])

    def test_duplicate_ids_resolve_once(self, store, product):
        resolved = resolve_products(store, [(product.pk, 1), (str(product.pk), 2)])
        assert list(resolved) == [str(product.pk)]

    @pytest.mark.parametrize("spelling", [str.upper, lambda pk: pk.replace("-", "")])
    def test_id_spelling_does_not_matter(self, store, product, spelling):
        resolved = resolve_products(store, [(spelling(str(product.pk)), 1)])
        assert list(resolved) == [str(product.pk)]
        assert resolved[str(product.pk)].name == "Potato (Frying)"


@pytest.mark.django_db
class TestSetProductStock:
    def test_overwrites_stock_and_bumps_version(self, store, product):
        updated = set_product_stock(store, product.pk, "420.5")
        assert updated.stock_kg == Decimal("420.500")
        assert updated.stock_version == product.stock_version + 1

    def test_uppercase_id(self, store, product):
        updated = set_product_stock(store, str(product.pk).upper(), 10)
        assert updated.pk == product.pk
        assert updated.stock_kg == Decimal("10.000")

    def test_unknown_product(self, store):
        with pytest.raises(NotFound):
            set_product_stock(store, uuid.uuid4(), 10)


@pytest.mark.django_db
def test_check_negative_stock_reports_oversold_products(product, onion):
    Product.objects.filter(pk=onion.pk).update(stock_kg=Decimal("-25"))
    assert check_negative_stock() == "1 products below zero"
