"""Service functions for the catalog app.

The Pricing & Inventory Resolver lives here: it turns the product ids of an
order request into the authoritative product records (price per bag, bag
weight, current stock) that the order processor snapshots.
"""
import logging
import uuid
from decimal import Decimal

from core.exceptions import NotFound

logger = logging.getLogger("m7")


def product_key(product_id) -> str:
    """Canonical lookup key for a product id.

    UUIDs are keyed in their hyphenated lowercase form whatever their input
    spelling; anything unparsable is kept as given and will not resolve.
    """
    try:
        return str(product_id if isinstance(product_id, uuid.UUID) else uuid.UUID(str(product_id)))
    except (TypeError, ValueError, AttributeError):
        return str(product_id)


# ---------------------------------------------------------------------------
# resolve_products
# ---------------------------------------------------------------------------

def resolve_products(store, lines) -> dict:
    """Fetch the current product records referenced by *lines*.

    Parameters
    ----------
    store : sales.store.OrderStore
    lines : iterable of ``(product_id, quantity_bags)`` pairs

    Returns
    -------
    dict
        ``product_key(product_id) -> Product`` for exactly the requested ids.

    Raises
    ------
    NotFound
        If any referenced id is absent from the store. A missing product is
        never priced at zero.
    """
    wanted = {product_key(product_id) for product_id, _qty in lines}
    if not wanted:
        return {}

    products = store.fetch_products(sorted(wanted))
    resolved = {
        product_key(product.pk): product
        for product in products
        if product_key(product.pk) in wanted
    }

    missing = wanted - resolved.keys()
    if missing:
        logger.info("Product resolution failed, missing ids: %s", sorted(missing))
        raise NotFound("Product", missing)
    return resolved


# ---------------------------------------------------------------------------
# set_product_stock
# ---------------------------------------------------------------------------

def set_product_stock(store, product_id, stock_kg):
    """Overwrite a product's stock with an absolute value (manual correction).

    Returns the refreshed product record.
    """
    stock_kg = Decimal(str(stock_kg))
    product = resolve_products(store, [(product_id, 0)])[product_key(product_id)]
    store.update_product_stock(product.pk, stock_kg)
    logger.info("Stock for product %s set to %s kg", product_id, stock_kg)
    return resolve_products(store, [(product_id, 0)])[product_key(product_id)]
