"""Celery tasks for the catalog app."""
import logging

from celery import shared_task

logger = logging.getLogger("m7")


@shared_task(name="catalog.tasks.check_negative_stock")
def check_negative_stock():
    """Log every product whose stock went below zero.

    Negative stock is the replenishment signal left behind by orders that
    shipped more than was on hand. Nothing is modified here.
    """
    from catalog.models import Product

    products = list(
        Product.objects.filter(stock_kg__lt=0).order_by("stock_kg", "name")
    )
    for product in products:
        logger.warning(
            "Replenishment needed: %s at %s kg (bag weight %s kg)",
            product.name, product.stock_kg, product.bag_weight_kg,
            extra={"product_id": str(product.pk)},
        )

    logger.info("check_negative_stock completed: %d products below zero.", len(products))
    return f"{len(products)} products below zero"
