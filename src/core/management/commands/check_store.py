"""Verify that the order store is reachable."""

import logging

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import StoreUnavailable

logger = logging.getLogger("m7")


class Command(BaseCommand):
    help = "Check the connection to the order store and report the customer count."

    def handle(self, *args, **options):
        from api.wiring import get_store

        store = get_store()
        try:
            count = store.count_customers()
        except StoreUnavailable as exc:
            logger.warning("Order store unreachable: %s", exc)
            raise CommandError(f"Order store unreachable: {exc}") from exc
        logger.info("Order store connection OK, %d customers", count)
        self.stdout.write(self.style.SUCCESS(
            f"Order store reachable ({type(store).__name__}): {count} customers."
        ))
