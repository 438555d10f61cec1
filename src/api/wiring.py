"""Store wiring for the HTTP layer.

The store is built once per process and handed to the service functions by
the views. Tests and management commands can install their own instance
with ``configure_store``.
"""
from __future__ import annotations

import logging
import threading

from django.conf import settings
from django.utils.module_loading import import_string

from sales.store import OrderStore

logger = logging.getLogger("m7")

_STORE_LOCK = threading.Lock()
_STORE: OrderStore | None = None


def build_store() -> OrderStore:
    """Instantiate the class named by ``settings.ORDER_STORE_CLASS``."""
    store_class = import_string(
        getattr(settings, "ORDER_STORE_CLASS", "sales.store.DjangoOrderStore"),
    )
    store = store_class()
    logger.info("Order store initialised: %s", store_class.__name__)
    return store


def get_store() -> OrderStore:
    global _STORE
    with _STORE_LOCK:
        if _STORE is None:
            _STORE = build_store()
        return _STORE


def configure_store(store: OrderStore | None) -> None:
    """Replace the process store; ``None`` makes the next call rebuild it."""
    global _STORE
    with _STORE_LOCK:
        _STORE = store
