"""
Product catalog cache and search filtering.

The catalog is fetched once per page view and kept in `ProductCatalogCache.products`.
Searching never touches the network: `filter_products` derives the displayed
subset from the cached list, and `DebouncedSearch` coalesces keystrokes so
that only the last value typed within the quiet period is filtered.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

from qkart.integrations.contracts.interfaces import Product, StorefrontBackend
from qkart.integrations.response_wrappers import IntegrationResponseError, normalize_product, normalize_products
from qkart.storefront.ui import Notifier, PageState
from qkart.storefront.validation import (
    call_backend,
    transport_error_message,
    validate_envelope_response,
    validate_list_response,
)

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 300


def filter_products(catalog: List[Product], query: str) -> List[Product]:
    """Case-insensitive substring match of `query` against name or category.

    An empty query returns the whole catalog in its original order.
    """
    if not query:
        return list(catalog)
    needle = query.casefold()
    return [
        product
        for product in catalog
        if needle in product.name.casefold() or needle in product.category.casefold()
    ]


class ProductCatalogCache:
    def __init__(self, backend: StorefrontBackend, notifier: Notifier) -> None:
        self.backend = backend
        self.notifier = notifier
        self.state = PageState.IDLE
        self._products: List[Product] = []
        self._loaded = False

    @property
    def products(self) -> List[Product]:
        return self._products

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> List[Product]:
        """Fetch the catalog on first call; later calls return the cached list."""
        if self._loaded:
            return self._products

        self.state = PageState.LOADING
        errored, response = await call_backend(self.backend.list_products())
        self.state = PageState.IDLE

        if not validate_list_response(errored, response, self.notifier):
            return self._products

        try:
            products = normalize_products(response)
        except IntegrationResponseError as exc:
            logger.error("Product list failed validation: %s", exc)
            self.notifier.error(transport_error_message("fetch products"))
            return self._products

        self._products = products
        self._loaded = True
        logger.info("Catalog loaded with %d products", len(products))
        return self._products

    async def fetch_product(self, product_id: str) -> Optional[Product]:
        """Look up one product on the backend; None when it does not exist."""
        errored, response = await call_backend(self.backend.get_product(product_id))
        if errored:
            self.notifier.error(transport_error_message("fetch product"))
            return None
        if response is None:
            return None
        if not validate_envelope_response(errored, response, self.notifier, action="fetch product"):
            return None
        try:
            return normalize_product(response)
        except IntegrationResponseError as exc:
            logger.error("Product %s failed validation: %s", product_id, exc)
            self.notifier.error(transport_error_message("fetch product"))
            return None


class DebouncedSearch:
    """Cancellable timer that runs `callback(value)` after a quiet period.

    Each `on_query_change` cancels the scheduled call (if any) and schedules a
    new one, so a burst of keystrokes produces a single call carrying the last
    value. Must be used from inside a running event loop.
    """

    def __init__(self, callback: Callable[[str], Any], delay_ms: int = DEFAULT_DEBOUNCE_MS) -> None:
        self.callback = callback
        self.delay_ms = delay_ms
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def on_query_change(self, value: str) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_ms / 1000.0, self._fire, value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: str) -> None:
        self._handle = None
        logger.debug("Debounced search fired with %r", value)
        self.callback(value)
