"""
Products page: catalog, search bar and (for logged-in users) the cart sidebar.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from qkart.integrations.contracts.interfaces import Product, StorefrontBackend
from qkart.storefront.cart import CartSynchronizer
from qkart.storefront.catalog import DEFAULT_DEBOUNCE_MS, DebouncedSearch, ProductCatalogCache, filter_products
from qkart.storefront.session import SessionContext, SessionGuard
from qkart.storefront.ui import Navigator, Notifier, PageState
from qkart.storefront.validation import NO_PRODUCTS_MESSAGE

logger = logging.getLogger(__name__)

LOADING_TEXT = "Loading products..."
NO_PRODUCTS_TEXT = "No products to list"


class SearchPage:
    def __init__(
        self,
        backend: StorefrontBackend,
        session: SessionContext,
        notifier: Notifier,
        navigator: Navigator,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self.backend = backend
        self.session = session
        self.notifier = notifier
        self.navigator = navigator
        self.guard = SessionGuard(session, notifier, navigator)
        self.catalog = ProductCatalogCache(backend, notifier)
        self.debouncer = DebouncedSearch(self.search, delay_ms=debounce_ms)
        self.filtered_products: List[Product] = []
        self.logged_in = False
        self.cart: Optional[CartSynchronizer] = None

    @property
    def state(self) -> PageState:
        if self.catalog.state is PageState.LOADING:
            return PageState.LOADING
        if self.cart is not None:
            return self.cart.state
        return PageState.IDLE

    async def mount(self) -> None:
        """Load the catalog and, for a logged-in user with products, the cart sidebar."""
        products = await self.catalog.load()
        self.filtered_products = list(products)
        self.logged_in = self.guard.is_authenticated()

        if self.logged_in and products:
            await self._mount_cart()

    async def _mount_cart(self) -> CartSynchronizer:
        self.cart = CartSynchronizer(
            self.backend,
            self.session,
            self.catalog.products,
            self.notifier,
            self.navigator,
        )
        await self.cart.refresh_cart()
        return self.cart

    def search(self, text: str) -> List[Product]:
        """Search button path: filter right away and drop any pending keystroke."""
        self.debouncer.cancel()
        self.filtered_products = filter_products(self.catalog.products, text)
        logger.debug("Search %r matched %d products", text, len(self.filtered_products))
        return self.filtered_products

    def on_query_change(self, value: str) -> None:
        self.debouncer.on_query_change(value)

    async def add_to_cart(self, product: Product) -> bool:
        if not self.guard.allow_add_to_cart():
            return False
        if self.cart is None:
            if not self.catalog.products:
                self.notifier.error(NO_PRODUCTS_MESSAGE)
                return False
            # Logged in after this page mounted.
            logger.info("Mounting cart sidebar on first add to cart")
            self.logged_in = True
            await self._mount_cart()
        return await self.cart.upsert_cart_line(product.product_id, 1, from_catalog_add_button=True)

    @property
    def status_text(self) -> Optional[str]:
        """Placeholder shown instead of the product grid, if any."""
        if self.catalog.products:
            return None
        if self.catalog.state is PageState.LOADING:
            return LOADING_TEXT
        return NO_PRODUCTS_TEXT
