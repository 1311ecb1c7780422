"""
Cart synchronization with the server-side cart.

The server is the only source of truth for cart contents. Every successful
write is followed by a full re-fetch and the displayed items are replaced
wholesale; the write response is never used as state.

Two contexts:
- editable (cart sidebar on the products page): quantities can change, an
  empty cart is just an empty state
- checkout (order review): read-only, and an empty cart sends the user back
  to the products page
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

from qkart.integrations.contracts.interfaces import CartItem, CartLine, Product, StorefrontBackend, index_products
from qkart.integrations.response_wrappers import IntegrationResponseError, normalize_cart
from qkart.storefront.session import SessionContext
from qkart.storefront.ui import Navigator, Notifier, PageState
from qkart.storefront.validation import call_backend, transport_error_message, validate_envelope_response

logger = logging.getLogger(__name__)

DUPLICATE_ADD_MESSAGE = "Item already added to cart. Use the cart sidebar to update quantity or remove item."
EMPTY_CART_MESSAGE = "You must add items to cart first"
EMPTY_STATE_TEXT = "Add an item to cart and it will show up here"
READ_ONLY_MESSAGE = "Cart cannot be changed during checkout"
PENDING_UPDATE_MESSAGE = "An update for this item is already in progress"


class CartSynchronizer:
    def __init__(
        self,
        backend: StorefrontBackend,
        session: SessionContext,
        products: Sequence[Product],
        notifier: Notifier,
        navigator: Navigator,
        checkout: bool = False,
    ) -> None:
        self.backend = backend
        self.session = session
        self.products = products
        self.notifier = notifier
        self.navigator = navigator
        self.checkout = checkout
        self.state = PageState.IDLE
        self.lines: List[CartLine] = []
        self.items: List[CartItem] = []
        self._pending: Set[str] = set()

    # --- reads ------------------------------------------------------------------

    async def fetch_cart(self) -> Optional[List[CartLine]]:
        """GET the server cart. Returns None on failure, leaving cached state untouched."""
        self.state = PageState.LOADING
        errored, response = await call_backend(self.backend.get_cart(self.session.token or ""))
        self.state = PageState.IDLE

        if not validate_envelope_response(errored, response, self.notifier, action="update cart"):
            return None

        try:
            return normalize_cart(response)
        except IntegrationResponseError as exc:
            logger.error("Cart payload failed validation: %s", exc)
            self.notifier.error(transport_error_message("update cart"))
            return None

    async def refresh_cart(self) -> None:
        lines = await self.fetch_cart()
        if lines is not None:
            self.lines = lines
            self.items = self._join(lines)

        if self.checkout and not self.items:
            self.notifier.error(EMPTY_CART_MESSAGE)
            self.navigator.push("/products")

    def _join(self, lines: List[CartLine]) -> List[CartItem]:
        by_id = index_products(list(self.products))
        items: List[CartItem] = []
        for line in lines:
            product = by_id.get(line.product_id)
            if product is None:
                logger.warning("Skipping cart line for unknown product %s", line.product_id)
                continue
            items.append(CartItem(product=product, quantity=line.quantity))
        return items

    # --- writes -----------------------------------------------------------------

    def contains(self, product_id: str) -> bool:
        return any(line.product_id == product_id for line in self.lines)

    async def upsert_cart_line(self, product_id: str, quantity: int, from_catalog_add_button: bool = False) -> bool:
        """Set the quantity of `product_id` on the server, then re-fetch the cart.

        Returns True when the write succeeded. Refuses (without any request) a
        catalog add for a product already in the cart, any change in checkout
        context, and a second change for a product whose update is in flight.
        """
        if self.checkout:
            logger.warning("Refusing cart change for %s in checkout context", product_id)
            self.notifier.error(READ_ONLY_MESSAGE)
            return False

        if from_catalog_add_button and self.contains(product_id):
            self.notifier.error(DUPLICATE_ADD_MESSAGE)
            return False

        if product_id in self._pending:
            logger.info("Cart update for %s already pending", product_id)
            self.notifier.error(PENDING_UPDATE_MESSAGE)
            return False

        self._pending.add(product_id)
        try:
            self.state = PageState.LOADING
            errored, response = await call_backend(
                self.backend.post_cart(self.session.token or "", product_id, quantity)
            )
            self.state = PageState.IDLE

            if not validate_envelope_response(errored, response, self.notifier, action="update cart"):
                return False

            await self.refresh_cart()
            return True
        finally:
            self._pending.discard(product_id)

    # --- derived values -----------------------------------------------------------

    def compute_total(self) -> float:
        return sum(item.product.cost * item.quantity for item in self.items)

    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def empty_state_text(self) -> Optional[str]:
        return EMPTY_STATE_TEXT if not self.items else None

    def request_checkout(self) -> bool:
        """Checkout button of the editable cart."""
        if self.items:
            self.navigator.push("/checkout")
            return True
        self.notifier.error(EMPTY_CART_MESSAGE)
        return False
