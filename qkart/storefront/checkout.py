"""
Checkout page: shipping addresses, wallet balance and order placement.

The cart is shown read-only here (`CartSynchronizer(checkout=True)`).
"""

from __future__ import annotations

import logging
from typing import List, Optional

from qkart.integrations.contracts.interfaces import Address, StorefrontBackend
from qkart.integrations.response_wrappers import IntegrationResponseError, extract_balance, normalize_addresses
from qkart.storefront.cart import CartSynchronizer
from qkart.storefront.catalog import ProductCatalogCache
from qkart.storefront.session import SessionContext, SessionGuard
from qkart.storefront.ui import Navigator, Notifier, PageState
from qkart.storefront.validation import call_backend, transport_error_message, validate_envelope_response

logger = logging.getLogger(__name__)

INSUFFICIENT_BALANCE_MESSAGE = "You do not have enough balance in your wallet for this purchase"
NO_ADDRESS_MESSAGE = "Please select an address or add a new address to proceed"


class CheckoutPage:
    def __init__(
        self,
        backend: StorefrontBackend,
        session: SessionContext,
        notifier: Notifier,
        navigator: Navigator,
    ) -> None:
        self.backend = backend
        self.session = session
        self.notifier = notifier
        self.navigator = navigator
        self.guard = SessionGuard(session, notifier, navigator)
        self.catalog = ProductCatalogCache(backend, notifier)
        self.cart: Optional[CartSynchronizer] = None
        self.addresses: List[Address] = []
        self.selected_address_index = 0
        self.new_address = ""
        self.balance = 0.0
        # True when an order went through but the backend did not report the new balance.
        self.balance_stale = False
        self.state = PageState.IDLE

    @property
    def token(self) -> str:
        return self.session.token or ""

    async def mount(self) -> bool:
        if not self.guard.allow_checkout():
            return False

        await self.catalog.load()
        await self.get_addresses()
        self.balance = self.session.balance

        if self.catalog.products:
            self.cart = CartSynchronizer(
                self.backend,
                self.session,
                self.catalog.products,
                self.notifier,
                self.navigator,
                checkout=True,
            )
            await self.cart.refresh_cart()
        return True

    # --- addresses ----------------------------------------------------------------

    async def get_addresses(self) -> None:
        self.state = PageState.LOADING
        errored, response = await call_backend(self.backend.list_addresses(self.token))
        self.state = PageState.IDLE

        if not validate_envelope_response(errored, response, self.notifier, action="fetch addresses"):
            return
        try:
            self.addresses = normalize_addresses(response)
        except IntegrationResponseError as exc:
            logger.error("Address list failed validation: %s", exc)
            self.notifier.error(transport_error_message("fetch addresses"))

    async def add_address(self, address: Optional[str] = None) -> bool:
        if address is not None:
            self.new_address = address

        self.state = PageState.LOADING
        errored, response = await call_backend(self.backend.add_address(self.token, self.new_address))
        self.state = PageState.IDLE

        if not validate_envelope_response(errored, response, self.notifier, action="add a new address"):
            return False
        self.notifier.success("Address added")
        self.new_address = ""
        await self.get_addresses()
        return True

    async def delete_address(self, address_id: str) -> bool:
        self.state = PageState.LOADING
        errored, response = await call_backend(self.backend.delete_address(self.token, address_id))
        self.state = PageState.IDLE

        if not validate_envelope_response(errored, response, self.notifier, action="delete address"):
            return False
        self.notifier.success("Address deleted")
        await self.get_addresses()
        return True

    def select_address(self, index: int) -> None:
        self.selected_address_index = index

    @property
    def selected_address(self) -> Optional[Address]:
        if 0 <= self.selected_address_index < len(self.addresses):
            return self.addresses[self.selected_address_index]
        return None

    # --- ordering -----------------------------------------------------------------

    def cart_total(self) -> float:
        return self.cart.compute_total() if self.cart is not None else 0

    async def order(self) -> bool:
        """Place Order button: local pre-checks, then checkout."""
        if self.balance < self.cart_total():
            self.notifier.error(INSUFFICIENT_BALANCE_MESSAGE)
            return False
        if self.selected_address is None:
            self.notifier.error(NO_ADDRESS_MESSAGE)
            return False
        return await self.checkout()

    async def checkout(self) -> bool:
        address = self.selected_address
        if address is None:
            self.notifier.error(NO_ADDRESS_MESSAGE)
            return False

        self.state = PageState.LOADING
        errored, response = await call_backend(self.backend.checkout(self.token, address.address_id))
        self.state = PageState.IDLE

        if not validate_envelope_response(errored, response, self.notifier, action="checkout"):
            return False

        self.notifier.success("Order placed")
        new_balance = extract_balance(response)
        if new_balance is not None:
            self.session.set_balance(new_balance)
            self.balance = new_balance
            self.balance_stale = False
        else:
            # Only the server knows the post-order balance; keep the stored one until next login.
            logger.warning("Checkout response carried no balance; stored balance may be stale")
            self.balance_stale = True
        self.navigator.push("/thanks")
        return True
