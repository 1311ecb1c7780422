"""
In-memory QKart backend client.

Implements `StorefrontBackend` on top of `InMemoryStore` without any HTTP.
Every call is recorded in `requests` as `(method, path)` so tests can assert
on the exact sequence of backend round trips.

Swap:
Replace with clients/real_http/qkart_backend.py when a backend is reachable.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from qkart.integrations.clients.mocks.store import InMemoryStore
from qkart.integrations.contracts.interfaces import StorefrontBackend

logger = logging.getLogger(__name__)


class InMemoryStorefrontBackend(StorefrontBackend):
    def __init__(self, store: Optional[InMemoryStore] = None) -> None:
        self.store = store or InMemoryStore()
        self.requests: List[Tuple[str, str]] = []

    def _record(self, method: str, path: str) -> None:
        logger.debug("[MOCK] %s %s", method, path)
        self.requests.append((method, path))

    def writes(self) -> List[Tuple[str, str]]:
        """Recorded requests that mutate backend state."""
        return [r for r in self.requests if r[0] in ("POST", "DELETE")]

    async def list_products(self) -> Any:
        self._record("GET", "/products")
        return self.store.list_products()[1]

    async def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        self._record("GET", f"/products/{product_id}")
        return self.store.get_product(product_id)[1]

    async def get_cart(self, token: str) -> Any:
        self._record("GET", "/cart")
        return self.store.get_cart(token)[1]

    async def post_cart(self, token: str, product_id: str, qty: int) -> Any:
        self._record("POST", "/cart")
        return self.store.post_cart(token, product_id, qty)[1]

    async def checkout(self, token: str, address_id: str) -> Any:
        self._record("POST", "/cart/checkout")
        return self.store.checkout(token, address_id)[1]

    async def list_addresses(self, token: str) -> Any:
        self._record("GET", "/user/addresses")
        return self.store.list_addresses(token)[1]

    async def add_address(self, token: str, address: str) -> Any:
        self._record("POST", "/user/addresses")
        return self.store.add_address(token, address)[1]

    async def delete_address(self, token: str, address_id: str) -> Any:
        self._record("DELETE", f"/user/addresses/{address_id}")
        return self.store.delete_address(token, address_id)[1]

    async def login(self, username: str, password: str) -> Any:
        self._record("POST", "/auth/login")
        return self.store.login(username, password)[1]

    async def register(self, username: str, password: str) -> Any:
        self._record("POST", "/auth/register")
        return self.store.register(username, password)[1]
