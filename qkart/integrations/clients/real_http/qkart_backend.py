"""
QKart backend HTTP client.

Used when a QKart backend is reachable (see `StorefrontConfig.endpoint`).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from qkart.errors import TransportError
from qkart.integrations.contracts.interfaces import StorefrontBackend

logger = logging.getLogger(__name__)


class HttpStorefrontBackend(StorefrontBackend):
    def __init__(
        self,
        endpoint: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.timeout_seconds = timeout_seconds
        # Tests pass an ASGI or mock transport; production uses the default.
        self.transport = transport

    def _headers(self, token: Optional[str] = None, *, has_body: bool = False) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if has_body:
            headers["Content-Type"] = "application/json"
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
        missing_ok: bool = False,
    ) -> Any:
        url = f"{self.endpoint}{path}"
        headers = self._headers(token, has_body=payload is not None)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.request(method, url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {path} failed: {exc}", cause=exc) from exc

        if missing_ok and response.status_code == 404:
            return None

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("%s %s returned non-JSON body (HTTP %s)", method, url, response.status_code)
            raise TransportError(f"{method} {path} returned invalid JSON", cause=exc) from exc

        logger.debug("%s %s -> HTTP %s", method, url, response.status_code)
        return data

    # -- Products --

    async def list_products(self) -> Any:
        return await self._request("GET", "/products")

    async def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        return await self._request("GET", f"/products/{product_id}", missing_ok=True)

    # -- Cart --

    async def get_cart(self, token: str) -> Any:
        return await self._request("GET", "/cart", token=token)

    async def post_cart(self, token: str, product_id: str, qty: int) -> Any:
        return await self._request("POST", "/cart", token=token, payload={"productId": product_id, "qty": qty})

    async def checkout(self, token: str, address_id: str) -> Any:
        return await self._request("POST", "/cart/checkout", token=token, payload={"addressId": address_id})

    # -- Addresses --

    async def list_addresses(self, token: str) -> Any:
        return await self._request("GET", "/user/addresses", token=token)

    async def add_address(self, token: str, address: str) -> Any:
        return await self._request("POST", "/user/addresses", token=token, payload={"address": address})

    async def delete_address(self, token: str, address_id: str) -> Any:
        return await self._request("DELETE", f"/user/addresses/{address_id}", token=token)

    # -- Auth --

    async def login(self, username: str, password: str) -> Any:
        return await self._request("POST", "/auth/login", payload={"username": username, "password": password})

    async def register(self, username: str, password: str) -> Any:
        return await self._request("POST", "/auth/register", payload={"username": username, "password": password})
