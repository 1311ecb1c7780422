"""
Integrations layer.
This package contains all code used to talk to the QKart backend:
- the REST API under /api/v1 (products, cart, addresses, checkout, auth)

Key rule:
- Storefront pages MUST NOT call the backend directly.
- Pages call a `StorefrontBackend` client (under qkart/integrations/clients).
- We use the in-memory client during development and tests, and the HTTP client
  when a backend is reachable.

Switching implementations:
- The selection of in-memory vs HTTP clients happens in ONE place
  (`qkart.storefront.app.build_backend`).
"""

from .contracts.interfaces import (
    Address,
    CartItem,
    CartLine,
    LoginResult,
    Product,
    StorefrontBackend,
    index_products,
)

__all__ = [
    "Address", "CartItem", "CartLine", "LoginResult", "Product",
    "StorefrontBackend", "index_products",
]
