"""
Mock clients for local development and tests.

Nothing in this package makes network calls. `InMemoryStore` implements the
backend rules once; `InMemoryStorefrontBackend` calls it directly and the
FastAPI app in `qkart.api.mock_backend` exposes it over HTTP.
"""

from .store import DEFAULT_PRODUCTS, InMemoryStore
from .in_memory_backend import InMemoryStorefrontBackend

__all__ = ["DEFAULT_PRODUCTS", "InMemoryStore", "InMemoryStorefrontBackend"]
