"""
Storefront pages and the state they keep in sync with the QKart backend.
"""

from .app import Storefront, build_backend, build_session
from .cart import CartSynchronizer
from .catalog import DebouncedSearch, ProductCatalogCache, filter_products
from .checkout import CheckoutPage
from .search_page import SearchPage
from .session import SessionContext, SessionGuard

__all__ = [
    "CartSynchronizer",
    "CheckoutPage",
    "DebouncedSearch",
    "ProductCatalogCache",
    "SearchPage",
    "SessionContext",
    "SessionGuard",
    "Storefront",
    "build_backend",
    "build_session",
    "filter_products",
]
