from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Product:
    product_id: str
    name: str
    category: str
    cost: float                          # always > 0
    rating: int                          # 0..5
    image_url: str = ""


@dataclass(frozen=True)
class CartLine:
    product_id: str
    quantity: int                        # 0..10


@dataclass(frozen=True)
class CartItem:
    """A cart line joined with its catalog product, ready for display."""
    product: Product
    quantity: int

    @property
    def product_id(self) -> str:
        return self.product.product_id


@dataclass(frozen=True)
class Address:
    address_id: str
    address: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    username: str
    balance: float


# ---------------------------------------------------------------------------
# Abstract backend interface
# ---------------------------------------------------------------------------

class StorefrontBackend(ABC):
    """Every QKart backend client must implement this interface.

    Methods return the decoded JSON payload as-is. Interpreting failure
    envelopes (`{"success": false, "message": ...}`) is the job of
    `qkart.storefront.validation`, so that every page applies the same
    two-tier checks.

    Transport failures (unreachable host, non-JSON body) are raised as
    `qkart.errors.TransportError`.
    """

    # -- Products --

    @abstractmethod
    async def list_products(self) -> Any:
        """GET /products."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """GET /products/:id. Returns None when the product does not exist."""

    # -- Cart --

    @abstractmethod
    async def get_cart(self, token: str) -> Any:
        """GET /cart."""

    @abstractmethod
    async def post_cart(self, token: str, product_id: str, qty: int) -> Any:
        """POST /cart with {productId, qty}."""

    @abstractmethod
    async def checkout(self, token: str, address_id: str) -> Any:
        """POST /cart/checkout with {addressId}."""

    # -- Addresses --

    @abstractmethod
    async def list_addresses(self, token: str) -> Any:
        """GET /user/addresses."""

    @abstractmethod
    async def add_address(self, token: str, address: str) -> Any:
        """POST /user/addresses with {address}."""

    @abstractmethod
    async def delete_address(self, token: str, address_id: str) -> Any:
        """DELETE /user/addresses/:id."""

    # -- Auth --

    @abstractmethod
    async def login(self, username: str, password: str) -> Any:
        """POST /auth/login."""

    @abstractmethod
    async def register(self, username: str, password: str) -> Any:
        """POST /auth/register."""


def index_products(items: List[Product]) -> Dict[str, Product]:
    """Index products by id for cart joins."""
    return {p.product_id: p for p in items}
