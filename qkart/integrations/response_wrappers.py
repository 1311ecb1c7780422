from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from qkart.errors import TransportError
from qkart.integrations.contracts.interfaces import Address, CartLine, LoginResult, Product

logger = logging.getLogger(__name__)


class IntegrationResponseError(TransportError):
    """The backend returned JSON that does not match the expected shape."""

    def __init__(self, message: str, *, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class ProductModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    name: str
    category: str
    cost: float = Field(gt=0)
    rating: int = Field(ge=0, le=5)
    image: str = ""


class CartLineModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str = Field(alias="productId")
    qty: int = Field(ge=0, le=10)


class AddressModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    address: str


class LoginResponseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    token: str
    username: str
    balance: float = 0.0


def normalize_product(raw: Dict[str, Any]) -> Product:
    model = _build_model(ProductModel, raw)
    return Product(
        product_id=model.id,
        name=model.name,
        category=model.category,
        cost=model.cost,
        rating=model.rating,
        image_url=model.image,
    )


def normalize_products(raw: List[Dict[str, Any]]) -> List[Product]:
    return [normalize_product(item) for item in _require_list(raw, "products")]


def normalize_cart(raw: List[Dict[str, Any]]) -> List[CartLine]:
    lines: List[CartLine] = []
    for item in _require_list(raw, "cart"):
        model = _build_model(CartLineModel, item)
        lines.append(CartLine(product_id=model.product_id, quantity=model.qty))
    return lines


def normalize_addresses(raw: List[Dict[str, Any]]) -> List[Address]:
    return [
        Address(address_id=model.id, address=model.address)
        for model in (_build_model(AddressModel, item) for item in _require_list(raw, "addresses"))
    ]


def normalize_login_response(raw: Dict[str, Any]) -> LoginResult:
    model = _build_model(LoginResponseModel, raw)
    return LoginResult(token=model.token, username=model.username, balance=model.balance)


def extract_balance(raw: Any) -> Optional[float]:
    """Return the wallet balance carried by a response envelope, if any."""
    if not isinstance(raw, dict) or raw.get("balance") is None:
        return None
    try:
        return float(raw["balance"])
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric balance in response: %r", raw.get("balance"))
        return None


def _require_list(raw: Any, label: str) -> List[Any]:
    if not isinstance(raw, list):
        raise IntegrationResponseError(f"Expected a list of {label}; got {type(raw).__name__}.", payload=raw)
    return raw


def _build_model(model_cls, data: Any):
    if not isinstance(data, dict):
        raise IntegrationResponseError(
            f"Expected an object for {model_cls.__name__}; got {type(data).__name__}.",
            payload=data,
        )
    try:
        return model_cls(**data)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Invalid {model_cls.__name__} payload: {exc}", payload=data) from exc
