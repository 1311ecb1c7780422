"""
In-memory QKart backend state.

Purpose:
- Provides a fake backend used for development/testing
- Does NOT make any network calls
- Returns payloads shaped exactly like the REST API (`_id`, `productId`, `qty`,
  `{"success": false, "message": ...}` envelopes)

Every method returns `(status_code, payload)` so the FastAPI mock app can
forward the HTTP status while the in-memory client only keeps the payload.
"""

from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

Result = Tuple[int, Any]

DEFAULT_BALANCE = 5000
MAX_QTY = 10

DEFAULT_PRODUCTS: List[Dict[str, Any]] = [
    {
        "_id": "BW0jAAeDJmlZCF8i",
        "name": "OnePlus 6",
        "category": "Phones",
        "cost": 100,
        "rating": 5,
        "image": "https://i.imgur.com/lulqWzW.jpg",
    },
    {
        "_id": "v4sLtEcMpzabRyfx",
        "name": "iPhone XR",
        "category": "Phones",
        "cost": 100,
        "rating": 4,
        "image": "https://i.imgur.com/lulqWzW.jpg",
    },
    {
        "_id": "upLK9JbQ4rMhTwt4",
        "name": "Basketball",
        "category": "Sports",
        "cost": 100,
        "rating": 5,
        "image": "https://i.imgur.com/lulqWzW.jpg",
    },
    {
        "_id": "a4sLtEcMpzabRyfx",
        "name": "Football",
        "category": "Sports",
        "cost": 50,
        "rating": 4,
        "image": "https://i.imgur.com/lulqWzW.jpg",
    },
    {
        "_id": "KCRwjF7lN97HnEaY",
        "name": "Tan Leatherette Weekender Duffle",
        "category": "Fashion",
        "cost": 150,
        "rating": 4,
        "image": "https://i.imgur.com/lulqWzW.jpg",
    },
]

AUTH_MISSING = "Protected route, Oauth2 Bearer token not found"


def _failure(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message}


class InMemoryStore:
    def __init__(self, products: Optional[List[Dict[str, Any]]] = None, default_balance: float = DEFAULT_BALANCE) -> None:
        self.products: List[Dict[str, Any]] = copy.deepcopy(products if products is not None else DEFAULT_PRODUCTS)
        self.default_balance = default_balance
        # username -> {"password", "balance", "cart": {productId: qty}, "addresses": [...]}
        self.users: Dict[str, Dict[str, Any]] = {}
        # token -> username
        self.tokens: Dict[str, str] = {}

    # --- helpers --------------------------------------------------------------

    def _find_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        for product in self.products:
            if product["_id"] == product_id:
                return product
        return None

    def _user_for(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        username = self.tokens.get(token or "")
        return self.users.get(username) if username else None

    # --- products -------------------------------------------------------------

    def list_products(self) -> Result:
        return 200, copy.deepcopy(self.products)

    def get_product(self, product_id: str) -> Result:
        product = self._find_product(product_id)
        if product is None:
            return 404, None
        return 200, copy.deepcopy(product)

    # --- auth -----------------------------------------------------------------

    def register(self, username: str, password: str) -> Result:
        if not username or not password:
            return 400, _failure("Username and password are required")
        if username in self.users:
            return 400, _failure("Username is already taken")
        self.users[username] = {
            "password": password,
            "balance": self.default_balance,
            "cart": {},
            "addresses": [],
        }
        logger.info("Registered user %s", username)
        return 201, {"success": True}

    def login(self, username: str, password: str) -> Result:
        user = self.users.get(username)
        if user is None:
            return 400, _failure("Username does not exist")
        if user["password"] != password:
            return 400, _failure("Password is incorrect")
        token = uuid.uuid4().hex
        self.tokens[token] = username
        return 201, {"success": True, "token": token, "username": username, "balance": user["balance"]}

    # --- cart -----------------------------------------------------------------

    def get_cart(self, token: Optional[str]) -> Result:
        user = self._user_for(token)
        if user is None:
            return 401, _failure(AUTH_MISSING)
        return 200, [{"productId": pid, "qty": qty} for pid, qty in user["cart"].items()]

    def post_cart(self, token: Optional[str], product_id: str, qty: Any) -> Result:
        user = self._user_for(token)
        if user is None:
            return 401, _failure(AUTH_MISSING)
        if self._find_product(product_id) is None:
            return 400, _failure("Product doesn't exist")
        if not isinstance(qty, int) or isinstance(qty, bool) or not 0 <= qty <= MAX_QTY:
            return 400, _failure(f"Quantity must be an integer between 0 and {MAX_QTY}")
        if qty == 0:
            user["cart"].pop(product_id, None)
        else:
            user["cart"][product_id] = qty
        return 200, {"success": True}

    def checkout(self, token: Optional[str], address_id: str) -> Result:
        user = self._user_for(token)
        if user is None:
            return 401, _failure(AUTH_MISSING)
        if not user["cart"]:
            return 400, _failure("Cart is empty")
        if not any(a["_id"] == address_id for a in user["addresses"]):
            return 400, _failure("Address not set")
        total = sum(self._find_product(pid)["cost"] * qty for pid, qty in user["cart"].items())
        if total > user["balance"]:
            return 400, _failure("Wallet balance not sufficient to place order")
        user["balance"] -= total
        user["cart"] = {}
        logger.info("Checkout complete: total=%s remaining_balance=%s", total, user["balance"])
        return 200, {"success": True}

    # --- addresses ------------------------------------------------------------

    def list_addresses(self, token: Optional[str]) -> Result:
        user = self._user_for(token)
        if user is None:
            return 401, _failure(AUTH_MISSING)
        return 200, copy.deepcopy(user["addresses"])

    def add_address(self, token: Optional[str], address: str) -> Result:
        user = self._user_for(token)
        if user is None:
            return 401, _failure(AUTH_MISSING)
        if not (address or "").strip():
            return 400, _failure("Address is a required field")
        user["addresses"].append({"_id": uuid.uuid4().hex[:16], "address": address})
        return 201, {"success": True}

    def delete_address(self, token: Optional[str], address_id: str) -> Result:
        user = self._user_for(token)
        if user is None:
            return 401, _failure(AUTH_MISSING)
        before = len(user["addresses"])
        user["addresses"] = [a for a in user["addresses"] if a["_id"] != address_id]
        if len(user["addresses"]) == before:
            return 404, _failure("Address to delete was not found")
        return 200, {"success": True}
