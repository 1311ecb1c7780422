"""
Mock QKart backend served over HTTP for local development.

Implements the /api/v1 REST contract on top of `InMemoryStore`:

    uvicorn qkart.api.mock_backend:app --host 127.0.0.1 --port 8082

Tests mount the same app behind `httpx.ASGITransport` to exercise the real
HTTP client without opening a socket.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Header, Response
from fastapi.responses import JSONResponse

from qkart.integrations.clients.mocks.store import InMemoryStore, Result

logger = logging.getLogger(__name__)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _respond(result: Result) -> Response:
    status_code, payload = result
    if payload is None:
        return Response(status_code=status_code)
    return JSONResponse(status_code=status_code, content=payload)


def build_router(store: InMemoryStore) -> APIRouter:
    router = APIRouter(prefix="/api/v1", tags=["QKart Mock Backend"])

    @router.get("/products")
    async def list_products():
        logger.info("Request received for retrieving products list")
        return _respond(store.list_products())

    @router.get("/products/{product_id}")
    async def get_product(product_id: str):
        logger.info("Request received for retrieving product with id: %s", product_id)
        return _respond(store.get_product(product_id))

    @router.get("/cart")
    async def get_cart(authorization: Optional[str] = Header(default=None)):
        return _respond(store.get_cart(_bearer_token(authorization)))

    @router.post("/cart")
    async def post_cart(payload: Dict[str, Any], authorization: Optional[str] = Header(default=None)):
        return _respond(store.post_cart(_bearer_token(authorization), payload.get("productId", ""), payload.get("qty")))

    @router.post("/cart/checkout")
    async def checkout(payload: Dict[str, Any], authorization: Optional[str] = Header(default=None)):
        return _respond(store.checkout(_bearer_token(authorization), payload.get("addressId", "")))

    @router.get("/user/addresses")
    async def list_addresses(authorization: Optional[str] = Header(default=None)):
        return _respond(store.list_addresses(_bearer_token(authorization)))

    @router.post("/user/addresses")
    async def add_address(payload: Dict[str, Any], authorization: Optional[str] = Header(default=None)):
        return _respond(store.add_address(_bearer_token(authorization), payload.get("address", "")))

    @router.delete("/user/addresses/{address_id}")
    async def delete_address(address_id: str, authorization: Optional[str] = Header(default=None)):
        return _respond(store.delete_address(_bearer_token(authorization), address_id))

    @router.post("/auth/login")
    async def login(payload: Dict[str, Any]):
        return _respond(store.login(payload.get("username", ""), payload.get("password", "")))

    @router.post("/auth/register")
    async def register(payload: Dict[str, Any]):
        return _respond(store.register(payload.get("username", ""), payload.get("password", "")))

    return router


def create_app(store: Optional[InMemoryStore] = None) -> FastAPI:
    app = FastAPI(
        title="QKart Mock Backend",
        description="In-memory implementation of the QKart REST API for development and tests",
        version="1.0.0",
    )
    app.state.store = store or InMemoryStore()
    app.include_router(build_router(app.state.store))

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
