import json

import httpx
import pytest

from qkart.api.mock_backend import create_app
from qkart.errors import TransportError
from qkart.integrations.clients.mocks import InMemoryStore
from qkart.integrations.clients.real_http import HttpStorefrontBackend
from qkart.storefront.app import Storefront
from qkart.storefront.catalog import ProductCatalogCache
from qkart.storefront.search_page import SearchPage
from qkart.storefront.validation import transport_error_message

ENDPOINT = "http://qkart.test:8082/api/v1"
ONEPLUS = "BW0jAAeDJmlZCF8i"


def _asgi_backend(store=None):
    app = create_app(store or InMemoryStore())
    return HttpStorefrontBackend(ENDPOINT, transport=httpx.ASGITransport(app=app))


def _mock_backend(handler):
    return HttpStorefrontBackend(ENDPOINT, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_products_and_single_product_lookup():
    backend = _asgi_backend()

    products = await backend.list_products()
    assert [p["_id"] for p in products][:2] == [ONEPLUS, "v4sLtEcMpzabRyfx"]

    assert (await backend.get_product(ONEPLUS))["name"] == "OnePlus 6"
    assert await backend.get_product("missing") is None


@pytest.mark.asyncio
async def test_cart_requires_bearer_token():
    backend = _asgi_backend()

    payload = await backend.get_cart("not-a-token")

    assert payload == {"success": False, "message": "Protected route, Oauth2 Bearer token not found"}


@pytest.mark.asyncio
async def test_requests_carry_bearer_header_and_json_body():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    backend = _mock_backend(handler)
    await backend.post_cart("tok-123", ONEPLUS, 2)

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == f"{ENDPOINT}/cart"
    assert request.headers["Authorization"] == "Bearer tok-123"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"productId": ONEPLUS, "qty": 2}


@pytest.mark.asyncio
async def test_unreachable_host_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError):
        await _mock_backend(handler).list_products()


@pytest.mark.asyncio
async def test_non_json_body_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    with pytest.raises(TransportError):
        await _mock_backend(handler).get_cart("tok")


@pytest.mark.asyncio
async def test_failure_envelope_with_error_status_is_returned_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"success": False, "message": "boom"})

    assert await _mock_backend(handler).list_products() == {"success": False, "message": "boom"}


@pytest.mark.asyncio
async def test_product_lookup_failure_envelope_shows_backend_message(notifier):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"success": False, "message": "db down"})

    catalog = ProductCatalogCache(_mock_backend(handler), notifier)

    assert await catalog.fetch_product("p1") is None
    assert notifier.errors == ["db down"]


@pytest.mark.asyncio
async def test_product_lookup_of_missing_product_is_silent(notifier):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"success": False, "message": "Product doesn't exist"})

    catalog = ProductCatalogCache(_mock_backend(handler), notifier)

    assert await catalog.fetch_product("p1") is None
    assert notifier.errors == []

@pytest.mark.asyncio
async def test_search_page_over_unreachable_backend_shows_generic_message(session, notifier, navigator):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    page = SearchPage(_mock_backend(handler), session, notifier, navigator)
    await page.mount()

    assert notifier.errors == [transport_error_message("fetch products")]
    assert page.catalog.products == []


@pytest.mark.asyncio
async def test_full_flow_against_mock_server():
    store = InMemoryStore()
    storefront = Storefront(backend=_asgi_backend(store))

    assert await storefront.register_page().register("crio.user", "secret1", "secret1") is True
    assert await storefront.login_page().login("crio.user", "secret1") is not None

    page = storefront.search_page()
    await page.mount()
    phones = page.search("PHONES")
    assert await page.add_to_cart(phones[0]) is True
    assert await page.cart.upsert_cart_line(phones[0].product_id, 3) is True
    assert page.cart.compute_total() == 300
    assert page.cart.request_checkout() is True

    checkout = storefront.checkout_page()
    await checkout.mount()
    assert await checkout.add_address("12 MG Road, Bengaluru 560001") is True
    assert await checkout.order() is True

    assert storefront.navigator.current == "/thanks"
    assert store.users["crio.user"]["balance"] == 4700
    assert storefront.notifier.errors == []
