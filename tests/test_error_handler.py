import pytest

from qkart.error_handler import ErrorHandler
from qkart.integrations.clients.mocks import InMemoryStorefrontBackend
from qkart.storefront.app import Storefront


def test_handle_exception_returns_payload():
    eh = ErrorHandler()
    out = eh.handle_exception(Exception("boom"), context={"k": "v"})
    assert out["fallback"] is True
    assert "something went wrong" in out["message"].lower()
    assert "boom" in out["metadata"]["error"]
    assert out["metadata"]["context"] == {"k": "v"}


@pytest.mark.asyncio
async def test_dispatch_turns_unexpected_exception_into_notification():
    storefront = Storefront(backend=InMemoryStorefrontBackend())

    async def broken_handler():
        raise RuntimeError("unexpected")

    result = await storefront.dispatch(broken_handler(), context={"page": "search"})

    assert result is None
    assert storefront.notifier.errors == ["Something went wrong. Please try again."]


@pytest.mark.asyncio
async def test_dispatch_returns_handler_result():
    storefront = Storefront(backend=InMemoryStorefrontBackend())

    page = storefront.search_page()
    await storefront.dispatch(page.mount())

    assert len(page.catalog.products) == 5
    assert storefront.notifier.errors == []
