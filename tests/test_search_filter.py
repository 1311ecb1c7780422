import asyncio

import pytest

from qkart.integrations.contracts.interfaces import Product
from qkart.storefront.catalog import DebouncedSearch, ProductCatalogCache, filter_products
from qkart.storefront.search_page import NO_PRODUCTS_TEXT, SearchPage
from qkart.storefront.ui import PageState


def _catalog():
    return [
        Product("p1", "OnePlus 6", "Phones", 100, 5),
        Product("p2", "Football", "Sports", 50, 4),
        Product("p3", "Foot Spa", "Wellness", 75, 3),
        Product("p4", "Basketball", "Sports", 100, 5),
    ]


def test_empty_query_returns_whole_catalog_in_order():
    catalog = _catalog()
    assert filter_products(catalog, "") == catalog
    assert filter_products([], "") == []


def test_filter_is_case_insensitive():
    catalog = _catalog()
    lower = filter_products(catalog, "foot")
    upper = filter_products(catalog, "FOOT")
    assert lower == upper
    assert [p.name for p in lower] == ["Football", "Foot Spa"]


def test_filter_matches_category_as_well_as_name():
    out = filter_products(_catalog(), "sport")
    assert [p.product_id for p in out] == ["p2", "p4"]


def test_filter_without_matches_is_empty():
    assert filter_products(_catalog(), "laptop") == []


@pytest.mark.asyncio
async def test_debounce_coalesces_burst_into_last_value():
    calls = []
    debouncer = DebouncedSearch(calls.append, delay_ms=300)

    debouncer.on_query_change("T")
    await asyncio.sleep(0.05)
    debouncer.on_query_change("To")
    await asyncio.sleep(0.05)
    debouncer.on_query_change("Too")

    await asyncio.sleep(0.15)
    assert calls == []
    assert debouncer.pending is True

    await asyncio.sleep(0.35)
    assert calls == ["Too"]
    assert debouncer.pending is False


@pytest.mark.asyncio
async def test_debounce_fires_each_spaced_keystroke():
    calls = []
    debouncer = DebouncedSearch(calls.append, delay_ms=300)

    debouncer.on_query_change("T")
    await asyncio.sleep(0.4)
    debouncer.on_query_change("To")
    await asyncio.sleep(0.4)

    assert calls == ["T", "To"]


@pytest.mark.asyncio
async def test_debounce_cancel_drops_scheduled_call():
    calls = []
    debouncer = DebouncedSearch(calls.append, delay_ms=50)

    debouncer.on_query_change("Foot")
    debouncer.cancel()
    await asyncio.sleep(0.1)

    assert calls == []


@pytest.mark.asyncio
async def test_search_page_debounced_query_filters_cached_catalog(backend, session, notifier, navigator):
    page = SearchPage(backend, session, notifier, navigator, debounce_ms=20)
    await page.mount()
    requests_after_mount = len(backend.requests)

    page.on_query_change("ph")
    page.on_query_change("phones")
    await asyncio.sleep(0.08)

    assert [p.name for p in page.filtered_products] == ["OnePlus 6", "iPhone XR"]
    # Searching never goes back to the backend.
    assert len(backend.requests) == requests_after_mount


@pytest.mark.asyncio
async def test_search_button_cancels_pending_keystroke(backend, session, notifier, navigator):
    page = SearchPage(backend, session, notifier, navigator, debounce_ms=30)
    await page.mount()

    page.on_query_change("phones")
    page.search("sports")
    await asyncio.sleep(0.08)

    assert {p.category for p in page.filtered_products} == {"Sports"}


@pytest.mark.asyncio
async def test_products_failure_envelope_shows_backend_message(store, backend, session, notifier, navigator):
    async def failing_list_products():
        return {"success": False, "message": "boom"}

    backend.list_products = failing_list_products
    page = SearchPage(backend, session, notifier, navigator)

    await page.mount()

    assert notifier.errors == ["boom"]
    assert page.catalog.products == []
    assert page.filtered_products == []
    assert page.status_text == NO_PRODUCTS_TEXT


@pytest.mark.asyncio
async def test_catalog_is_fetched_once_per_page_view(backend, notifier):
    catalog = ProductCatalogCache(backend, notifier)

    first = await catalog.load()
    second = await catalog.load()

    assert first is second
    assert len(first) == 5
    assert backend.requests == [("GET", "/products")]
    assert catalog.state is PageState.IDLE


@pytest.mark.asyncio
async def test_fetch_product_returns_none_for_unknown_id(backend, notifier):
    catalog = ProductCatalogCache(backend, notifier)

    product = await catalog.fetch_product("a4sLtEcMpzabRyfx")
    missing = await catalog.fetch_product("does-not-exist")

    assert product.name == "Football"
    assert missing is None
    assert notifier.errors == []
