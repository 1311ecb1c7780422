#!/usr/bin/env python3
"""
Walk through register → login → search → add to cart → checkout and print each stage.

Usage (from repo root):
  python scripts/run_storefront_demo.py --mock
  python scripts/run_storefront_demo.py --config config/storefront_config.yml

Against a local mock server:
  uvicorn qkart.api.mock_backend:app --host 127.0.0.1 --port 8082
  python scripts/run_storefront_demo.py
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from qkart.storefront.app import Storefront
from qkart.utils.config_loader import load_storefront_config


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


async def main(args: argparse.Namespace) -> int:
    setup_logging()
    config = load_storefront_config(Path(args.config) if args.config else None)
    if args.mock:
        config.backend.mode = "mock"

    store = Storefront(config)

    await store.dispatch(store.register_page().register(args.username, args.password, args.password))
    result = await store.dispatch(store.login_page().login(args.username, args.password))
    if result is None:
        print_stage("LOGIN FAILED", store.notifier.errors)
        return 1
    print_stage("LOGGED IN", {"username": result.username, "balance": result.balance})

    page = store.search_page()
    await store.dispatch(page.mount())
    print_stage("CATALOG", [p.name for p in page.catalog.products])

    matches = page.search(args.query)
    print_stage(f"SEARCH {args.query!r}", [p.name for p in matches])

    if matches:
        await store.dispatch(page.add_to_cart(matches[0]))
    if page.cart is not None:
        print_stage(
            "CART",
            {
                "items": [{"name": i.product.name, "qty": i.quantity} for i in page.cart.items],
                "total": page.cart.compute_total(),
            },
        )
        page.cart.request_checkout()

    checkout = store.checkout_page()
    await store.dispatch(checkout.mount())
    if not checkout.addresses:
        await store.dispatch(checkout.add_address(args.address))
    placed = await store.dispatch(checkout.order())
    print_stage("ORDER", {"placed": bool(placed), "route": store.navigator.current})

    print_stage("NOTIFICATIONS", [f"{n.level.value}: {n.message}" for n in store.notifier.notifications])
    return 0 if placed else 1


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the QKart storefront flow end to end")
    parser.add_argument("--config", help="Path to storefront_config.yml")
    parser.add_argument("--mock", action="store_true", help="Use the in-memory backend")
    parser.add_argument("--username", default="demouser")
    parser.add_argument("--password", default="demopass")
    parser.add_argument("--query", default="phones")
    parser.add_argument("--address", default="221B Baker Street, London NW1 6XE")
    return parser.parse_args()


if __name__ == "__main__":
    sys.exit(asyncio.run(main(parse_args())))
