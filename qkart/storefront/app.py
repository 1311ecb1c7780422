"""
Storefront composition root.

Builds the backend client, session context, notifier and navigator once and
hands the same instances to every page, so that all pages share one session
and one notification/route history.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Dict, Optional

from qkart.error_handler import ErrorHandler
from qkart.integrations.clients.mocks import InMemoryStorefrontBackend
from qkart.integrations.clients.real_http import HttpStorefrontBackend
from qkart.integrations.contracts.interfaces import StorefrontBackend
from qkart.storefront.auth import Header, LoginPage, RegisterPage
from qkart.storefront.checkout import CheckoutPage
from qkart.storefront.search_page import SearchPage
from qkart.storefront.session import InMemorySessionStore, JsonFileSessionStore, SessionContext
from qkart.storefront.ui import Navigator, Notifier
from qkart.utils.config_loader import StorefrontConfig

logger = logging.getLogger(__name__)


def build_backend(config: StorefrontConfig) -> StorefrontBackend:
    if config.backend.mode == "mock":
        logger.info("Using in-memory QKart backend")
        return InMemoryStorefrontBackend()
    logger.info("Using QKart backend at %s", config.endpoint)
    return HttpStorefrontBackend(config.endpoint, timeout_seconds=config.backend.timeout_seconds)


def build_session(config: StorefrontConfig) -> SessionContext:
    if config.session.path:
        return SessionContext(JsonFileSessionStore(config.session.path))
    return SessionContext(InMemorySessionStore())


class Storefront:
    def __init__(
        self,
        config: Optional[StorefrontConfig] = None,
        backend: Optional[StorefrontBackend] = None,
        session: Optional[SessionContext] = None,
    ) -> None:
        self.config = config or StorefrontConfig()
        self.backend = backend or build_backend(self.config)
        self.session = session or build_session(self.config)
        self.notifier = Notifier()
        self.navigator = Navigator()
        self.error_handler = ErrorHandler()

    async def dispatch(self, action: Awaitable[Any], context: Optional[Dict[str, Any]] = None) -> Any:
        """Run a page handler; unexpected exceptions become an error notification."""
        try:
            return await action
        except Exception as exc:
            payload = self.error_handler.handle_exception(exc, context=context)
            self.notifier.error(payload["message"])
            return None

    def search_page(self) -> SearchPage:
        return SearchPage(
            self.backend,
            self.session,
            self.notifier,
            self.navigator,
            debounce_ms=self.config.search.debounce_ms,
        )

    def checkout_page(self) -> CheckoutPage:
        return CheckoutPage(self.backend, self.session, self.notifier, self.navigator)

    def login_page(self) -> LoginPage:
        return LoginPage(self.backend, self.session, self.notifier, self.navigator)

    def register_page(self) -> RegisterPage:
        return RegisterPage(self.backend, self.notifier, self.navigator)

    def header(self) -> Header:
        return Header(self.session, self.navigator)
