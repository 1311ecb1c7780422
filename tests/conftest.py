"""Pytest fixtures for storefront tests."""

import pytest

from qkart.integrations.clients.mocks import InMemoryStore, InMemoryStorefrontBackend
from qkart.storefront.session import SessionContext
from qkart.storefront.ui import Navigator, Notifier

TEST_USER = "crio.user"
TEST_PASSWORD = "learn-with-crio"


@pytest.fixture
def store():
    """In-memory backend state seeded with the default catalog."""
    return InMemoryStore()


@pytest.fixture
def backend(store):
    return InMemoryStorefrontBackend(store)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def session():
    return SessionContext()


@pytest.fixture
def logged_in_session(store, session):
    """A session for a registered user, logged in directly against the store."""
    store.register(TEST_USER, TEST_PASSWORD)
    _, payload = store.login(TEST_USER, TEST_PASSWORD)
    session.persist_login(payload["token"], payload["username"], payload["balance"])
    return session
