"""
Session storage and the session guard.

The session is three string keys (`token`, `username`, `balance`) in a
process-wide key-value store. Every page reads and writes them through one
injected `SessionContext`; nothing else touches the store.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from qkart.storefront.ui import Navigator, Notifier

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USERNAME_KEY = "username"
BALANCE_KEY = "balance"

LOGIN_REQUIRED_MESSAGE = "You must be logged in to do that."


class InMemorySessionStore:
    """Key-value store that lives for the process lifetime."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileSessionStore(InMemorySessionStore):
    """Key-value store persisted to a JSON file after every write."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        initial: Dict[str, str] = {}
        if self.path.exists():
            try:
                initial = json.loads(self.path.read_text(encoding="utf-8")) or {}
            except (OSError, ValueError) as exc:
                logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
                initial = {}
            if not isinstance(initial, dict):
                logger.warning("Ignoring session file %s: expected a JSON object", self.path)
                initial = {}
        super().__init__({k: str(v) for k, v in initial.items()})

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._items, indent=2), encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        super().set_item(key, value)
        self._flush()

    def remove_item(self, key: str) -> None:
        super().remove_item(key)
        self._flush()


class SessionContext:
    def __init__(self, store: Optional[InMemorySessionStore] = None) -> None:
        self.store = store if store is not None else InMemorySessionStore()

    @property
    def token(self) -> Optional[str]:
        return self.store.get_item(TOKEN_KEY)

    @property
    def username(self) -> Optional[str]:
        return self.store.get_item(USERNAME_KEY)

    @property
    def balance(self) -> float:
        raw = self.store.get_item(BALANCE_KEY)
        if raw is None:
            return 0.0
        try:
            return float(raw)
        except ValueError:
            logger.warning("Stored balance is not numeric: %r", raw)
            return 0.0

    def set_balance(self, balance: float) -> None:
        self.store.set_item(BALANCE_KEY, _format_amount(balance))

    def is_authenticated(self) -> bool:
        return bool(self.username) and bool(self.token)

    def persist_login(self, token: str, username: str, balance: float) -> None:
        self.store.set_item(TOKEN_KEY, token)
        self.store.set_item(USERNAME_KEY, username)
        self.set_balance(balance)
        logger.info("Session stored for %s", username)

    def logout(self) -> None:
        # The balance key is left in place, as the storefront always has.
        self.store.remove_item(USERNAME_KEY)
        self.store.remove_item(TOKEN_KEY)


class SessionGuard:
    """Redirects unauthenticated intents away from cart and checkout."""

    def __init__(self, session: SessionContext, notifier: Notifier, navigator: Navigator) -> None:
        self.session = session
        self.notifier = notifier
        self.navigator = navigator

    def is_authenticated(self) -> bool:
        return self.session.is_authenticated()

    def allow_add_to_cart(self) -> bool:
        if self.is_authenticated():
            return True
        self.navigator.push("/login")
        return False

    def allow_checkout(self) -> bool:
        if self.is_authenticated():
            return True
        self.notifier.error(LOGIN_REQUIRED_MESSAGE)
        self.navigator.push("/")
        return False


def _format_amount(value: float) -> str:
    amount = float(value)
    return str(int(amount)) if amount.is_integer() else str(amount)
