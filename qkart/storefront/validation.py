"""Two-tier validation of backend responses, shared by every storefront page.

Each backend call ends in one of three outcomes:

- transport failure (`errored` is True): the request raised, the host was
  unreachable or the body was not JSON. A generic message is shown.
- application failure: the payload carries a failure indicator. The backend
  `message` is shown verbatim.
- success.

Nothing here retries; a failure ends the user action that triggered it.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Tuple

from qkart.errors import TransportError
from qkart.storefront.ui import Notifier

logger = logging.getLogger(__name__)

NO_PRODUCTS_MESSAGE = "No products found in database"
SOMETHING_WENT_WRONG = (
    "Something went wrong. Check that the backend is running, reachable and returns valid JSON."
)


def transport_error_message(action: str) -> str:
    return f"Could not {action}. Check that the backend is running, reachable and returns valid JSON."


async def call_backend(request: Awaitable[Any]) -> Tuple[bool, Any]:
    """Await a backend call and return `(errored, response)`.

    Transport errors are turned into the errored flag with an empty response.
    """
    try:
        return False, await request
    except TransportError as exc:
        logger.warning("Backend call failed at transport level: %s", exc)
        return True, {}


def _message_of(response: Any) -> str:
    if isinstance(response, dict):
        message = response.get("message")
        if message:
            return str(message)
    return ""


def validate_list_response(
    errored: bool,
    response: Any,
    notifier: Notifier,
    *,
    action: str = "fetch products",
    empty_message: str = NO_PRODUCTS_MESSAGE,
) -> bool:
    """Validate a payload that must be a non-empty JSON list."""
    if errored:
        notifier.error(transport_error_message(action))
        return False

    if isinstance(response, list):
        if response:
            return True
        notifier.error(empty_message)
        return False

    message = _message_of(response)
    if message:
        notifier.error(message)
    else:
        notifier.error(transport_error_message(action))
    return False


def validate_envelope_response(errored: bool, response: Any, notifier: Notifier, *, action: str) -> bool:
    """Validate cart, address and checkout payloads: any `message` is a failure."""
    if errored:
        notifier.error(transport_error_message(action))
        return False

    message = _message_of(response)
    if message:
        notifier.error(message)
        return False

    if isinstance(response, dict) and response.get("success") is False:
        notifier.error(transport_error_message(action))
        return False

    return True


def validate_success_response(errored: bool, response: Any, notifier: Notifier) -> bool:
    """Validate auth payloads, which always carry a `success` flag."""
    if errored or not isinstance(response, dict) or (not response.get("success") and not _message_of(response)):
        notifier.error(SOMETHING_WENT_WRONG)
        return False

    if not response.get("success"):
        notifier.error(_message_of(response))
        return False

    return True
