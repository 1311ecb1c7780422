"""Last-resort error handling for storefront page handlers."""
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in storefront handler: %s", exc, exc_info=True)
        return {
            "message": "Something went wrong. Please try again.",
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }
