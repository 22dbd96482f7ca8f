"""Error handling helpers for page requests."""
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)

STARTUP_FAILURE_MESSAGE = "Failed to load data. Please check your internet connection and try again."


class ErrorHandler:
    def __init__(self, banner_dismiss_ms: int = 5000):
        self.banner_dismiss_ms = banner_dismiss_ms

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception while serving page: %s", exc, exc_info=True)
        return {
            "message": "Something went wrong while loading this page. Please try again later.",
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }

    def startup_banner(self, failed_tables: Dict[str, str] = None) -> Dict[str, Any]:
        """Global banner shown when no catalog could be loaded."""
        logger.error("Failed to initialize catalogs: %s", failed_tables or {})
        return {
            "message": STARTUP_FAILURE_MESSAGE,
            "dismiss_after_ms": self.banner_dismiss_ms,
            "metadata": {"failed": failed_tables or {}},
        }
