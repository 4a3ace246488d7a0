"""可観測性モジュール."""

from storefront.observability.logging import JSONFormatter, TextFormatter, setup_logging


__all__ = ["JSONFormatter", "TextFormatter", "setup_logging"]
