"""Observability helpers: structured logging."""

from inverted_search.observability.logging import JsonFormatter, configure_logging


__all__ = ["JsonFormatter", "configure_logging"]
