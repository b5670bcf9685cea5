"""Logging setup for argodiff."""

from argodiff.observability.logging import bind_run_context, get_logger, setup_logging

__all__ = ["bind_run_context", "get_logger", "setup_logging"]
