"""Observability module for timeoff."""

from timeoff.observability.logging import ContextLogger, setup_logging

__all__ = ["ContextLogger", "setup_logging"]
