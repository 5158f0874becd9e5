"""
callsite Core Module

Contains configuration, logging and data models.
"""

from .config import Config
from .logging import (
    logger,
    setup_logging,
    setup_console_only,
)

from .models import (
    Symbol, Char, SList, ImproperList, Vector, Form,
    Span, SpanTable,
    format_form,
)

__all__ = [
    # Config
    "Config",
    # Logging
    "logger",
    "setup_logging",
    "setup_console_only",
    # Models
    "Symbol", "Char", "SList", "ImproperList", "Vector", "Form",
    "Span", "SpanTable",
    "format_form",
]
