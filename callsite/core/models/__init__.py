"""
callsite Data Models

- form: parsed symbolic-expression values
- span: source offsets and the per-document span table
"""

from .form import (
    Symbol,
    Char,
    SList,
    ImproperList,
    Vector,
    Form,
    Compound,
    QUOTE,
    QUASIQUOTE,
    UNQUOTE,
    UNQUOTE_SPLICING,
    FUNCTION,
    is_compound,
    children,
    form_key,
    format_form,
)
from .span import Span, SpanTable

__all__ = [
    # Forms
    "Symbol",
    "Char",
    "SList",
    "ImproperList",
    "Vector",
    "Form",
    "Compound",
    "QUOTE",
    "QUASIQUOTE",
    "UNQUOTE",
    "UNQUOTE_SPLICING",
    "FUNCTION",
    "is_compound",
    "children",
    "form_key",
    "format_form",
    # Spans
    "Span",
    "SpanTable",
]
