"""
Static Analysis Module

Provides the reading and matching engine behind callsite.

Modules:
- parsers: Tokenizer with exact token offsets
- reader: Offset-tracking reader and document reader
- call_finder: Call-site matching over parsed forms
- search: Per-document search orchestration
- definitions: Top-level definition index (candidate symbols)
- searcher: Filesystem-backed search runs
"""

from .exceptions import SexpReadError, EndOfInput, ReadBoundary, MalformedSyntax
from .reader import read_form, read_one, read_document, ReadResult, ParsedDocument
from .call_finder import (
    as_symbol,
    parse_symbol,
    is_call_to,
    find_calls,
    find_calls_in_document,
)
from .search import search_document, search_documents, DocumentMatches, CallSite
from .definitions import Definition, defined_name, collect_definitions, defined_symbols
from .searcher import CallerSearcher

__all__ = [
    # Reader signals
    "SexpReadError",
    "EndOfInput",
    "ReadBoundary",
    "MalformedSyntax",
    # Reader
    "read_form",
    "read_one",
    "read_document",
    "ReadResult",
    "ParsedDocument",
    # Call finder
    "as_symbol",
    "parse_symbol",
    "is_call_to",
    "find_calls",
    "find_calls_in_document",
    # Orchestration
    "search_document",
    "search_documents",
    "DocumentMatches",
    "CallSite",
    "CallerSearcher",
    # Definitions
    "Definition",
    "defined_name",
    "collect_definitions",
    "defined_symbols",
]
