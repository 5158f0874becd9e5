"""
Search Orchestrator

Runs the reader and the call finder over a batch of documents and keeps
the documents that contain at least one call-site.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from loguru import logger

from .call_finder import as_symbol, find_calls_in_document
from .reader import read_document
from ..core.models import Form, Span, SpanTable, Symbol, format_form


@dataclass
class CallSite:
    """A match resolved against its document"""

    document_id: str
    form: Form
    span: Optional[Span] = None
    line: int = 0  # 1-indexed
    column: int = 0  # 0-indexed
    snippet: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_id": self.document_id,
            "form": format_form(self.form),
            "start": self.span.start if self.span else None,
            "end": self.span.end if self.span else None,
            "line": self.line,
            "column": self.column,
            "snippet": self.snippet,
        }


@dataclass
class DocumentMatches:
    """Call-sites found in one document"""

    document_id: str
    matches: List[Form] = field(default_factory=list)
    offsets: Optional[SpanTable] = None
    text: Optional[str] = None

    def __len__(self) -> int:
        return len(self.matches)

    def span_of(self, form: Form) -> Optional[Span]:
        """Span of a match, if the span table was retained"""
        if self.offsets is None:
            return None
        return self.offsets.get(form)

    def call_sites(self) -> List[CallSite]:
        """Resolve every match to its span, position and source snippet"""
        sites = []
        for form in self.matches:
            span = self.span_of(form)
            site = CallSite(document_id=self.document_id, form=form, span=span)
            if span is not None and self.text is not None:
                site.line, site.column = span.line_column(self.text)
                site.snippet = span.snippet(self.text)
            sites.append(site)
        return sites


def search_document(
    document_id: str,
    text: Union[str, bytes],
    symbol: Union[Symbol, str],
    collapse_duplicates: bool = True,
) -> DocumentMatches:
    """
    Read one document and collect the call-sites of symbol in it.

    Returns:
        DocumentMatches, possibly with no matches
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")

    forms, offsets = read_document(text, collapse_duplicates=collapse_duplicates)
    matches = find_calls_in_document(forms, symbol)
    if matches:
        logger.debug(f"{document_id}: {len(matches)} call(s) in {len(forms)} forms")
    return DocumentMatches(
        document_id=document_id,
        matches=matches,
        offsets=offsets,
        text=text,
    )


def search_documents(
    documents: Iterable[Tuple[str, Union[str, bytes]]],
    symbol: Union[Symbol, str],
    collapse_duplicates: bool = True,
    workers: int = 1,
) -> List[DocumentMatches]:
    """
    Search a batch of documents for call-sites of symbol.

    Documents are independent, so with workers > 1 they are read on a
    thread pool. Output order always follows input order.

    Args:
        documents: (document_id, source_text) pairs
        symbol: Symbol (or name) to look for
        collapse_duplicates: Span table mode passed to the reader
        workers: Number of threads (1 = sequential)

    Returns:
        DocumentMatches for each document with at least one match
    """
    symbol = as_symbol(symbol)
    documents = list(documents)
    logger.info(f"Searching {len(documents)} document(s) for calls to {symbol}")

    def run(document: Tuple[str, Union[str, bytes]]) -> DocumentMatches:
        document_id, text = document
        return search_document(document_id, text, symbol, collapse_duplicates)

    if workers > 1 and len(documents) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(run, documents))
    else:
        results = [run(document) for document in documents]

    found = [result for result in results if result.matches]
    total = sum(len(result) for result in found)
    logger.info(f"Found {total} call(s) to {symbol} in {len(found)} document(s)")
    return found
