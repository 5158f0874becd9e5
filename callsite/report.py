"""
callsite Report

Pydantic models for the JSON output of a search run, plus the plain-text
renderer used by the CLI.
"""

from pydantic import BaseModel
from typing import List, Optional

from .analysis.definitions import Definition
from .analysis.search import DocumentMatches


# =============================================================================
# Pydantic Models (JSON output)
# =============================================================================

class CallSiteReport(BaseModel):
    """One call-site"""
    form: str
    start: Optional[int] = None
    end: Optional[int] = None
    line: int = 0
    column: int = 0
    snippet: str = ""


class DocumentReport(BaseModel):
    """Call-sites in one document"""
    document_id: str
    calls: List[CallSiteReport]


class SearchReport(BaseModel):
    """Result of searching for callers of one symbol"""
    symbol: str
    total_calls: int
    documents: List[DocumentReport]


class DefinitionReport(BaseModel):
    """A symbol defined at top level"""
    name: str
    kind: str
    document_id: str
    start: Optional[int] = None
    end: Optional[int] = None


def build_report(symbol: str, results: List[DocumentMatches]) -> SearchReport:
    """Convert orchestrator output into a SearchReport"""
    documents = []
    for result in results:
        calls = []
        for site in result.call_sites():
            data = site.to_dict()
            data.pop("document_id")
            calls.append(CallSiteReport(**data))
        documents.append(DocumentReport(document_id=result.document_id, calls=calls))

    return SearchReport(
        symbol=symbol,
        total_calls=sum(len(d.calls) for d in documents),
        documents=documents,
    )


def build_definitions_report(definitions: List[Definition]) -> List[DefinitionReport]:
    return [DefinitionReport(**d.to_dict()) for d in definitions]


# =============================================================================
# Text Output
# =============================================================================

def render_text(report: SearchReport) -> str:
    """
    Render a report as grep-style lines.

    Each call-site is printed as `document:line:column: snippet`, with the
    snippet collapsed to its first line.
    """
    lines = []
    for document in report.documents:
        for call in document.calls:
            text = call.snippet or call.form
            first_line = text.splitlines()[0] if text else ""
            if "\n" in text:
                first_line += " ..."
            lines.append(f"{document.document_id}:{call.line}:{call.column}: {first_line}")
    return "\n".join(lines)
