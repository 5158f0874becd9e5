"""
Span Model - Source offsets of parsed forms

A SpanTable belongs to exactly one parsed document. It is filled by the
reader as forms are read and queried afterwards to locate matches.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .form import form_key, is_compound


@dataclass(frozen=True)
class Span:
    """Half-open [start, end) offsets into the document text"""

    start: int
    end: int

    def __post_init__(self):
        if not 0 <= self.start < self.end:
            raise ValueError(f"Invalid span: ({self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, other: "Span") -> bool:
        """Check if other lies within this span"""
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end

    def snippet(self, text: str) -> str:
        """Source text covered by this span"""
        return text[self.start : self.end]

    def line_column(self, text: str) -> Tuple[int, int]:
        """
        Position of the span start in the text.

        Returns:
            (line, column) with 1-based line and 0-based column
        """
        line = text.count("\n", 0, self.start) + 1
        line_start = text.rfind("\n", 0, self.start) + 1
        return line, self.start - line_start


@dataclass
class SpanTable:
    """
    Maps forms read from one document to their spans.

    With collapse_duplicates=True (the default) entries are keyed by form
    value: when structurally identical forms occur more than once, only
    the span of the last one read is kept. With collapse_duplicates=False
    compound forms are keyed by node identity instead, so every occurrence
    keeps its own span. Atoms are value-keyed in both modes.

    The full ordered record of every (form, span) pair is kept in
    `entries` regardless of mode.
    """

    collapse_duplicates: bool = True
    entries: List[Tuple[Any, Span]] = field(default_factory=list)
    _spans: Dict[tuple, Tuple[Any, Span]] = field(default_factory=dict, repr=False)

    def _key(self, form: Any) -> tuple:
        if not self.collapse_duplicates and is_compound(form):
            return ("node", id(form))
        return form_key(form)

    def record(self, form: Any, span: Span) -> None:
        """Associate a form with its span (last write wins)"""
        self.entries.append((form, span))
        self._spans[self._key(form)] = (form, span)

    def merge(self, spans: List[Tuple[Any, Span]]) -> None:
        """Record a batch of (form, span) pairs in order"""
        for form, span in spans:
            self.record(form, span)

    def get(self, form: Any) -> Optional[Span]:
        entry = self._spans.get(self._key(form))
        return entry[1] if entry else None

    def items(self) -> List[Tuple[Any, Span]]:
        """Retained (form, span) associations, one per key"""
        return list(self._spans.values())

    def __getitem__(self, form: Any) -> Span:
        span = self.get(form)
        if span is None:
            raise KeyError(form)
        return span

    def __contains__(self, form: Any) -> bool:
        return self._key(form) in self._spans

    def __len__(self) -> int:
        return len(self._spans)

    def __iter__(self) -> Iterator[Any]:
        return (form for form, _ in self._spans.values())

    def occurrences(self, form: Any) -> List[Span]:
        """Spans of every form read that is structurally equal to form"""
        key = form_key(form)
        return [span for entry, span in self.entries if form_key(entry) == key]
