"""
Definition Index

Static stand-in for asking a running image which functions exist: scans
top-level defining forms and lists the names they define. The result is a
candidate list for choosing a search target.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from loguru import logger

from .reader import read_document
from ..core.models import Form, SList, Span, Symbol


# Head symbol -> kind of definition
DEFINING_FORMS = {
    "defun": "function",
    "defsubst": "function",
    "cl-defun": "function",
    "defmacro": "macro",
    "cl-defmacro": "macro",
    "defgeneric": "generic",
    "cl-defgeneric": "generic",
    "defmethod": "method",
    "cl-defmethod": "method",
    "define": "function",
    "define-syntax": "macro",
    "defn": "function",
}


@dataclass
class Definition:
    """A symbol defined by a top-level form"""

    name: str
    kind: str
    document_id: str
    start: Optional[int] = None
    end: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def defined_name(form: Form) -> Optional[Tuple[Symbol, str]]:
    """
    Extract the name a defining form introduces.

    Handles `(defun NAME ...)` style forms and Scheme's
    `(define (NAME args...) ...)`.

    Returns:
        (name symbol, kind) or None if form defines nothing
    """
    if not isinstance(form, SList) or len(form.items) < 2:
        return None
    head = form.items[0]
    if not isinstance(head, Symbol) or head.name not in DEFINING_FORMS:
        return None

    target = form.items[1]
    # (define (name args...) body...)
    if isinstance(target, SList) and target.items:
        target = target.items[0]
    if isinstance(target, Symbol):
        return target, DEFINING_FORMS[head.name]
    return None


def collect_definitions(
    documents: Iterable[Tuple[str, Union[str, bytes]]]
) -> List[Definition]:
    """
    Collect top-level definitions from documents.

    Args:
        documents: (document_id, source_text) pairs

    Returns:
        Definitions in document order, then source order
    """
    definitions: List[Definition] = []
    for document_id, text in documents:
        forms, offsets = read_document(text)
        for form in forms:
            found = defined_name(form)
            if found is None:
                continue
            name, kind = found
            span: Optional[Span] = offsets.get(form)
            definitions.append(
                Definition(
                    name=name.name,
                    kind=kind,
                    document_id=document_id,
                    start=span.start if span else None,
                    end=span.end if span else None,
                )
            )
    logger.debug(f"Collected {len(definitions)} definitions")
    return definitions


def defined_symbols(documents: Iterable[Tuple[str, Union[str, bytes]]]) -> List[str]:
    """Sorted unique names defined across documents"""
    return sorted({d.name for d in collect_definitions(documents)})
