"""
Offset-Tracking Reader

Recursive-descent reader that records the span of every form it reads.

read_form() is pure: it returns the form together with the spans of the
form and all of its subforms (children first, parent last). read_one()
and read_document() merge those spans into a per-document SpanTable.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Tuple, Union

from loguru import logger

from .exceptions import EndOfInput, MalformedSyntax, ReadBoundary
from .parsers.sexp_parser import (
    ATOM,
    CLOSE,
    CLOSERS,
    DATUM_COMMENT,
    DOT,
    PREFIX,
    Token,
    next_token,
)
from ..core.models import (
    FUNCTION,
    QUASIQUOTE,
    QUOTE,
    UNQUOTE,
    UNQUOTE_SPLICING,
    Form,
    ImproperList,
    SList,
    Span,
    SpanTable,
    Vector,
)


_PREFIX_SYMBOLS = {
    "'": QUOTE,
    "`": QUASIQUOTE,
    ",": UNQUOTE,
    ",@": UNQUOTE_SPLICING,
    "#'": FUNCTION,
}

_NO_TAIL = object()


@dataclass
class ReadResult:
    """One form read from the text, with the spans produced along the way"""

    form: Form
    start: int
    end: int
    spans: List[Tuple[Form, Span]] = field(default_factory=list)

    @property
    def span(self) -> Span:
        return Span(self.start, self.end)


class ParsedDocument(NamedTuple):
    """Top-level forms of a document in source order, plus its span table"""

    forms: List[Form]
    offsets: SpanTable


def read_form(text: str, start_offset: int = 0) -> ReadResult:
    """
    Read one form starting at start_offset.

    Args:
        text: Full source text
        start_offset: Offset known not to be inside a string or comment

    Returns:
        ReadResult with the form, its exact start/end offsets and the
        (form, span) pairs of the form and every subform

    Raises:
        EndOfInput: Only whitespace and comments remain
        ReadBoundary: A closing delimiter was found instead of a value
        MalformedSyntax: Unterminated compound, invalid token, etc.
    """
    try:
        return _read_value(text, start_offset)
    except RecursionError:
        raise MalformedSyntax("Nesting too deep", start_offset) from None


def read_one(text: str, offsets: SpanTable, start_offset: int = 0) -> Tuple[Form, int]:
    """
    Read one form and record its spans into offsets.

    Nothing is recorded when the read fails.

    Returns:
        (form, end_offset) so the caller can continue with the next sibling
    """
    result = read_form(text, start_offset)
    offsets.merge(result.spans)
    return result.form, result.end


def read_document(
    text: Union[str, bytes], collapse_duplicates: bool = True
) -> ParsedDocument:
    """
    Read every top-level form of a document.

    Reading stops quietly at the end of input, at a stray closing
    delimiter or at the first malformed form; the forms read up to that
    point are returned.

    Args:
        text: Source text (bytes are decoded as UTF-8)
        collapse_duplicates: Key the span table by form value (True) or
            by node for compound forms (False)

    Returns:
        ParsedDocument(forms, offsets)
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")

    offsets = SpanTable(collapse_duplicates=collapse_duplicates)
    forms: List[Form] = []
    pos = 0

    while True:
        try:
            form, pos = read_one(text, offsets, pos)
        except EndOfInput:
            break
        except ReadBoundary as e:
            logger.debug(f"Stopped at stray closing delimiter: {e}")
            break
        except MalformedSyntax as e:
            logger.debug(f"Stopped at malformed syntax after {len(forms)} forms: {e}")
            break
        forms.append(form)

    return ParsedDocument(forms, offsets)


def _next_significant(text: str, pos: int) -> Token:
    """Next token, with #; datum comments and the datum they hide skipped"""
    token = next_token(text, pos)
    while token.kind == DATUM_COMMENT:
        try:
            skipped = _read_value(text, token.end)
        except (EndOfInput, ReadBoundary):
            raise MalformedSyntax("Missing datum after '#;'", token.start) from None
        token = next_token(text, skipped.end)
    return token


def _read_value(text: str, pos: int) -> ReadResult:
    return _read_token(text, _next_significant(text, pos))


def _read_token(text: str, token: Token) -> ReadResult:
    if token.kind == ATOM:
        span = Span(token.start, token.end)
        return ReadResult(token.value, token.start, token.end, [(token.value, span)])

    if token.kind == CLOSE:
        raise ReadBoundary(
            f"Unexpected {token.value!r}", token.start, delimiter=token.value
        )

    if token.kind == DOT:
        raise MalformedSyntax("Unexpected '.'", token.start)

    if token.kind == PREFIX:
        try:
            inner = _read_value(text, token.end)
        except (EndOfInput, ReadBoundary):
            raise MalformedSyntax(
                f"Missing form after {token.value!r}", token.start
            ) from None
        form = SList((_PREFIX_SYMBOLS[token.value], inner.form))
        spans = inner.spans
        spans.append((form, Span(token.start, inner.end)))
        return ReadResult(form, token.start, inner.end, spans)

    return _read_compound(text, token)


def _read_compound(text: str, opener: Token) -> ReadResult:
    """Read children after an opening delimiter up to its closer"""
    closer = CLOSERS[opener.value]
    items: List[Form] = []
    spans: List[Tuple[Form, Span]] = []
    tail = _NO_TAIL
    pos = opener.end

    while True:
        token = _next_in_compound(text, pos, opener)

        if token.kind == CLOSE:
            if token.value != closer:
                raise MalformedSyntax(
                    f"Mismatched {token.value!r} for {opener.value!r} at {opener.start}",
                    token.start,
                )
            end = token.end
            break

        if token.kind == DOT:
            if opener.value != "(" or not items:
                raise MalformedSyntax("Unexpected '.'", token.start)
            try:
                tail_result = _read_value(text, token.end)
            except (EndOfInput, ReadBoundary):
                raise MalformedSyntax("Missing form after '.'", token.start) from None
            spans.extend(tail_result.spans)
            tail = tail_result.form
            closing = _next_in_compound(text, tail_result.end, opener)
            if closing.kind != CLOSE or closing.value != closer:
                raise MalformedSyntax(
                    f"Expected {closer!r} after dotted tail", closing.start
                )
            end = closing.end
            break

        child = _read_token(text, token)
        items.append(child.form)
        spans.extend(child.spans)
        pos = child.end

    if opener.value == "(":
        form = _make_list(items, tail)
    else:
        form = Vector(tuple(items))

    spans.append((form, Span(opener.start, end)))
    return ReadResult(form, opener.start, end, spans)


def _next_in_compound(text: str, pos: int, opener: Token) -> Token:
    try:
        return _next_significant(text, pos)
    except EndOfInput:
        raise MalformedSyntax(
            f"Unterminated {opener.value!r}", opener.start
        ) from None


def _make_list(items: List[Form], tail) -> Form:
    """Build a list, folding list and nil tails into a proper list"""
    if tail is _NO_TAIL or tail is None:
        return SList(tuple(items))
    if isinstance(tail, SList):
        return SList(tuple(items) + tail.items)
    if isinstance(tail, ImproperList):
        return ImproperList(tuple(items) + tail.items, tail.tail)
    return ImproperList(tuple(items), tail)
