"""
Call Finder

Collects call-sites of a symbol from parsed forms: lists (proper or
dotted) whose first element is the symbol.

This is syntactic matching only. A binding form that happens to place the
symbol first matches too, calls made through funcall/apply or a quoted
function reference do not.
"""

from typing import Iterable, List, Union

from .exceptions import SexpReadError
from .reader import read_form
from ..core.models import Form, ImproperList, SList, Symbol


def as_symbol(symbol: Union[Symbol, str]) -> Symbol:
    """Coerce a plain name to a Symbol"""
    if isinstance(symbol, Symbol):
        return symbol
    if isinstance(symbol, str):
        return Symbol(symbol)
    raise TypeError(f"Expected a symbol, got {type(symbol).__name__}")


def parse_symbol(text: str) -> Symbol:
    """
    Read a target symbol from text.

    Raises:
        ValueError: text is not exactly one symbol
    """
    try:
        result = read_form(text)
    except SexpReadError as e:
        raise ValueError(f"Cannot read symbol from {text!r}: {e}") from None

    if text[result.end :].strip():
        raise ValueError(f"Expected a single symbol, got {text!r}")
    if not isinstance(result.form, Symbol):
        raise ValueError(f"Not a symbol: {text!r}")
    return result.form


def is_call_to(form: Form, symbol: Symbol) -> bool:
    """Check if form is a list or dotted list headed by symbol"""
    if isinstance(form, SList):
        return bool(form.items) and form.items[0] == symbol
    if isinstance(form, ImproperList):
        return form.items[0] == symbol
    return False


def find_calls(form: Form, symbol: Union[Symbol, str]) -> List[Form]:
    """
    Find every call-site of symbol within form.

    A matching form is returned as-is (not copied). Proper lists are
    searched element by element so nested calls are found too; dotted
    lists can match but are not descended into. Atoms and vectors never
    match.

    Args:
        form: Parsed form to search
        symbol: Symbol (or name) to look for in head position

    Returns:
        Matches in source order, outer calls before the calls they contain
    """
    symbol = as_symbol(symbol)
    matches: List[Form] = []
    _collect(form, symbol, matches)
    return matches


def _collect(form: Form, symbol: Symbol, matches: List[Form]) -> None:
    if is_call_to(form, symbol):
        matches.append(form)
    if isinstance(form, SList):
        for element in form.items:
            _collect(element, symbol, matches)


def find_calls_in_document(
    forms: Iterable[Form], symbol: Union[Symbol, str]
) -> List[Form]:
    """Find call-sites of symbol across a document's top-level forms"""
    symbol = as_symbol(symbol)
    matches: List[Form] = []
    for form in forms:
        _collect(form, symbol, matches)
    return matches
