"""
Form Model - Parsed symbolic-expression values

Atomic forms use plain Python values where they map cleanly:
- str: string literals
- int / float: numbers
- bool: #t / #f
- None: nil

Everything else gets a small frozen dataclass so that forms stay
immutable, hashable and compare structurally.
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class Symbol:
    """A symbol, e.g. `defun` or `my-package:helper`"""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Char:
    """A character literal, e.g. #\\a or #\\space"""

    name: str


@dataclass(frozen=True)
class SList:
    """
    A proper list.

    `()` reads as an empty SList. Lists whose dotted tail is itself a
    list (or nil) are normalised into an SList by the reader.
    """

    items: Tuple[Any, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True)
class ImproperList:
    """
    A dotted list whose tail is not a list, e.g. `(a b . c)`.

    The call finder does not descend into these.
    """

    items: Tuple[Any, ...]
    tail: Any


@dataclass(frozen=True)
class Vector:
    """A vector literal, `[a b]` or `#(a b)`"""

    items: Tuple[Any, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


Compound = Union[SList, ImproperList, Vector]
Form = Any  # Symbol | Char | Compound | str | int | float | bool | None

QUOTE = Symbol("quote")
QUASIQUOTE = Symbol("quasiquote")
UNQUOTE = Symbol("unquote")
UNQUOTE_SPLICING = Symbol("unquote-splicing")
FUNCTION = Symbol("function")


def is_compound(form: Form) -> bool:
    """Check if a form is a list, dotted list or vector"""
    return isinstance(form, (SList, ImproperList, Vector))


def children(form: Form) -> Tuple[Any, ...]:
    """Direct subforms of a compound form in source order (tail last)"""
    if isinstance(form, ImproperList):
        return form.items + (form.tail,)
    if isinstance(form, (SList, Vector)):
        return form.items
    return ()


def form_key(form: Form) -> tuple:
    """
    Build a type-strict hashable key for a form.

    Python treats 1, 1.0 and True as equal dict keys; Lisp readers do
    not, so the span table keys on this instead of the raw value.
    """
    if isinstance(form, (SList, Vector)):
        return (type(form).__name__, tuple(form_key(item) for item in form.items))
    if isinstance(form, ImproperList):
        return (
            "ImproperList",
            tuple(form_key(item) for item in form.items),
            form_key(form.tail),
        )
    return (type(form).__name__, form)


_STRING_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t"}

# Characters that must be backslash-escaped inside a symbol name
_SYMBOL_SPECIALS = frozenset(" \t\r\n\f\v()[]\";'`,\\")

_PREFIXES = {
    QUOTE: "'",
    QUASIQUOTE: "`",
    UNQUOTE: ",",
    UNQUOTE_SPLICING: ",@",
    FUNCTION: "#'",
}


def format_form(form: Form) -> str:
    """
    Print a form back as source text.

    Reading the result yields a form equal to the input. Two-element
    lists headed by a reader-prefix symbol are printed with the prefix.
    """
    if isinstance(form, Symbol):
        return "".join("\\" + c if c in _SYMBOL_SPECIALS else c for c in form.name)
    if isinstance(form, bool):
        return "#t" if form else "#f"
    if form is None:
        return "nil"
    if isinstance(form, str):
        return '"' + "".join(_STRING_ESCAPES.get(c, c) for c in form) + '"'
    if isinstance(form, (int, float)):
        return repr(form)
    if isinstance(form, Char):
        return f"#\\{form.name}"
    if isinstance(form, SList):
        if len(form.items) == 2 and form.items[0] in _PREFIXES:
            return _PREFIXES[form.items[0]] + format_form(form.items[1])
        return "(" + " ".join(format_form(item) for item in form.items) + ")"
    if isinstance(form, ImproperList):
        inner = " ".join(format_form(item) for item in form.items)
        return f"({inner} . {format_form(form.tail)})"
    if isinstance(form, Vector):
        return "[" + " ".join(format_form(item) for item in form.items) + "]"
    raise TypeError(f"Not a form: {form!r}")
