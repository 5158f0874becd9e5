"""
S-expression Tokenizer

Splits symbolic-expression source into tokens that carry both their start
and end offsets, so the reader never has to scan backward to find where a
value began.

Handles:
- Atmosphere: whitespace, `;` line comments, nested `#| ... |#` blocks
- Delimiters: ( ) [ ] #(
- Reader prefixes: ' ` , ,@ #'
- Datum comments: #;
- Atoms: symbols, integers, floats, strings, #t/#f, nil, #\\ characters
- Emacs Lisp ?x character literals, read as their integer code
- Radix integers: #xFF #o17 #b101 #24r1k
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..exceptions import EndOfInput, MalformedSyntax
from ...core.models import Char, Symbol


# Token kinds
OPEN = "open"
CLOSE = "close"
PREFIX = "prefix"
DOT = "dot"
DATUM_COMMENT = "datum_comment"
ATOM = "atom"

# Closing delimiter for each opener
CLOSERS = {"(": ")", "[": "]", "#(": ")"}

# Characters that end a symbol or number
TERMINATORS = frozenset(" \t\r\n\f\v()[]\";'`,")

_INT_RE = re.compile(r"[+-]?\d+\Z")
_FLOAT_RE = re.compile(
    r"[+-]?(?:\d+\.\d*|\.\d+)(?:[eE][+-]?\d+)?\Z|[+-]?\d+[eE][+-]?\d+\Z"
)

_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "f": "\f", "0": "\0"}

_BOOLEANS = {"#t": True, "#true": True, "#f": False, "#false": False}

_RADIX_RE = re.compile(r"#(?:([xXoObB])|(\d+)[rR])([+-]?[0-9a-zA-Z]+)\Z")
_RADIX_BASES = {"x": 16, "o": 8, "b": 2}

# ?\X escapes that name a single control character
_CHAR_ESCAPES = {
    "a": 7, "b": 8, "t": 9, "n": 10, "v": 11,
    "f": 12, "r": 13, "e": 27, "s": 32, "d": 127,
}
# ?\X- modifier prefixes and the bit each one sets
_MODIFIER_BITS = {
    "A": 1 << 22, "s": 1 << 23, "H": 1 << 24, "S": 1 << 25, "M": 1 << 27,
}
_CONTROL_BIT = 1 << 26
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCTAL_DIGITS = frozenset("01234567")


@dataclass(frozen=True)
class Token:
    """A token with its [start, end) offsets"""

    kind: str
    value: Any
    start: int
    end: int

    def __repr__(self):
        return f"Token({self.kind}, {self.value!r}, {self.start}:{self.end})"


def skip_atmosphere(text: str, pos: int) -> int:
    """
    Skip whitespace and comments.

    Args:
        text: Source text
        pos: Offset to start from

    Returns:
        Offset of the next significant character (len(text) at the end)

    Raises:
        MalformedSyntax: An unterminated #| block comment
    """
    n = len(text)
    while pos < n:
        c = text[pos]
        if c.isspace():
            pos += 1
        elif c == ";":
            newline = text.find("\n", pos)
            pos = n if newline == -1 else newline + 1
        elif text.startswith("#|", pos):
            pos = _skip_block_comment(text, pos)
        else:
            break
    return pos


def _skip_block_comment(text: str, start: int) -> int:
    """Skip a possibly nested #| ... |# comment"""
    depth = 0
    pos = start
    n = len(text)
    while pos < n:
        if text.startswith("#|", pos):
            depth += 1
            pos += 2
        elif text.startswith("|#", pos):
            depth -= 1
            pos += 2
            if depth == 0:
                return pos
        else:
            pos += 1
    raise MalformedSyntax("Unterminated block comment", start)


def _scan_constituents(text: str, pos: int) -> int:
    """
    Return the offset just past a run of symbol constituents.

    A backslash escapes the character after it, so `foo\\ bar` is one run.
    """
    n = len(text)
    while pos < n and text[pos] not in TERMINATORS:
        pos += 2 if text[pos] == "\\" else 1
    return min(pos, n)


def _unescape_symbol(word: str) -> str:
    """Drop the backslashes from an escaped symbol name"""
    return re.sub(r"\\(.)", r"\1", word, flags=re.DOTALL)


def parse_atom(token: str) -> Any:
    """
    Convert a bare token to its atomic value.

    Integers and floats become numbers, `nil` becomes None and everything
    else is a Symbol.
    """
    if _INT_RE.match(token):
        return int(token)
    if _FLOAT_RE.match(token):
        return float(token)
    if token == "nil":
        return None
    return Symbol(token)


def _read_string(text: str, start: int) -> Token:
    """Read a string literal starting at the opening quote"""
    buf = []
    pos = start + 1
    n = len(text)
    while pos < n:
        c = text[pos]
        if c == '"':
            return Token(ATOM, "".join(buf), start, pos + 1)
        if c == "\\":
            if pos + 1 >= n:
                break
            esc = text[pos + 1]
            if esc != "\n":  # backslash-newline is a line continuation
                buf.append(_STRING_ESCAPES.get(esc, esc))
            pos += 2
            continue
        buf.append(c)
        pos += 1
    raise MalformedSyntax("Unterminated string", start)


def _read_dispatch(text: str, start: int) -> Token:
    """Read a token beginning with #"""
    nxt = text[start + 1 : start + 2]
    if nxt == "(":
        return Token(OPEN, "#(", start, start + 2)
    if nxt == "'":
        return Token(PREFIX, "#'", start, start + 2)
    if nxt == ";":
        return Token(DATUM_COMMENT, "#;", start, start + 2)
    if nxt == "\\":
        if start + 2 >= len(text):
            raise MalformedSyntax("Unterminated character literal", start)
        end = start + 3
        if text[start + 2].isalnum():
            end = _scan_constituents(text, end)
        return Token(ATOM, Char(text[start + 2 : end]), start, end)

    end = _scan_constituents(text, start + 1)
    word = text[start:end]
    if word in _BOOLEANS:
        return Token(ATOM, _BOOLEANS[word], start, end)
    radix = _RADIX_RE.match(word)
    if radix:
        letter, base, digits = radix.groups()
        base = _RADIX_BASES[letter.lower()] if letter else int(base)
        try:
            return Token(ATOM, int(digits, base), start, end)
        except ValueError:
            raise MalformedSyntax(f"Invalid radix number: {word!r}", start) from None
    raise MalformedSyntax(f"Invalid token: {word!r}", start)


def _control(code: int) -> int:
    """Apply the control modifier the way the Emacs reader does"""
    char = code & (_MODIFIER_BITS["A"] - 1)
    modifiers = code - char
    if char == ord("?"):
        return 127 | modifiers
    if ord("@") <= char <= ord("_") or ord("a") <= char <= ord("z"):
        return (char & 31) | modifiers
    return code | _CONTROL_BIT


def _scan_digits(text: str, pos: int, digits: frozenset, limit: Optional[int] = None) -> int:
    end = pos
    n = len(text) if limit is None else min(len(text), pos + limit)
    while end < n and text[end] in digits:
        end += 1
    return end


def _read_char_code(text: str, pos: int, start: int) -> Tuple[int, int]:
    """
    Read one character specification of a ?x literal.

    Args:
        text: Source text
        pos: Offset of the character or of its backslash escape
        start: Offset of the literal, for error reporting

    Returns:
        (character code, offset just past the specification)
    """
    n = len(text)
    if pos >= n:
        raise MalformedSyntax("Unterminated character literal", start)
    if text[pos] != "\\":
        return ord(text[pos]), pos + 1
    if pos + 1 >= n:
        raise MalformedSyntax("Unterminated character literal", start)

    esc = text[pos + 1]
    rest = pos + 2
    has_dash = text.startswith("-", rest)

    if esc in _MODIFIER_BITS and has_dash:
        code, end = _read_char_code(text, rest + 1, start)
        return code | _MODIFIER_BITS[esc], end
    if esc == "C" and has_dash:
        code, end = _read_char_code(text, rest + 1, start)
        return _control(code), end
    if esc == "^":
        code, end = _read_char_code(text, rest, start)
        return _control(code), end

    if esc in "xuU":
        limit = {"x": None, "u": 4, "U": 8}[esc]
        end = _scan_digits(text, rest, _HEX_DIGITS, limit)
        if end == rest or (limit and end - rest != limit):
            raise MalformedSyntax("Invalid hex character escape", start)
        return int(text[rest:end], 16), end
    if esc == "N" and text.startswith("{", rest):
        close = text.find("}", rest)
        if close == -1:
            raise MalformedSyntax("Unterminated character name", start)
        name = text[rest + 1 : close]
        if name.upper().startswith("U+"):
            try:
                return int(name[2:], 16), close + 1
            except ValueError:
                raise MalformedSyntax(f"Invalid character name: {name!r}", start) from None
        try:
            return ord(unicodedata.lookup(name)), close + 1
        except KeyError:
            raise MalformedSyntax(f"Unknown character name: {name!r}", start) from None
    if esc in _OCTAL_DIGITS:
        end = _scan_digits(text, pos + 1, _OCTAL_DIGITS, 3)
        return int(text[pos + 1 : end], 8), end
    if esc in _CHAR_ESCAPES:
        return _CHAR_ESCAPES[esc], rest
    return ord(esc), rest


def _read_question_char(text: str, start: int) -> Optional[Token]:
    """
    Read an Emacs Lisp character literal such as ?a, ?\\( or ?\\C-x.

    Returns:
        An ATOM token holding the character code, or None when the text
        after the literal continues a symbol (e.g. `?foo`)
    """
    code, end = _read_char_code(text, start + 1, start)
    if end < len(text) and text[end] not in TERMINATORS:
        return None
    return Token(ATOM, code, start, end)


def next_token(text: str, pos: int) -> Token:
    """
    Read the next token at or after pos.

    Args:
        text: Source text
        pos: Offset known not to be inside a string or comment

    Returns:
        The next Token, with exact start and end offsets

    Raises:
        EndOfInput: Only atmosphere remains
        MalformedSyntax: The next token is invalid or unterminated
    """
    start = skip_atmosphere(text, pos)
    if start >= len(text):
        raise EndOfInput("End of input", start)

    c = text[start]
    if c in "([":
        return Token(OPEN, c, start, start + 1)
    if c in ")]":
        return Token(CLOSE, c, start, start + 1)
    if c in "'`":
        return Token(PREFIX, c, start, start + 1)
    if c == ",":
        if text.startswith(",@", start):
            return Token(PREFIX, ",@", start, start + 2)
        return Token(PREFIX, ",", start, start + 1)
    if c == '"':
        return _read_string(text, start)
    if c == "#":
        return _read_dispatch(text, start)
    if c == "?":
        token = _read_question_char(text, start)
        if token is not None:
            return token

    end = _scan_constituents(text, start)
    word = text[start:end]
    if word == ".":
        return Token(DOT, ".", start, end)
    if "\\" in word:
        # An escaped name is always a symbol, never a number
        return Token(ATOM, Symbol(_unescape_symbol(word)), start, end)
    return Token(ATOM, parse_atom(word), start, end)
