"""
Source Code Parsers

Tokenizer for symbolic-expression source with exact token offsets.
"""

from .sexp_parser import Token, next_token, skip_atmosphere, parse_atom

__all__ = [
    "Token",
    "next_token",
    "skip_atmosphere",
    "parse_atom",
]
