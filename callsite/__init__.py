"""
callsite - Find callers in s-expression source

Reads Lisp-family source while tracking the span of every form, then
finds the lists headed by a given symbol.
"""

__version__ = "1.0.0"
__author__ = "callsite Team"
