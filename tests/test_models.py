"""
Unit tests for callsite models.

Tests form printing, type-strict keys, spans and the span table.
Run with: pytest tests/test_models.py -v
"""

import pytest

from callsite.analysis.reader import read_form
from callsite.core.models import (
    ImproperList,
    SList,
    Span,
    SpanTable,
    Symbol,
    Vector,
    children,
    form_key,
    format_form,
    is_compound,
)


class TestForms:
    """Tests for form helpers."""

    def test_format_form_reads_back(self):
        source = "(a 'b `(c ,d ,@e) #'f [1 2.5] \"s\\\"x\\n\" #t #f nil (x . y) ())"
        form = read_form(source).form
        assert read_form(format_form(form)).form == form

    def test_format_form_prefixes(self):
        assert format_form(SList((Symbol("quote"), Symbol("x")))) == "'x"
        assert format_form(SList((Symbol("quote"), Symbol("x"), Symbol("y")))) == "(quote x y)"

    def test_format_form_rejects_non_forms(self):
        with pytest.raises(TypeError):
            format_form(object())

    def test_escaped_symbol_reads_back(self):
        form = SList((Symbol("foo bar"), Symbol("a(b"), Symbol('q"x')))
        text = format_form(form)
        assert text == '(foo\\ bar a\\(b q\\"x)'
        assert read_form(text).form == form

    def test_form_key_is_type_strict(self):
        keys = {form_key(1), form_key(1.0), form_key(True)}
        assert len(keys) == 3
        assert form_key(SList((1,))) != form_key(Vector((1,)))

    def test_compound_helpers(self):
        dotted = ImproperList((Symbol("a"),), Symbol("b"))
        assert children(dotted) == (Symbol("a"), Symbol("b"))
        assert is_compound(dotted)
        assert children(Symbol("a")) == ()


class TestSpan:
    """Tests for Span."""

    @pytest.mark.parametrize("start,end", [(3, 3), (5, 2), (-1, 4)])
    def test_invalid_spans(self, start, end):
        with pytest.raises(ValueError):
            Span(start, end)

    def test_line_column(self):
        text = "(a)\n  (b\n   c)"
        assert Span(0, 3).line_column(text) == (1, 0)
        assert Span(6, 14).line_column(text) == (2, 2)
        assert Span(12, 13).line_column(text) == (3, 3)

    def test_containment(self):
        outer, inner = Span(0, 10), Span(2, 5)
        assert outer.contains(inner) and not inner.contains(outer)
        assert Span(0, 3).overlaps(Span(2, 4))
        assert not Span(0, 2).overlaps(Span(2, 4))
        assert inner.snippet("0123456789") == "234"
        assert inner.length == 3


class TestSpanTable:
    """Tests for SpanTable lookup."""

    def test_lookup(self):
        table = SpanTable()
        form = SList((Symbol("f"),))
        table.record(form, Span(0, 3))
        assert table.get(form) == Span(0, 3)
        assert table[SList((Symbol("f"),))] == Span(0, 3)
        assert form in table
        assert table.get(Symbol("g")) is None
        with pytest.raises(KeyError):
            table[Symbol("g")]

    def test_collapse_keeps_last_span(self):
        table = SpanTable()
        table.merge([(SList((1,)), Span(0, 3)), (SList((1,)), Span(4, 7))])
        assert len(table) == 1
        assert table.items() == [(SList((1,)), Span(4, 7))]
        assert table.occurrences(SList((1,))) == [Span(0, 3), Span(4, 7)]

    def test_numbers_do_not_collide(self):
        table = SpanTable()
        table.merge([(1, Span(0, 1)), (1.0, Span(2, 5)), (True, Span(6, 8))])
        assert len(table) == 3
        assert table[1] == Span(0, 1)

    def test_by_position_keeps_each_node(self):
        table = SpanTable(collapse_duplicates=False)
        first, second = SList((1,)), SList((1,))
        table.merge([(first, Span(0, 3)), (second, Span(4, 7))])
        assert len(table) == 2
        assert table[first] == Span(0, 3)
        assert table[second] == Span(4, 7)
        assert list(table) == [first, second]
