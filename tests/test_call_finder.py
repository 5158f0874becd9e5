"""
Unit tests for the call finder.

Run with: pytest tests/test_call_finder.py -v
"""

import pytest

from callsite.analysis.call_finder import (
    as_symbol,
    find_calls,
    find_calls_in_document,
    is_call_to,
    parse_symbol,
)
from callsite.analysis.reader import read_document
from callsite.core.models import ImproperList, SList, Symbol


def S(name):
    return Symbol(name)


def L(*items):
    return SList(tuple(items))


def calls(text, symbol="bar"):
    forms, _ = read_document(text)
    return find_calls_in_document(forms, symbol)


class TestFindCalls:
    """Lists headed by the symbol are call-sites, wherever they nest."""

    def test_nested_calls_in_order(self, bar):
        matches = calls("(foo (bar 1) (baz (bar 2)))", bar)
        assert matches == [L(bar, 1), L(bar, 2)]

    def test_no_false_positives(self):
        assert calls("(bar-related (x bar))") == []

    def test_call_inside_call_arguments(self, bar):
        matches = calls("(bar (bar 1))", bar)
        assert matches == [L(bar, L(bar, 1)), L(bar, 1)]

    def test_matches_are_the_parsed_subforms(self, bar):
        forms, _ = read_document("(foo (bar 1))")
        matches = find_calls(forms[0], bar)
        assert matches[0] is forms[0].items[1]

    def test_across_top_level_forms(self):
        matches = calls("(bar 1)\n(foo)\n(defun f () (bar 2))")
        assert matches == [L(S("bar"), 1), L(S("bar"), 2)]

    def test_atoms_never_match(self, bar):
        assert find_calls(bar, bar) == []
        assert find_calls(42, bar) == []
        assert find_calls(L(), bar) == []

    def test_string_head_is_not_a_symbol(self):
        assert calls('("bar" 1)') == []

    def test_binding_forms_match_syntactically(self):
        # (let ((bar 1)) ...) places bar first in a list too
        assert calls("(let ((bar 1)) bar)") == [L(S("bar"), 1)]


class TestQuotedAndVectorForms:
    """Reader prefixes and vectors get no special treatment."""

    def test_quoted_list_is_searched(self):
        assert calls("'(bar 1)") == [L(S("bar"), 1)]

    def test_function_reference_is_not_a_call(self):
        assert calls("(mapcar #'bar items)") == []

    def test_vectors_are_not_searched(self):
        assert calls("[(bar 1)]") == []
        assert calls("(foo #((bar 1)))") == []


class TestImproperLists:
    """Dotted lists can match but are never descended into."""

    def test_dotted_call_matches(self):
        matches = calls("(bar . 1)")
        assert matches == [ImproperList((S("bar"),), 1)]

    def test_no_recursion_into_dotted_list(self):
        # (x . ((bar 1) . 2)) reads as the dotted list (x (bar 1) . 2)
        forms, _ = read_document("(x . ((bar 1) . 2))")
        assert isinstance(forms[0], ImproperList)
        assert find_calls(forms[0], "bar") == []

    def test_dotted_list_inside_proper_list(self):
        matches = calls("(foo (bar . rest) (baz . (bar 2)))")
        # (baz . (bar 2)) normalises to the proper list (baz bar 2)
        assert matches == [ImproperList((S("bar"),), S("rest"))]


class TestIsCallTo:

    def test_shapes(self, bar):
        assert is_call_to(L(bar), bar)
        assert is_call_to(ImproperList((bar,), 1), bar)
        assert not is_call_to(L(S("foo"), bar), bar)
        assert not is_call_to(L(), bar)
        assert not is_call_to(bar, bar)


class TestSymbols:
    """Target symbols can be given by name or parsed from text."""

    def test_name_and_symbol_are_equivalent(self):
        forms, _ = read_document("(foo (bar 1))")
        assert find_calls(forms[0], "bar") == find_calls(forms[0], S("bar"))

    def test_as_symbol(self):
        assert as_symbol("x") == S("x")
        assert as_symbol(S("x")) == S("x")
        with pytest.raises(TypeError):
            as_symbol(3)

    def test_parse_symbol(self):
        assert parse_symbol("foo") == S("foo")
        assert parse_symbol("  my-pkg:helper  ") == S("my-pkg:helper")

    @pytest.mark.parametrize("text", ["", "(foo)", "foo bar", "42", '"foo"', ")"])
    def test_parse_symbol_rejects(self, text):
        with pytest.raises(ValueError):
            parse_symbol(text)
