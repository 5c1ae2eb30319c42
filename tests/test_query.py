"""
Unit tests for query and sort compilation.

Tests cover:
- Term compilation for each query form
- Term matching, including missing fields and non-numeric comparisons
- AND-ing of terms
- Sort: numeric vs string comparison, descending keys, multi-key order, stability
"""

import re

import pytest

from sheetsdb.documents.query import (
    QueryTerm,
    TermType,
    build_filter,
    build_filter_fn,
    build_sort_fn,
    sort_documents,
    wildcard_to_pattern,
)
from sheetsdb.exceptions import InvalidArgumentError


def _docs(*names):
    return [{"_row": i + 2, "name": name} for i, name in enumerate(names)]


class TestBuildFilter:
    """Test suite for term compilation."""

    def test_empty_queries(self):
        assert build_filter(None) == []
        assert build_filter({}) == []

    def test_plain_string_is_equality(self):
        assert build_filter({"name": "cat"}) == [QueryTerm("name", TermType.EQUALS, "cat")]

    def test_wildcard_string_is_pattern(self):
        [term] = build_filter({"name": "ca*"})
        assert term.type is TermType.PATTERN
        assert term.value.pattern == "^ca(.*?)$"

    def test_compiled_regex(self):
        pattern = re.compile(r"^d")
        assert build_filter({"name": pattern}) == [QueryTerm("name", TermType.PATTERN, pattern)]

    def test_callable(self):
        [term] = build_filter({"name": len})
        assert term.type is TermType.PREDICATE

    def test_operator_mapping(self):
        terms = build_filter({"age": {"$gt": 3, "$lte": "10", "$bogus": 1}})
        assert terms == [
            QueryTerm("age", TermType.GT, 3),
            QueryTerm("age", TermType.LTE, 10.0),
        ]

    def test_other_values_compare_as_strings(self):
        assert build_filter({"_row": 2}) == [QueryTerm("_row", TermType.EQUALS, "2")]

    def test_non_numeric_comparison_operand(self):
        with pytest.raises(InvalidArgumentError, match="numeric"):
            build_filter({"age": {"$gt": "old"}})


class TestWildcard:
    """Test suite for wildcard patterns."""

    @pytest.mark.parametrize("term,value,expected", [
        ("ca*", "cat", True),
        ("ca*", "ca", True),
        ("ca*", "scat", False),
        ("*at", "cat", True),
        ("*at", "cats", False),
        ("*a*", "bar", True),
        ("c*t", "coat", True),
        ("a.b*", "axb", False),
        ("a.b*", "a.bc", True),
    ])
    def test_anchored_match(self, term, value, expected):
        assert bool(wildcard_to_pattern(term).search(value)) is expected


class TestFilterFn:
    """Test suite for matching documents."""

    def test_wildcard_keeps_relative_order(self):
        docs = _docs("cat", "car", "dog")
        matches = [d["name"] for d in docs if build_filter_fn({"name": "ca*"})(d)]
        assert matches == ["cat", "car"]

    def test_equality(self):
        assert build_filter_fn({"name": "cat"})({"name": "cat"})
        assert not build_filter_fn({"name": "cat"})({"name": "cats"})

    def test_row_equality_with_int(self):
        assert build_filter_fn({"_row": 3})({"_row": 3})
        assert not build_filter_fn({"_row": 3})({"_row": 4})

    def test_missing_field_never_equals(self):
        assert not build_filter_fn({"name": "None"})({})

    def test_contains(self):
        match = build_filter_fn({"kind": {"$contains": "line"}})
        assert match({"kind": "feline"})
        assert not match({"kind": "canine"})
        assert not match({})

    @pytest.mark.parametrize("op,expected", [
        ("$gt", [10]),
        ("$gte", [5, 10]),
        ("$lt", [2]),
        ("$lte", [2, 5]),
    ])
    def test_comparisons(self, op, expected):
        docs = [{"age": "2"}, {"age": "5"}, {"age": "10"}]
        match = build_filter_fn({"age": {op: 5}})
        assert [int(d["age"]) for d in docs if match(d)] == expected

    def test_comparison_uses_leading_integer(self):
        assert build_filter_fn({"size": {"$gt": 40}})({"size": "42px"})

    def test_comparison_with_non_numeric_value_fails(self):
        match = build_filter_fn({"age": {"$gt": 0}})
        assert not match({"age": "unknown"})
        assert not match({"age": ""})
        assert not match({})

    def test_empty(self):
        is_empty = build_filter_fn({"kind": {"$empty": True}})
        not_empty = build_filter_fn({"kind": {"$empty": False}})
        assert is_empty({"kind": ""})
        assert is_empty({})
        assert not is_empty({"kind": "feline"})
        assert not_empty({"kind": "feline"})
        assert not not_empty({"kind": ""})

    def test_predicate(self):
        match = build_filter_fn({"name": lambda v: v is not None and v.endswith("g")})
        assert match({"name": "dog"})
        assert not match({"name": "cat"})

    def test_terms_are_anded(self):
        match = build_filter_fn({"name": "c*", "age": {"$gt": 3, "$lt": 8}})
        assert match({"name": "cat", "age": "5"})
        assert not match({"name": "cat", "age": "10"})
        assert not match({"name": "dog", "age": "5"})

    def test_no_query_matches_everything(self):
        assert build_filter_fn(None)({"name": "anything"})


class TestSort:
    """Test suite for sort compilation."""

    def test_no_sort(self):
        assert build_sort_fn(None) is None
        assert build_sort_fn({}) is None

    def test_numeric_strings_sort_numerically(self):
        docs = [{"v": "10"}, {"v": "2"}, {"v": "9"}]
        assert [d["v"] for d in sort_documents(docs, {"v": 1})] == ["2", "9", "10"]

    def test_mixed_values_sort_as_strings(self):
        docs = [{"v": "a"}, {"v": "10"}]
        assert [d["v"] for d in sort_documents(docs, {"v": 1})] == ["10", "a"]
        compare = build_sort_fn({"v": 1})
        assert compare({"v": "10"}, {"v": "9x"}) < 0

    def test_native_numbers(self):
        docs = [{"v": 10}, {"v": 2.5}]
        assert [d["v"] for d in sort_documents(docs, {"v": 1})] == [2.5, 10]

    def test_descending(self):
        docs = [{"v": "10"}, {"v": "2"}, {"v": "9"}]
        assert [d["v"] for d in sort_documents(docs, {"v": -1})] == ["10", "9", "2"]

    def test_multi_key(self):
        docs = [
            {"kind": "b", "age": "1"},
            {"kind": "a", "age": "3"},
            {"kind": "a", "age": "7"},
        ]
        result = sort_documents(docs, {"kind": 1, "age": -1})
        assert [(d["kind"], d["age"]) for d in result] == [("a", "7"), ("a", "3"), ("b", "1")]

    def test_ties_keep_original_order(self):
        docs = [{"k": "x", "i": 1}, {"k": "x", "i": 2}, {"k": "x", "i": 3}]
        assert [d["i"] for d in sort_documents(docs, {"k": -1})] == [1, 2, 3]

    def test_equal_values_compare_zero(self):
        compare = build_sort_fn({"v": -1})
        assert compare({"v": "5"}, {"v": "5"}) == 0
