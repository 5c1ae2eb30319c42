"""
Document module for sheetsdb.

This module maps sheet rows to JSON-like documents and implements the query,
sort and update-operator language over them.
"""

from sheetsdb.documents.header import ROW_FIELD, Header
from sheetsdb.documents.operators import (
    FieldUpdate,
    OperatorType,
    UpdateOperator,
    compile_patch,
)
from sheetsdb.documents.query import (
    QueryTerm,
    TermType,
    build_filter,
    build_filter_fn,
    build_sort_fn,
)
from sheetsdb.documents.sheet import DocumentList, Sheet, filter_data, values_to_data

__all__ = [
    "ROW_FIELD",
    "Header",
    "FieldUpdate",
    "OperatorType",
    "UpdateOperator",
    "compile_patch",
    "QueryTerm",
    "TermType",
    "build_filter",
    "build_filter_fn",
    "build_sort_fn",
    "DocumentList",
    "Sheet",
    "filter_data",
    "values_to_data",
]
