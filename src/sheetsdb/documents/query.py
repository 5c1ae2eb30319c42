"""
Query and sort compilation.

A query maps field names to term specifications; every term must hold for a
document to match. Term specifications:

- ``"ca*"``: wildcard pattern, ``*`` matches any run of characters, anchored at both ends
- ``"cat"``: exact string equality
- ``re.compile(...)``: regular expression, searched in the field value
- ``callable``: predicate called with the field value
- ``{"$gt": 3, "$lte": 10}``: operators ``$gt``, ``$lt``, ``$gte``, ``$lte``,
  ``$contains`` and ``$empty``
- anything else: equality against its string form (``{"_row": 2}``)

A sort maps field names to weights; a negative weight sorts that key descending.
"""

import functools
import locale
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from sheetsdb.exceptions import InvalidArgumentError

_DIGITS_RE = re.compile(r"^\d+$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class TermType(Enum):
    """Kind of predicate a query term applies."""
    EQUALS = "equals"
    PATTERN = "pattern"
    CONTAINS = "contains"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    EMPTY = "empty"
    PREDICATE = "predicate"


_OPERATORS: Dict[str, TermType] = {
    "$contains": TermType.CONTAINS,
    "$gt": TermType.GT,
    "$lt": TermType.LT,
    "$gte": TermType.GTE,
    "$lte": TermType.LTE,
    "$empty": TermType.EMPTY,
}


def parse_leading_int(value: Any) -> Optional[int]:
    """Parse the integer prefix of a value ("42px" -> 42), or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if value is None:
        return None
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def _as_number(value: Any) -> Any:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and _DIGITS_RE.match(value):
        return int(value)
    return None


def _operand_number(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Comparison operand must be numeric, got {value!r}") from e


def wildcard_to_pattern(term: str) -> "re.Pattern[str]":
    """Compile a wildcard string into an anchored regular expression."""
    parts = [re.escape(part) for part in term.split("*")]
    return re.compile("^" + "(.*?)".join(parts) + "$", re.DOTALL)


@dataclass
class QueryTerm:
    """One compiled predicate over a single document field.

    Attributes:
        key: Field name
        type: Predicate kind
        value: Operand (string, compiled pattern, number, flag or callable)
    """
    key: str
    type: TermType
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        """Return True when the document's field satisfies this term."""
        item = document.get(self.key)

        if self.type is TermType.EQUALS:
            return item is not None and str(item) == str(self.value)
        if self.type is TermType.PATTERN:
            return item is not None and self.value.search(str(item)) is not None
        if self.type is TermType.CONTAINS:
            return item is not None and str(self.value) in str(item)
        if self.type is TermType.EMPTY:
            return (not item) if self.value else bool(item)
        if self.type is TermType.PREDICATE:
            return bool(self.value(item))

        number = parse_leading_int(item)
        if number is None:
            return False
        if self.type is TermType.GT:
            return number > self.value
        if self.type is TermType.LT:
            return number < self.value
        if self.type is TermType.GTE:
            return number >= self.value
        if self.type is TermType.LTE:
            return number <= self.value
        return True


def build_filter(query: Optional[Mapping[str, Any]]) -> List[QueryTerm]:
    """Compile a query mapping into a list of terms.

    Args:
        query: Field name to term specification; None means no terms

    Returns:
        Terms in query order (an operator mapping yields one term per operator)

    Raises:
        InvalidArgumentError: If a comparison operand is not numeric
    """
    terms: List[QueryTerm] = []
    if not query:
        return terms

    for key, term in query.items():
        if isinstance(term, str):
            if "*" in term:
                terms.append(QueryTerm(key, TermType.PATTERN, wildcard_to_pattern(term)))
            else:
                terms.append(QueryTerm(key, TermType.EQUALS, term))
        elif isinstance(term, re.Pattern):
            terms.append(QueryTerm(key, TermType.PATTERN, term))
        elif callable(term):
            terms.append(QueryTerm(key, TermType.PREDICATE, term))
        elif isinstance(term, Mapping):
            for op, value in term.items():
                term_type = _OPERATORS.get(op)
                if term_type is None:
                    continue
                if term_type in (TermType.GT, TermType.LT, TermType.GTE, TermType.LTE):
                    value = _operand_number(value)
                terms.append(QueryTerm(key, term_type, value))
        else:
            terms.append(QueryTerm(key, TermType.EQUALS, str(term)))

    return terms


def build_filter_fn(query: Optional[Mapping[str, Any]]) -> Callable[[Mapping[str, Any]], bool]:
    """Compile a query into a predicate over documents (all terms AND-ed)."""
    terms = build_filter(query)

    def matches(document: Mapping[str, Any]) -> bool:
        return all(term.matches(document) for term in terms)

    return matches


def build_sort_fn(sort: Optional[Mapping[str, Any]]) -> Optional[Callable[[Any, Any], int]]:
    """Compile a sort mapping into a comparison function.

    Keys are compared in mapping order and the first non-zero result wins. Two
    values compare numerically when both are numbers or digit strings, otherwise
    with the locale's collation.

    Args:
        sort: Field name to weight; negative weights sort descending

    Returns:
        A ``cmp(a, b)`` function, or None when there is nothing to sort by
    """
    if not sort:
        return None

    keys = list(sort.items())

    def compare(a: Mapping[str, Any], b: Mapping[str, Any]) -> int:
        for key, weight in keys:
            av = a.get(key)
            bv = b.get(key)
            an = _as_number(av)
            bn = _as_number(bv)
            if an is not None and bn is not None:
                n = (an > bn) - (an < bn)
            else:
                n = locale.strcoll("" if av is None else str(av), "" if bv is None else str(bv))
                n = (n > 0) - (n < 0)
            if n != 0:
                return -n if weight < 0 else n
        return 0

    return compare


def sort_documents(documents: List[Any], sort: Optional[Mapping[str, Any]]) -> List[Any]:
    """Return the documents sorted by ``sort`` (stable), or unchanged."""
    compare = build_sort_fn(sort)
    if compare is None:
        return list(documents)
    return sorted(documents, key=functools.cmp_to_key(compare))
