"""
A1 addressing helpers.

This module converts between 1-indexed column numbers and column letters, turns
sparse column mappings into dense value rows, and builds/parses the sheet-qualified
ranges used by the grid adapter:

- Column letters: bijective base-26 (A = 1, Z = 26, AA = 27, AAA = 703)
- Row ranges: ``'<title>'!A<row>:ZZ<row>``
- Append results: ``'<title>'!<col><row>:<col><row>`` as reported by the API
"""

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

# Widest column addressed by whole-row ranges
LAST_COLUMN = "ZZ"

_LETTERS_RE = re.compile(r"^[A-Z]+$")
_DIGITS_RE = re.compile(r"^[0-9]+$")
_UPDATED_RANGE_RE = re.compile(r"^'([\s\S]+?)'!([A-Z]+)(\d+):([A-Z]+)(\d+)$")


def column_letter_to_index(letters: str) -> int:
    """Convert column letter(s) to a 1-indexed column number.

    Args:
        letters: Column letter(s) in A1 notation (A, Z, AA, etc.)

    Returns:
        Column number (1-indexed: A = 1, Z = 26, AA = 27, etc.)

    Raises:
        ValueError: If letters is empty or contains characters outside A-Z
    """
    if not letters or not _LETTERS_RE.match(letters):
        raise ValueError(f"Invalid column letters: {letters!r}")

    column = 0
    for char in letters:
        column = column * 26 + (ord(char) - 64)
    return column


def column_to_letter(column: int) -> str:
    """Convert a 1-indexed column number to column letter(s).

    Args:
        column: Column number (1-indexed, positive)

    Returns:
        Column letter(s) in A1 notation

    Raises:
        ValueError: If column is not positive
    """
    if column < 1:
        raise ValueError(f"Column number must be positive, got {column}")

    letters = ""
    while column > 0:
        remainder = (column - 1) % 26
        letters = chr(65 + remainder) + letters
        column = (column - remainder - 1) // 26
    return letters


@dataclass(frozen=True)
class ColumnRef:
    """Reference to a column, either by letter or by 1-indexed position.

    Exactly one of ``letter`` and ``index`` is set.
    """
    letter: Optional[str] = None
    index: Optional[int] = None

    @classmethod
    def parse(cls, key: Union[str, int]) -> Optional["ColumnRef"]:
        """Parse a sparse-mapping key into a column reference.

        Accepts column letters (``"C"``), numeric strings (``"3"``) and ints.
        Returns None for keys that are neither.
        """
        if isinstance(key, bool):
            return None
        if isinstance(key, int):
            return cls(index=key)
        if isinstance(key, str):
            if _LETTERS_RE.match(key):
                return cls(letter=key)
            if _DIGITS_RE.match(key):
                return cls(index=int(key))
        return None


def resolve_column(ref: ColumnRef) -> int:
    """Resolve a column reference to its 1-indexed column number."""
    if ref.letter is not None:
        return column_letter_to_index(ref.letter)
    return ref.index


def data_to_value(data: Any) -> List[Any]:
    """Convert row data into a dense positional value list.

    Examples::

        data_to_value(["a", "b"])          # ['a', 'b']
        data_to_value({"A": "a", "C": "c"})  # ['a', None, 'c']
        data_to_value({"2": "b"})            # [None, 'b']

    Positions that are not set stay None, which the API skips on write so the
    existing cell content is kept.

    Args:
        data: A list/tuple (passed through) or a mapping keyed by column letters
              or 1-indexed column numbers

    Returns:
        List of values; empty for any other input
    """
    if isinstance(data, (list, tuple)):
        return list(data)
    if not isinstance(data, Mapping):
        return []

    line: List[Any] = []
    for key, value in data.items():
        ref = ColumnRef.parse(key)
        if ref is None:
            continue
        index = resolve_column(ref) - 1
        if index < 0:
            continue
        if index >= len(line):
            line.extend([None] * (index + 1 - len(line)))
        line[index] = value
    return line


def quote_title(title: str) -> str:
    """Quote a sheet title for A1 notation, doubling embedded quotes."""
    return "'" + title.replace("'", "''") + "'"


def row_range(title: str, start: int, end: Optional[int] = None) -> str:
    """Build a whole-row range, e.g. ``'Sheet1'!A2:ZZ5``.

    Args:
        title: Sheet title
        start: First row (1-indexed)
        end: Last row (1-indexed, inclusive); defaults to start
    """
    end = start if end is None else end
    return f"{quote_title(title)}!A{start}:{LAST_COLUMN}{end}"


def columns_range(title: str) -> str:
    """Build the open-ended table range used for appends, e.g. ``'Sheet1'!A:ZZ``."""
    return f"{quote_title(title)}!A:{LAST_COLUMN}"


@dataclass(frozen=True)
class UpdatedRange:
    """A parsed ``'<title>'!<col><row>:<col><row>`` range."""
    title: str
    start_column: str
    start_row: int
    end_column: str
    end_row: int


def parse_updated_range(notation: str) -> UpdatedRange:
    """Parse the updated range reported by an append.

    Args:
        notation: Range string, e.g. ``'Sheet1'!A5:C7``

    Returns:
        UpdatedRange with the sheet title and both corners

    Raises:
        ValueError: If notation is not a sheet-qualified two-corner range
    """
    match = _UPDATED_RANGE_RE.match(notation)
    if not match:
        raise ValueError(f"Invalid updated range notation: {notation!r}")

    title, start_column, start_row, end_column, end_row = match.groups()
    return UpdatedRange(
        title=title.replace("''", "'"),
        start_column=start_column,
        start_row=int(start_row),
        end_column=end_column,
        end_row=int(end_row),
    )


def pad_row(value: Sequence[Any], width: int, fill: Any = "") -> List[Any]:
    """Right-pad a row with ``fill`` up to ``width`` cells."""
    row = list(value)
    if len(row) < width:
        row.extend([fill] * (width - len(row)))
    return row
