"""
Header registry.

Row 1 of a sheet is the document schema: the position of a name in the header is
the column its field lives in. Unnamed (empty) header cells keep their position
but never map to a field.
"""

from typing import Any, Iterable, Iterator, List, Optional

# Reserved document field carrying the row number
ROW_FIELD = "_row"


class Header:
    """Ordered registry of column names with find-or-append semantics.

    Attributes:
        names: Column names in column order ("" for unnamed columns)
        added: Names appended by ``ensure`` since construction
    """

    def __init__(self, names: Optional[Iterable[Any]] = None) -> None:
        self.names: List[str] = ["" if name is None else str(name) for name in (names or [])]
        self.added: List[str] = []

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __repr__(self) -> str:
        return f"Header({self.names!r})"

    def index_of(self, name: str) -> Optional[int]:
        """Return the 0-indexed position of ``name``, or None."""
        if not name:
            return None
        try:
            return self.names.index(name)
        except ValueError:
            return None

    def column_of(self, name: str) -> Optional[int]:
        """Return the 1-indexed column of ``name``, or None."""
        index = self.index_of(name)
        return None if index is None else index + 1

    def ensure(self, name: str) -> int:
        """Return the 0-indexed position of ``name``, appending it when missing."""
        index = self.index_of(name)
        if index is None:
            self.names.append(name)
            self.added.append(name)
            index = len(self.names) - 1
        return index
