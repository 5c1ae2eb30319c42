"""
pandas export of document results.

Converts the documents returned by ``Sheet.find`` into a DataFrame with one row
per document, indexed by the sheet row number.
"""

from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

from sheetsdb.documents.header import ROW_FIELD


def documents_to_frame(documents: Iterable[Mapping[str, Any]], index: Optional[str] = ROW_FIELD) -> pd.DataFrame:
    """Build a DataFrame from documents.

    Columns follow the header order when the documents carry a header (see
    ``DocumentList``), otherwise first-seen field order. Values stay strings, as
    read from the sheet.

    Args:
        documents: Documents, typically a DocumentList
        index: Field to use as the index; None keeps a RangeIndex

    Returns:
        DataFrame of the documents
    """
    records: List[Mapping[str, Any]] = list(documents)
    header = getattr(documents, "header", None)

    columns: List[str] = []
    if header:
        columns = [name for name in header if name and name != index]
    for record in records:
        for key in record:
            if key not in columns and key != index:
                columns.append(key)

    frame = pd.DataFrame.from_records(records, columns=columns + ([index] if index else []))
    if index:
        frame = frame.set_index(index)
    return frame
