"""
Helper utilities for the InsightBoard client
"""

import logging
import math
from datetime import datetime
from typing import Any, List, Union

import pandas as pd

from core.errors import DataError
from core.models import Column, ColumnType, Table

logger = logging.getLogger(__name__)

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def infer_column_type(series: pd.Series) -> ColumnType:
    """Map a pandas dtype onto the number/date/string column types."""
    if pd.api.types.is_bool_dtype(series):
        return ColumnType.STRING
    if pd.api.types.is_numeric_dtype(series):
        return ColumnType.NUMBER
    if pd.api.types.is_datetime64_any_dtype(series):
        return ColumnType.DATE
    return ColumnType.STRING


def table_from_dataframe(df: pd.DataFrame) -> Table:
    """Build a typed table from a dataframe; missing cells become None."""
    columns: List[Column] = []
    frame = df.copy()
    frame.columns = [str(c) for c in frame.columns]

    for name in frame.columns:
        col_type = infer_column_type(frame[name])
        if col_type == ColumnType.DATE:
            frame[name] = frame[name].map(lambda v: v.isoformat() if pd.notna(v) else None)
        columns.append(Column(name=name, type=col_type))

    frame = frame.astype(object).where(pd.notna(frame), None)
    return Table(rows=frame.to_dict(orient="records"), columns=columns)


def table_to_dataframe(table: Table) -> pd.DataFrame:
    names = table.column_names or None
    return pd.DataFrame(table.rows, columns=names)


def export_csv(table: Table) -> str:
    """Serialize the table's rows as CSV text.

    Raises:
        DataError: If the table has no rows.
    """
    if table.is_empty:
        raise DataError("There is no data to export", cause="empty_table")
    df = table_to_dataframe(table)
    logger.info("Exporting %d rows x %d columns", len(df), len(df.columns))
    return df.to_csv(index=False)


def format_file_size(size: Union[int, float]) -> str:
    """Human-readable size, e.g. ``1536 -> "1.5 KB"``."""
    if not size or size <= 0:
        return "0 Bytes"
    i = min(int(math.floor(math.log(size) / math.log(1024))), len(SIZE_UNITS) - 1)
    value = round(size / math.pow(1024, i), 2)
    return f"{value:g} {SIZE_UNITS[i]}"


def format_date(value: Any) -> str:
    """Format an ISO timestamp as ``"Mar 5, 2025, 02:30 PM"``; unparseable input is returned as-is."""
    if not value:
        return ""
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return str(value)
    return f"{dt:%b} {dt.day}, {dt:%Y}, {dt:%I:%M %p}"
