"""Text tables backed by pandas. Empty collections render an explicit message."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Sequence, Tuple, Union

import pandas as pd

Columns = Union[Sequence[Tuple[str, str]], Mapping[str, str]]


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M") if (value.hour or value.minute) else value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float):
        return f"{value:,.2f}" if not value.is_integer() else f"{int(value):,}"
    return str(value)


def render_table(rows: Sequence[Mapping[str, Any]], columns: Columns, empty_message: str) -> str:
    """
    Render rows as an aligned text table.

    Args:
        rows: One mapping per row
        columns: (key, label) pairs or a key -> label mapping, in display order
        empty_message: Shown instead of a table when there are no rows

    Returns:
        The table, or `empty_message`
    """
    if not rows:
        return empty_message

    pairs = list(columns.items()) if isinstance(columns, Mapping) else list(columns)
    frame = pd.DataFrame(
        [[format_cell(row.get(key)) for key, _ in pairs] for row in rows],
        columns=[label for _, label in pairs],
    )
    return frame.to_string(index=False)


def format_money(value: Any) -> str:
    if value is None:
        return ""
    try:
        return f"₹{float(value):,.2f}"
    except (TypeError, ValueError):
        return str(value)
