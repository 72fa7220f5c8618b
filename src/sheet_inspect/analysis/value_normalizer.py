"""Canonical form for decoded cell values.

Dates lose their time of day so that the same calendar day compares equal
across sheets whatever the cell type; every other value passes through.
"""

from datetime import date
from typing import Any, Dict

import numpy as np
import pandas as pd

from sheet_inspect.models.data_models import MISSING, Row

DATE_FORMAT = "%Y-%m-%d"


def normalize(value: Any) -> Any:
    """Return the comparable form of a raw cell value.

    ``datetime``/``date`` (and pandas ``Timestamp``) become ``YYYY-MM-DD``
    strings, ``NaT`` becomes ``None``. Never raises.

    Args:
        value: Raw value as produced by the decoding library

    Returns:
        Normalized value
    """
    if value is pd.NaT:
        return None
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            return None
        return pd.Timestamp(value).strftime(DATE_FORMAT)
    return value


def is_blank(value: Any) -> bool:
    """Check whether a value counts as not filled (absent, None or "")."""
    return value is MISSING or value is None or (isinstance(value, str) and value == "")


def normalize_row(row: Row) -> Dict[str, Any]:
    """Normalize every cell of a row, keeping header order."""
    return {header: normalize(value) for header, value in row.items()}


def cell(row: Row, header: str) -> Any:
    """Look up a header in a row, returning MISSING when it is absent."""
    return row.get(header, MISSING)
