# =============================================================================
# lib/coercion.py - Typed Field Parsing
# =============================================================================
# Turns untyped cell values from uploaded files into typed task fields.
#
# Parsing never rejects a value. A value that can't be parsed is replaced
# by a sentinel, and the result is tagged so callers can tell a parsed
# value from a substituted one:
#   - effort   -> float, sentinel numpy.nan
#   - dueDate  -> datetime.date, sentinel pandas.NaT
# =============================================================================

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Generic, TypeVar

import numpy as np
import pandas as pd

T = TypeVar("T")

# Sentinels substituted when a value can't be parsed
EFFORT_SENTINEL = np.nan
DUE_DATE_SENTINEL = pd.NaT


@dataclass(frozen=True)
class Coerced(Generic[T]):
    """
    Result of a typed parse.

    Attributes:
        value: The parsed value, or the field's sentinel when ok is False
        ok: True if the raw input was parsed successfully
    """
    value: T
    ok: bool


def _is_blank(raw: Any) -> bool:
    """True for None, NaN/NaT and whitespace-only strings."""
    if raw is None:
        return True
    if isinstance(raw, str):
        return not raw.strip()
    if isinstance(raw, (date, datetime)):
        return raw is pd.NaT
    try:
        return bool(pd.isna(raw))
    except (TypeError, ValueError):
        return False


def coerce_effort(raw: Any) -> Coerced[float]:
    """
    Parse an effort estimate (days).

    Accepts numbers and numeric strings. Blank, non-numeric and
    non-finite input yields EFFORT_SENTINEL.

    Example:
        coerce_effort("2")    -> Coerced(value=2.0, ok=True)
        coerce_effort("abc")  -> Coerced(value=nan, ok=False)
    """
    if _is_blank(raw) or isinstance(raw, bool):
        return Coerced(EFFORT_SENTINEL, False)

    if isinstance(raw, (int, float, np.integer, np.floating)):
        value = float(raw)
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            return Coerced(EFFORT_SENTINEL, False)

    if not math.isfinite(value):
        return Coerced(EFFORT_SENTINEL, False)
    return Coerced(value, True)


def coerce_due_date(raw: Any) -> Coerced[date]:
    """
    Parse a due date.

    Accepts date/datetime objects and anything pandas.to_datetime
    understands (ISO dates, timestamps, "03/31/2024", ...). The time of
    day is dropped. Blank or unparseable input yields DUE_DATE_SENTINEL.

    Example:
        coerce_due_date("2024-01-01")  -> Coerced(value=date(2024, 1, 1), ok=True)
        coerce_due_date("not a date")  -> Coerced(value=NaT, ok=False)
    """
    if _is_blank(raw):
        return Coerced(DUE_DATE_SENTINEL, False)

    if isinstance(raw, datetime):
        return Coerced(raw.date(), True)
    if isinstance(raw, date):
        return Coerced(raw, True)

    try:
        parsed = pd.to_datetime(str(raw).strip())
    except (ValueError, TypeError, OverflowError):
        return Coerced(DUE_DATE_SENTINEL, False)

    if pd.isna(parsed):
        return Coerced(DUE_DATE_SENTINEL, False)
    return Coerced(parsed.date(), True)


def is_sentinel(value: Any) -> bool:
    """True if value is one of the parse sentinels (or None)."""
    if value is None or value is pd.NaT:
        return True
    return isinstance(value, float) and math.isnan(value)
