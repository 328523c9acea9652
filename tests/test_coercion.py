# =============================================================================
# tests/test_coercion.py - Typed Field Parsing Tests
# =============================================================================
# Covers the effort/dueDate parse step used by bulk import:
#   - Valid input is parsed and tagged ok
#   - Invalid input becomes a sentinel and is tagged not ok
#
# Run with: poetry run pytest tests/test_coercion.py -v
# =============================================================================

import math
from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from lib.coercion import (
    DUE_DATE_SENTINEL,
    coerce_due_date,
    coerce_effort,
    is_sentinel,
)


class TestCoerceEffort:
    """Tests for coerce_effort."""

    @pytest.mark.parametrize("raw, expected", [
        ("2", 2.0),
        (" 3.5 ", 3.5),
        ("-1", -1.0),
        (4, 4.0),
        (0.25, 0.25),
        (np.int64(7), 7.0),
    ])
    def test_numeric_input(self, raw, expected):
        result = coerce_effort(raw)

        assert result.ok is True
        assert result.value == expected

    @pytest.mark.parametrize("raw", ["abc", "", "   ", None, "inf", "nan", float("nan"), True, "2 days"])
    def test_invalid_input_becomes_nan(self, raw):
        result = coerce_effort(raw)

        assert result.ok is False
        assert math.isnan(result.value)


class TestCoerceDueDate:
    """Tests for coerce_due_date."""

    def test_iso_date_string(self):
        result = coerce_due_date("2024-01-01")

        assert result.ok is True
        assert result.value == date(2024, 1, 1)

    def test_timestamp_string_keeps_date_only(self):
        result = coerce_due_date("2024-03-31 17:45:00")

        assert result.ok is True
        assert result.value == date(2024, 3, 31)

    def test_date_and_datetime_objects(self):
        assert coerce_due_date(date(2024, 5, 6)).value == date(2024, 5, 6)
        assert coerce_due_date(datetime(2024, 5, 6, 12, 0)).value == date(2024, 5, 6)

    @pytest.mark.parametrize("raw", ["not a date", "2024-13-45", "", None, pd.NaT, float("nan")])
    def test_invalid_input_becomes_nat(self, raw):
        result = coerce_due_date(raw)

        assert result.ok is False
        assert result.value is DUE_DATE_SENTINEL


class TestIsSentinel:
    """Tests for is_sentinel."""

    def test_sentinels(self):
        assert is_sentinel(None)
        assert is_sentinel(float("nan"))
        assert is_sentinel(pd.NaT)

    def test_real_values(self):
        assert not is_sentinel(0.0)
        assert not is_sentinel(date(2024, 1, 1))
        assert not is_sentinel("")
