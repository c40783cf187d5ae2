"""Unit tests for domain value objects."""

from datetime import date, datetime, timedelta, timezone

import pytest

from stockbook.domain.exceptions import ValidationError
from stockbook.domain.model.value_objects import (
    Quantity,
    SourceReference,
    as_date,
    as_utc,
)


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid(self):
        q = Quantity(5)
        assert q.value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(-1)

    def test_float_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(2.5)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)

    def test_str(self):
        assert str(Quantity(7)) == "7"


# ── SourceReference ──────────────────────────────────────────────────────────


class TestSourceReference:

    def test_matches_item_or_quotation(self):
        ref = SourceReference("Q-1", "QI-9", quote_number="QT/2024/001")
        assert ref.matches("QI-9")
        assert ref.matches("Q-1")
        assert not ref.matches("QI-10")

    def test_blank_item_rejected(self):
        with pytest.raises(ValidationError, match="item ID is required"):
            SourceReference("Q-1", "  ")

    def test_missing_quotation_rejected(self):
        with pytest.raises(ValidationError, match="quotation ID is required"):
            SourceReference("", "QI-1")

    def test_str_prefers_quote_number(self):
        assert str(SourceReference("Q-1", "QI-9", "QT-7")) == "QT-7/QI-9"
        assert str(SourceReference("Q-1", "QI-9")) == "Q-1/QI-9"


# ── Date coercion ────────────────────────────────────────────────────────────


class TestAsDate:

    def test_date_passes_through(self):
        assert as_date(date(2024, 1, 10)) == date(2024, 1, 10)

    def test_datetime_uses_calendar_day(self):
        assert as_date(datetime(2024, 1, 10, 23, 59)) == date(2024, 1, 10)

    def test_iso_date_string(self):
        assert as_date("2024-01-10") == date(2024, 1, 10)

    def test_iso_timestamp_string(self):
        assert as_date("2024-01-10T08:30:00Z") == date(2024, 1, 10)

    def test_malformed_string_rejected(self):
        with pytest.raises(ValidationError, match="Invalid dispatch date"):
            as_date("10/01/2024", "dispatch date")

    def test_other_types_rejected(self):
        with pytest.raises(ValidationError, match="Invalid date"):
            as_date(20240110)


class TestAsUtc:

    def test_naive_is_taken_as_utc(self):
        result = as_utc(datetime(2024, 1, 1, 9, 0))
        assert result.tzinfo == timezone.utc
        assert result.hour == 9

    def test_offset_is_converted(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        result = as_utc(datetime(2024, 1, 1, 9, 0, tzinfo=ist))
        assert result == datetime(2024, 1, 1, 3, 30, tzinfo=timezone.utc)
