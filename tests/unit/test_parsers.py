"""Unit tests for parsers module."""

from datetime import date

import pytest

from kaswarga.models.resident import PeriodKey, StartPeriod
from kaswarga.services.parsers import (
    is_paid_amount,
    parse_leading_number,
    parse_month_name,
    parse_numeric_value,
    parse_period_key,
    parse_sheet_date,
    parse_start_period,
    sheet_row_to_dict,
    sheet_values_to_dicts,
)


class TestSheetRows:
    """Tests for row-to-dict conversion."""

    def test_short_row_is_padded(self):
        """Test missing trailing cells become empty strings."""
        result = sheet_row_to_dict(["1", "Budi"], ["No", "Nama", "Blok"])
        assert result == {"No": "1", "Nama": "Budi", "Blok": ""}

    def test_cells_are_stringified(self):
        """Test non-string cells (unformatted values) become strings."""
        result = sheet_row_to_dict([1, 50000, None], ["No", "Jumlah", "Catatan"])
        assert result == {"No": "1", "Jumlah": "50000", "Catatan": ""}

    def test_values_split_into_headers_and_rows(self):
        """Test first row is the header row."""
        headers, rows = sheet_values_to_dicts([["A", "B"], ["1", "2"], ["3"]])

        assert headers == ["A", "B"]
        assert rows == [{"A": "1", "B": "2"}, {"A": "3", "B": ""}]

    def test_empty_values(self):
        """Test an empty sheet gives no headers and no rows."""
        assert sheet_values_to_dicts([]) == ([], [])


class TestNumericValues:
    """Tests for leading-number parsing of amount cells."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Rp50.000", 50.0),
            ("50000", 50000.0),
            ("1.500.000", 1.5),
            ("Rp -25000", -25000.0),
            (".5", 0.5),
            ("5-3", 5.0),
        ],
    )
    def test_parse_leading_number(self, value, expected):
        """Test the numeric prefix left after stripping is read."""
        assert parse_leading_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "-", ".", "--5", "belum bayar"])
    def test_unreadable_values(self, value):
        """Test unreadable cells give None and 0."""
        assert parse_leading_number(value) is None
        assert parse_numeric_value(value) == 0.0

    def test_is_paid_amount(self):
        """Test only positive amounts count as paid."""
        assert is_paid_amount("Rp50.000") is True
        assert is_paid_amount("0") is False
        assert is_paid_amount("-100") is False
        assert is_paid_amount("") is False


class TestParseSheetDate:
    """Tests for parse_sheet_date."""

    @pytest.mark.parametrize(
        "value",
        ["15/01/2024", "15-01-2024", "15.01.2024", "2024-01-15", " 15/01/2024 ", "2024-01-15T08:30:00"],
    )
    def test_parse_supported_formats(self, value):
        """Test day-first and ISO formats."""
        assert parse_sheet_date(value) == date(2024, 1, 15)

    @pytest.mark.parametrize("value", [None, "", "   ", "kemarin", "32/13/2024"])
    def test_unparsable_returns_none(self, value):
        """Test bad cells give None instead of raising."""
        assert parse_sheet_date(value) is None


class TestParsePeriodKey:
    """Tests for parse_period_key."""

    def test_monthly_key(self):
        assert parse_period_key("2024/3") == PeriodKey(2024, 3)

    def test_special_key(self):
        key = parse_period_key(" 2024 / 13 ")
        assert key == PeriodKey(2024, 13)
        assert key.is_special is True

    @pytest.mark.parametrize("value", [None, "", "2024", "2024/", "24/3", "2024/0", "2024-3", "abc/3"])
    def test_malformed_keys(self, value):
        assert parse_period_key(value) is None


class TestParseStartPeriod:
    """Tests for parse_start_period."""

    def test_canonical_form(self):
        """Test the canonical YYYY/M form."""
        assert parse_start_period("2023/1") == StartPeriod(2023, 1)
        assert str(parse_start_period("2023/01")) == "2023/1"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2023 Jan", StartPeriod(2023, 1)),
            ("2023 jan", StartPeriod(2023, 1)),
            ("2023 Mei", StartPeriod(2023, 5)),
            ("2023 Agustus", StartPeriod(2023, 8)),
            ("2023 October", StartPeriod(2023, 10)),
            ("Des 2023", StartPeriod(2023, 12)),
            ("2023-Oct", StartPeriod(2023, 10)),
        ],
    )
    def test_legacy_forms_are_normalized(self, value, expected):
        """Test legacy 'year month-name' forms map to the canonical form."""
        assert parse_start_period(value) == expected

    @pytest.mark.parametrize("value", [None, "", "  ", "2023/13", "2023/0", "2023 Foo", "sejak awal"])
    def test_unrecognised_means_no_start(self, value):
        """Test anything else means 'track everything'."""
        assert parse_start_period(value) is None

    def test_month_names(self):
        assert parse_month_name("Okt") == 10
        assert parse_month_name("MARCH") == 3
