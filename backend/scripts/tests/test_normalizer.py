"""Tests for numeric/text normalization."""
import math
from datetime import datetime

import pytest

from findoc.utils.normalizer import (
    extract_currency, extract_period, is_valid_number, parse_cell_value, parse_numeric_value,
)


class TestParseNumericValue:

    @pytest.mark.parametrize("value", [0, 42, -7, 3.5])
    def test_numbers_pass_through(self, value):
        assert parse_numeric_value(value) == float(value)

    def test_accounting_negative(self):
        assert parse_numeric_value("(1,234.50)") == -1234.5

    def test_currency_and_separators(self):
        assert parse_numeric_value("$45,000") == 45000.0
        assert parse_numeric_value("€ 1 200") == 1200.0

    @pytest.mark.parametrize("value", ["n/a", "", "   ", None, True, "Revenue"])
    def test_unparseable_is_nan(self, value):
        assert math.isnan(parse_numeric_value(value))

    def test_is_valid_number_rejects_nan_and_inf(self):
        assert is_valid_number(1.0)
        assert not is_valid_number(math.nan)
        assert not is_valid_number(math.inf)

    def test_parse_cell_value_keeps_text(self):
        assert parse_cell_value("1,000") == 1000.0
        assert parse_cell_value("Revenue") == "Revenue"


class TestExtractPeriod:

    def test_year_wins_over_quarter(self):
        assert extract_period("Q3 2024 results") == "2024"

    def test_quarter_token(self):
        assert extract_period("Results for q2") == "q2"
        assert extract_period("Quarter 4 summary") == "Quarter 4"

    def test_defaults_to_current_year(self):
        assert extract_period("no period here") == str(datetime.now().year)


class TestExtractCurrency:

    @pytest.mark.parametrize("text,expected", [
        ("Revenue $100", "USD"),
        ("in euros", "EUR"),
        ("£ 20", "GBP"),
        ("reported in yen", "JPY"),
        ("no currency", "USD"),
    ])
    def test_markers(self, text, expected):
        assert extract_currency(text) == expected

    def test_priority_usd_first(self):
        assert extract_currency("€10 vs $12") == "USD"

    def test_custom_default(self):
        assert extract_currency("plain", default="CHF") == "CHF"
