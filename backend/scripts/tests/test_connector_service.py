"""Tests for connector payload normalization."""
from findoc.models.document import ApiProvenance, StatementType
from findoc.services.connector_service import numeric_values, records_from_connector_payload

PAYLOAD = {
    "incomeStatements": [
        {"symbol": "ACME", "period": "2023", "data": {"revenue": 1200, "netIncome": "300", "auditor": "KPMG"}},
    ],
    "balanceSheets": [
        {"symbol": "ACME", "period": "2023", "data": {"totalAssets": 5000}, "currency": "EUR", "units": "thousands"},
    ],
    "cashFlowStatements": [
        {"symbol": "ACME", "period": "2023", "data": {"operatingCashFlow": 410}},
    ],
    "marketData": [
        {"symbol": "ACME", "date": "2024-01-02", "open": 10, "high": 12, "low": 9, "close": 11, "volume": 1000},
    ],
}


def test_statement_sections_map_to_types():
    records = records_from_connector_payload("bloomberg", PAYLOAD)

    assert [r.statement_type for r in records] == [
        StatementType.INCOME_STATEMENT.value,
        StatementType.BALANCE_SHEET.value,
        StatementType.CASH_FLOW.value,
        StatementType.MARKET_DATA.value,
    ]
    assert records[0].id == "income_ACME_2023"


def test_api_provenance():
    record = records_from_connector_payload("factset", PAYLOAD)[0]

    assert isinstance(record.metadata.source, ApiProvenance)
    assert record.metadata.source.api_endpoint == "factset"
    assert record.metadata.source.extraction_method == "api_call"


def test_non_numeric_values_dropped():
    record = records_from_connector_payload("bloomberg", PAYLOAD)[0]
    assert record.values == {"revenue": 1200.0, "netIncome": 300.0}


def test_currency_and_units_defaults():
    income, balance = records_from_connector_payload("bloomberg", PAYLOAD)[:2]

    assert (income.metadata.currency, income.metadata.units) == ("USD", "millions")
    assert (balance.metadata.currency, balance.metadata.units) == ("EUR", "thousands")


def test_market_rows():
    market = records_from_connector_payload("bloomberg", PAYLOAD)[-1]

    assert market.period == "2024-01-02"
    assert market.values == {"open": 10.0, "high": 12.0, "low": 9.0, "close": 11.0, "volume": 1000.0}


def test_empty_payload():
    assert records_from_connector_payload("capiq", {}) == []


def test_numeric_values():
    assert numeric_values({"a": "1,000", "b": None, "c": "x"}) == {"a": 1000.0}
