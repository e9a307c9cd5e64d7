"""Tests for grid, web-table and text record conversion."""
from findoc.models.document import (
    ExtractionMethod, ParsedTable, StatementType, WebProvenance,
)
from findoc.utils.converters import (
    extract_records_from_text, file_text_provenance, grid_to_record, grid_values,
    web_table_to_record, web_text_provenance,
)


class TestGridValues:

    def test_label_value_pairs(self):
        rows = [["Revenue", 1000], ["Net Income", "150"], ["Costs", "(20)"]]
        assert grid_values(rows) == {"Revenue": 1000.0, "Net Income": 150.0, "Costs": -20.0}

    def test_skips_incomplete_and_non_numeric_rows(self):
        rows = [["Revenue"], ["", 5], ["Notes", "see below"], [None, 1], ["Tax", ""]]
        assert grid_values(rows) == {}

    def test_zero_is_kept(self):
        assert grid_values([["Impairment", 0]]) == {"Impairment": 0.0}

    def test_labels_are_trimmed(self):
        assert grid_values([["  Revenue ", 1]]) == {"Revenue": 1.0}


class TestGridToRecord:

    def test_builds_record_from_sheet(self):
        grid = [["Item", "Value"], ["Revenue", 1000], ["Net Income", 150]]
        record = grid_to_record(grid, label="FY2023", file_name="book.xlsx")

        assert record.statement_type == StatementType.INCOME_STATEMENT.value
        assert record.period == "2023"
        assert record.values == {"Revenue": 1000.0, "Net Income": 150.0}
        assert record.metadata.units == "millions"

        source = record.metadata.source
        assert source.source == "file"
        assert source.file_path == "book.xlsx"
        assert source.sheet_name == "FY2023"
        assert source.extraction_method == ExtractionMethod.STRUCTURED_PARSING.value

    def test_non_financial_grid(self):
        assert grid_to_record([["Name", "Email"], ["Ann", "a@b.c"]], "Sheet1", "x.xlsx") is None

    def test_currency_guessed_from_cells(self):
        grid = [["Revenue (€)", "Amount"], ["Sales", 10]]
        assert grid_to_record(grid, "Sheet1", "x.xlsx").metadata.currency == "EUR"


class TestWebTableToRecord:

    def test_web_provenance_numbering(self):
        table = ParsedTable(
            headers=["Assets", "2022"],
            rows=[["Total Assets", 500.0], ["Total Liabilities", 200.0]],
        )
        record = web_table_to_record(table, url="https://example.com", index=2)

        assert record.statement_type == StatementType.BALANCE_SHEET.value
        assert record.period == "2022"
        assert isinstance(record.metadata.source, WebProvenance)
        assert record.metadata.source.page_number == 3
        assert record.metadata.source.table_index == 2
        assert record.metadata.source.extraction_method == "web_scraping"

    def test_needs_two_rows(self):
        table = ParsedTable(headers=["Revenue", "2022"], rows=[["Revenue", 1.0]])
        assert web_table_to_record(table, "https://example.com", 0) is None

    def test_needs_values(self):
        table = ParsedTable(headers=["Revenue", "2022"], rows=[["a", "x"], ["b", "y"]])
        assert web_table_to_record(table, "https://example.com", 0) is None


class TestExtractRecordsFromText:

    TEXT = (
        "Annual Report 2023\n"
        "Income Statement\n"
        "Revenue: $1,000\n"
        "Net Income: 150\n"
        "Balance Sheet\n"
        "Total Assets: 5,000\n"
        "Total Liabilities: 2,000\n"
    )

    def test_one_record_per_indicator_with_isolated_captures(self):
        records = extract_records_from_text(self.TEXT, file_text_provenance("report.pdf"))

        assert [r.statement_type for r in records] == [
            StatementType.INCOME_STATEMENT.value,
            StatementType.BALANCE_SHEET.value,
        ]
        assert records[0].values == {"revenue": 1000.0, "netIncome": 150.0}
        assert records[1].values == {"totalAssets": 5000.0, "totalLiabilities": 2000.0}
        assert all(r.period == "2023" for r in records)
        assert all(r.metadata.source.extraction_method == "pattern_matching" for r in records)

    def test_indicator_without_figures_yields_nothing(self):
        records = extract_records_from_text("Cash flow commentary only", file_text_provenance("a.pdf"))
        assert records == []

    def test_missing_capture_is_omitted(self):
        records = extract_records_from_text(
            "Statement of cash flows. Operating cash flow: 320", file_text_provenance("a.pdf")
        )
        assert len(records) == 1
        assert records[0].values == {"operatingCashFlow": 320.0}

    def test_web_text_provenance(self):
        records = extract_records_from_text("P&L revenue 10", web_text_provenance("https://x.test"))
        source = records[0].metadata.source
        assert source.source == "web"
        assert (source.page_number, source.table_index) == (1, 0)

    def test_empty_text(self):
        assert extract_records_from_text("", file_text_provenance("a.pdf")) == []
