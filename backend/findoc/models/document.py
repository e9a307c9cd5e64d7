"""
Pydantic schemas for financial extraction - defines the record shapes shared by
every extractor, the orchestrator and the web scraper.

JSON output uses camelCase aliases (statementType, extractionMethod, ...);
Python code uses the snake_case attribute names.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from findoc.utils.helper import utc_timestamp


class StatementType(str, Enum):
    """Closed set of statement categories a record can be assigned."""
    INCOME_STATEMENT = "income_statement"
    BALANCE_SHEET = "balance_sheet"
    CASH_FLOW = "cash_flow"
    TRANSACTION_DATA = "transaction_data"
    MARKET_DATA = "market_data"


class DocumentFormat(str, Enum):
    """Input classes, one extractor each."""
    PDF = "pdf"
    EXCEL = "excel"
    CSV = "csv"
    WORD = "word"
    IMAGE = "image"
    HTML = "html"


class ExtractionMethod(str, Enum):
    """
    Technique tags written into provenance.
    - *_PARSING: whole-file method reported on a ProcessedFileResult
    - STRUCTURED_PARSING / PATTERN_MATCHING: how an individual record was built
    """
    PDF_PARSING = "pdf_parsing"
    EXCEL_PARSING = "excel_parsing"
    CSV_PARSING = "csv_parsing"
    WORD_PARSING = "word_parsing"
    OCR_EXTRACTION = "ocr_extraction"
    STRUCTURED_PARSING = "structured_parsing"
    PATTERN_MATCHING = "pattern_matching"
    WEB_SCRAPING = "web_scraping"
    API_CALL = "api_call"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


# ==================== Provenance ====================

class FileProvenance(_FrozenModel):
    """Record came from an uploaded file."""
    source: Literal["file"] = "file"
    file_path: str = Field(..., description="Original file name (or sheet/label inside it)")
    sheet_name: Optional[str] = Field(None, description="Worksheet or table label, when the file has several")
    extraction_method: str
    timestamp: str = Field(default_factory=utc_timestamp)


class WebProvenance(_FrozenModel):
    """Record came from a scraped web page."""
    source: Literal["web"] = "web"
    url: str
    page_number: int = Field(..., ge=1, description="1-based table number on the page")
    table_index: int = Field(..., ge=0, description="0-based table index on the page")
    extraction_method: str
    timestamp: str = Field(default_factory=utc_timestamp)


class ApiProvenance(_FrozenModel):
    """Record came from a market data connector."""
    source: Literal["api"] = "api"
    api_endpoint: str = Field(..., description="Connector / endpoint id")
    extraction_method: str = ExtractionMethod.API_CALL.value
    timestamp: str = Field(default_factory=utc_timestamp)


Provenance = Annotated[
    Union[FileProvenance, WebProvenance, ApiProvenance],
    Field(discriminator="source"),
]


# ==================== Records ====================

class RecordMetadata(_FrozenModel):
    currency: str = "USD"
    units: str = "millions"
    source: Provenance


class ExtractedRecord(_FrozenModel):
    """
    The common output unit - one financial statement (or fragment of one).
    """
    id: str = Field(..., description="Opaque identifier generated at extraction time")
    statement_type: StatementType = StatementType.TRANSACTION_DATA
    period: str = Field(..., description="Fiscal year or quarter token")
    values: Dict[str, float] = Field(default_factory=dict, description="Line item label -> value")
    metadata: RecordMetadata

    def content_key(self) -> Dict[str, Any]:
        """Record content without id and timestamp, for comparing two extractions."""
        data = self.model_dump(by_alias=True)
        data.pop("id", None)
        data["metadata"]["source"].pop("timestamp", None)
        return data


Cell = Union[float, str]


class ParsedTable(_FrozenModel):
    """
    Grid produced by an extractor. Rows may be ragged - consumers must not
    assume len(row) == len(headers).
    """
    headers: List[str] = Field(default_factory=list, description="Column headers")
    rows: List[List[Cell]] = Field(default_factory=list, description="Table data as list of rows")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="caption, class_name, sheet_name, position"
    )

    @property
    def row_count(self) -> int:
        """Number of data rows (excluding headers)."""
        return len(self.rows)

    @property
    def column_count(self) -> int:
        """Number of columns."""
        if self.headers:
            return len(self.headers)
        elif self.rows and len(self.rows[0]) > 0:
            return len(self.rows[0])
        return 0

    def as_grid(self) -> List[List[Cell]]:
        """Row-major grid with the header row at index 0."""
        return [list(self.headers)] + [list(row) for row in self.rows]


class RawExtraction(BaseModel):
    """
    What an extractor hands back to the orchestrator before classification.
    """
    tables: List[ParsedTable] = Field(default_factory=list)
    text: Optional[str] = None
    page_count: Optional[int] = None
    extra: Dict[str, Any] = Field(default_factory=dict, description="Extractor specific counters")

    @property
    def text_length(self) -> int:
        return len(self.text) if self.text else 0


# ==================== Orchestrator output ====================

class ProcessingMetadata(_FrozenModel):
    page_count: Optional[int] = None
    table_count: int = 0
    text_length: int = 0
    processing_time: float = Field(0.0, description="Wall-clock milliseconds")
    sheet_count: Optional[int] = None
    row_count: Optional[int] = None


class ProcessedFileResult(_FrozenModel):
    id: str
    name: str
    type: str = Field(..., description="Declared MIME type")
    extracted_data: List[ExtractedRecord] = Field(default_factory=list)
    metadata: ProcessingMetadata
    provenance: FileProvenance

    @property
    def summary(self) -> Dict[str, Any]:
        """Quick summary for logging/debugging."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "records": len(self.extracted_data),
            "statement_types": [r.statement_type for r in self.extracted_data],
            "pages": self.metadata.page_count,
            "processing_time": f"{self.metadata.processing_time:.1f}ms",
        }


# ==================== Web scraping ====================

class ScrapeStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class ScrapeMetadata(_FrozenModel):
    processing_time: float = 0.0
    tables_found: int = 0
    text_length: int = 0


class WebScrapeResult(_FrozenModel):
    id: str
    url: str
    title: str
    tables: List[ParsedTable] = Field(default_factory=list)
    text: str = ""
    financial_records: List[ExtractedRecord] = Field(default_factory=list)
    metadata: ScrapeMetadata = Field(default_factory=ScrapeMetadata)
    status: ScrapeStatus = ScrapeStatus.SUCCESS
    error: Optional[str] = None
    scraped_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
