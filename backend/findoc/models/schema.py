"""
API request/response schemas.

Domain objects (records, provenance, results) live in models/document.py;
this module holds the transport shapes around them.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from findoc.models.document import ExtractedRecord

# Define the type variable used for the generic ApiResponse
T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    status: str  # "success" or "error"
    message: Optional[str] = None
    data: Optional[T] = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


# ==================== Uploads ====================

class UploadStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class FileUploadResponse(_CamelModel):
    """One stored upload and, once processed, its extraction result."""
    id: str
    name: str
    type: str
    size: int
    status: UploadStatus
    uploaded_at: datetime
    processed_at: Optional[datetime] = None
    extracted_data: List[ExtractedRecord] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None


class FileListResponse(_CamelModel):
    total: int
    files: List[FileUploadResponse]


# ==================== Web scraping ====================

class WebScrapeRequest(_CamelModel):
    """
    Scrape options.

    - selectors: extra CSS selectors searched for text before the defaults
    - extract_tables / extract_text: skip either half of the page parse
    """
    url: str = Field(..., description="Absolute http(s) URL")
    selectors: Optional[List[str]] = None
    extract_tables: bool = True
    extract_text: bool = True

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be an absolute http(s) URL")
        return value


class WebScrapeSummary(_CamelModel):
    """Stored scrape as listed by the API."""
    id: str
    url: str
    title: Optional[str] = None
    status: str
    tables_found: int = 0
    records_found: int = 0
    error: Optional[str] = None
    scraped_at: datetime


# ==================== Connectors ====================

class StatementPayload(_CamelModel):
    """One statement as returned by a market data connector."""
    symbol: str
    period: str
    data: Dict[str, Any] = Field(default_factory=dict)
    currency: Optional[str] = None
    units: Optional[str] = None


class MarketDataPayload(_CamelModel):
    symbol: str
    date: str
    open: float
    high: float
    low: float
    close: float
    volume: float
    adjusted_close: Optional[float] = None


class ConnectorPayload(_CamelModel):
    """Raw connector response: statements grouped by kind, plus price rows."""
    income_statements: List[StatementPayload] = Field(default_factory=list)
    balance_sheets: List[StatementPayload] = Field(default_factory=list)
    cash_flow_statements: List[StatementPayload] = Field(default_factory=list)
    market_data: List[MarketDataPayload] = Field(default_factory=list)

