"""
Connector Service - normalizes market data connector payloads into records.

Fetching from the vendor APIs is out of scope; callers hand over the decoded
response body and get ExtractedRecord objects with api provenance back.
"""
from typing import Any, Dict, List, Mapping, Union

from findoc.core.config import settings
from findoc.models.document import (
    ApiProvenance, ExtractedRecord, ExtractionMethod, RecordMetadata, StatementType,
)
from findoc.models.schema import ConnectorPayload, MarketDataPayload, StatementPayload
from findoc.utils.logger import get_logger
from findoc.utils.normalizer import is_valid_number, parse_numeric_value

logger = get_logger(__name__)

# payload section -> (record id prefix, statement type)
STATEMENT_SECTIONS = [
    ("income_statements", "income", StatementType.INCOME_STATEMENT),
    ("balance_sheets", "balance", StatementType.BALANCE_SHEET),
    ("cash_flow_statements", "cashflow", StatementType.CASH_FLOW),
]

MARKET_FIELDS = ["open", "high", "low", "close", "volume", "adjusted_close"]


def numeric_values(data: Mapping[str, Any]) -> Dict[str, float]:
    """Keep only entries whose value parses to a finite number."""
    values: Dict[str, float] = {}
    for key, raw in data.items():
        value = parse_numeric_value(raw)
        if is_valid_number(value):
            values[str(key)] = value
        else:
            logger.debug(f"Dropping non-numeric connector value {key}={raw!r}")
    return values


def _provenance(connector_id: str) -> ApiProvenance:
    return ApiProvenance(
        api_endpoint=connector_id,
        extraction_method=ExtractionMethod.API_CALL.value,
    )


def _statement_record(
        connector_id: str,
        prefix: str,
        statement_type: StatementType,
        statement: StatementPayload,
) -> ExtractedRecord:
    return ExtractedRecord(
        id=f"{prefix}_{statement.symbol}_{statement.period}",
        statement_type=statement_type,
        period=statement.period,
        values=numeric_values(statement.data),
        metadata=RecordMetadata(
            currency=statement.currency or settings.DEFAULT_CURRENCY,
            units=statement.units or settings.DEFAULT_UNITS,
            source=_provenance(connector_id),
        ),
    )


def _market_record(connector_id: str, row: MarketDataPayload) -> ExtractedRecord:
    fields = row.model_dump(by_alias=True, include=set(MARKET_FIELDS), exclude_none=True)
    return ExtractedRecord(
        id=f"market_{row.symbol}_{row.date}",
        statement_type=StatementType.MARKET_DATA,
        period=row.date,
        values=numeric_values(fields),
        metadata=RecordMetadata(
            currency=settings.DEFAULT_CURRENCY,
            units="units",
            source=_provenance(connector_id),
        ),
    )


def records_from_connector_payload(
        connector_id: str,
        payload: Union[ConnectorPayload, Mapping[str, Any]],
) -> List[ExtractedRecord]:
    """
    Turn a connector response into records.

    Args:
        connector_id: Connector / endpoint name written into provenance
        payload: Decoded response, camelCase keys (incomeStatements, ...)

    Returns:
        Statement records in section order, then market_data records
    """
    if not isinstance(payload, ConnectorPayload):
        payload = ConnectorPayload.model_validate(payload)

    records: List[ExtractedRecord] = []

    for section, prefix, statement_type in STATEMENT_SECTIONS:
        for statement in getattr(payload, section):
            records.append(_statement_record(connector_id, prefix, statement_type, statement))

    for row in payload.market_data:
        records.append(_market_record(connector_id, row))

    logger.info(f"Connector {connector_id}: {len(records)} record(s) normalized")
    return records
