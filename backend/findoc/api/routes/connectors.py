"""
Connector Routes - normalize market data connector payloads.
"""
from typing import List

from fastapi import APIRouter

from findoc.models.document import ExtractedRecord
from findoc.models.schema import ConnectorPayload
from findoc.services.connector_service import records_from_connector_payload

router = APIRouter()


@router.post("/{connector_id}/statements", response_model=List[ExtractedRecord])
def normalize_statements(connector_id: str, payload: ConnectorPayload):
    """Turn a connector response body into records with api provenance."""
    return records_from_connector_payload(connector_id, payload)
