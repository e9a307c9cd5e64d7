import re
import uuid
from datetime import datetime, timezone


def generate_id(prefix: str) -> str:
    """
    Opaque identifier for files, records and scrapes.
    'data' → 'data_1f0c9d2e8b7a4c41a0f3d4e5b6c7d8e9'
    """
    return f"{prefix}_{uuid.uuid4().hex}"


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


def clean_text(text: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    return re.sub(r"\s+", " ", text or "").strip()


def elapsed_ms(start: float, end: float) -> float:
    """Milliseconds between two time.perf_counter() readings."""
    return round((end - start) * 1000.0, 3)
