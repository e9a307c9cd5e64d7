"""
Extraction Store - database persistence for uploads and scrapes.

Stores:
- Uploaded files on disk (UPLOAD_DIR) and their metadata in file_uploads
- Processing status and extraction results for each upload
- Web scrape results in web_scrapes

The extraction services never touch the database; this is the only code that
writes rows.
"""
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from findoc.core.config import settings
from findoc.core.database import FileUpload, WebScrape, get_db
from findoc.core.exceptions import FinDocError
from findoc.models.document import WebScrapeResult
from findoc.models.schema import FileUploadResponse, UploadStatus, WebScrapeSummary
from findoc.services.file_processing_service import FileProcessingService
from findoc.utils.helper import generate_id
from findoc.utils.logger import get_logger

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ExtractionStore:
    """Service for upload/scrape persistence."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    # ==================== Uploads ====================

    def save_upload(
            self,
            source: BinaryIO,
            name: str,
            mime_type: str,
            size: int,
    ) -> FileUpload:
        """
        Copy an uploaded stream to UPLOAD_DIR and record it as pending.

        Args:
            source: Readable binary stream
            name: Original file name
            mime_type: Declared MIME type
            size: Size in bytes
        """
        upload_id = generate_id("file")
        stored_path = self._stored_path(upload_id, name)

        with open(stored_path, "wb") as target:
            shutil.copyfileobj(source, target)
        logger.debug(f"Saved: {stored_path}")

        upload = FileUpload(
            id=upload_id,
            name=name,
            mime_type=mime_type,
            size=size,
            file_path=str(stored_path),
            status=UploadStatus.PENDING.value,
            uploaded_at=_now(),
        )

        try:
            self.db.add(upload)
            self.db.commit()
        except Exception:
            self.db.rollback()
            stored_path.unlink(missing_ok=True)
            raise

        self.db.refresh(upload)
        logger.info(f"Stored upload {name} as {upload_id} ({size} bytes)")
        return upload

    def get_upload(self, upload_id: str) -> Optional[FileUpload]:
        """Get upload by ID."""
        return self.db.get(FileUpload, upload_id)

    def list_uploads(self, status: Optional[str] = None) -> List[FileUpload]:
        """List uploads, newest first, with optional status filter."""
        stmt = select(FileUpload).order_by(FileUpload.uploaded_at.desc())

        if status:
            stmt = stmt.where(FileUpload.status == status)

        return list(self.db.execute(stmt).scalars().all())

    def process_upload(self, upload_id: str, processor: FileProcessingService) -> FileUpload:
        """
        Run extraction for a stored upload and persist the outcome.

        Status moves pending/completed/error -> processing -> completed | error.
        Extraction errors are recorded on the row and re-raised.

        Raises:
            KeyError: Unknown upload id
            FinDocError: Extraction failed (row is left in status error)
        """
        upload = self.get_upload(upload_id)
        if upload is None:
            raise KeyError(upload_id)

        self._set_status(upload, UploadStatus.PROCESSING)

        try:
            result = processor.process_file(Path(upload.file_path), upload.name, upload.mime_type)
        except FinDocError as e:
            upload.error = str(e)
            upload.extracted_data = None
            upload.processing_metadata = None
            upload.processed_at = _now()
            self._set_status(upload, UploadStatus.ERROR)
            logger.error(f"Upload {upload_id} failed: {e}")
            raise

        upload.extracted_data = [
            record.model_dump(mode="json", by_alias=True) for record in result.extracted_data
        ]
        upload.processing_metadata = {
            **result.metadata.model_dump(mode="json", by_alias=True, exclude_none=True),
            "provenance": result.provenance.model_dump(mode="json", by_alias=True),
        }
        upload.error = None
        upload.processed_at = _now()
        self._set_status(upload, UploadStatus.COMPLETED)

        logger.info(f"Upload {upload_id} completed: {len(result.extracted_data)} record(s)")
        return upload

    def delete_upload(self, upload_id: str) -> bool:
        """Delete the row and the stored file."""
        upload = self.get_upload(upload_id)
        if not upload:
            return False

        Path(upload.file_path).unlink(missing_ok=True)

        self.db.delete(upload)
        self.db.commit()

        logger.info(f"Deleted upload {upload_id}")
        return True

    def _set_status(self, upload: FileUpload, status: UploadStatus) -> None:
        upload.status = status.value
        self.db.commit()
        self.db.refresh(upload)

    def _stored_path(self, upload_id: str, original_name: str) -> Path:
        folder = settings.UPLOAD_DIR
        folder.mkdir(parents=True, exist_ok=True)
        return folder / f"{upload_id}{Path(original_name).suffix.lower()}"

    # ==================== Scrapes ====================

    def save_scrape(self, result: WebScrapeResult) -> WebScrape:
        """Persist a scrape result, successful or not."""
        data = result.model_dump(mode="json", by_alias=True)

        scrape = WebScrape(
            id=result.id,
            url=result.url,
            title=result.title,
            status=result.status,
            error=result.error,
            tables=data["tables"],
            text=result.text,
            financial_records=data["financialRecords"],
            scrape_metadata=data["metadata"],
            scraped_at=result.scraped_at,
        )

        self.db.add(scrape)
        self.db.commit()
        self.db.refresh(scrape)

        logger.info(f"Stored scrape {scrape.id} ({scrape.status}) for {scrape.url}")
        return scrape

    def list_scrapes(self) -> List[WebScrape]:
        stmt = select(WebScrape).order_by(WebScrape.scraped_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def delete_scrape(self, scrape_id: str) -> bool:
        scrape = self.db.get(WebScrape, scrape_id)
        if not scrape:
            return False

        self.db.delete(scrape)
        self.db.commit()
        logger.info(f"Deleted scrape {scrape_id}")
        return True

    def get_stats(self) -> Dict[str, Any]:
        """Row counts by status."""
        from sqlalchemy import func as sql_func

        stmt = select(FileUpload.status, sql_func.count(FileUpload.id)).group_by(FileUpload.status)
        by_status = {status: count for status, count in self.db.execute(stmt).all()}
        total_scrapes = self.db.execute(select(sql_func.count(WebScrape.id))).scalar() or 0

        return {
            "uploads": by_status,
            "total_uploads": sum(by_status.values()),
            "total_scrapes": total_scrapes,
        }


# ==================== Serialization ====================

def upload_to_response(upload: FileUpload) -> FileUploadResponse:
    return FileUploadResponse(
        id=upload.id,
        name=upload.name,
        type=upload.mime_type,
        size=upload.size or 0,
        status=upload.status,
        uploaded_at=upload.uploaded_at,
        processed_at=upload.processed_at,
        extracted_data=upload.extracted_data or [],
        metadata=upload.processing_metadata or {},
        error=upload.error,
    )


def scrape_to_summary(scrape: WebScrape) -> WebScrapeSummary:
    return WebScrapeSummary(
        id=scrape.id,
        url=scrape.url,
        title=scrape.title,
        status=scrape.status,
        tables_found=len(scrape.tables or []),
        records_found=len(scrape.financial_records or []),
        error=scrape.error,
        scraped_at=scrape.scraped_at,
    )


# ==================== FastAPI Dependency ====================

def get_extraction_store(db: Session = Depends(get_db)) -> ExtractionStore:
    """Get extraction store with DB session."""
    return ExtractionStore(db)
