"""
File Upload Routes.

Handles upload, listing, (re)processing and deletion of financial documents.
All operations are synchronous REST endpoints; extraction runs in the
request thread pool.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from findoc.api.deps import get_processor_dep, get_store_dep, validate_file_upload
from findoc.core.exceptions import FinDocError
from findoc.models.schema import ApiResponse, FileListResponse, FileUploadResponse, UploadStatus
from findoc.services.extraction_store import ExtractionStore, upload_to_response
from findoc.services.file_processing_service import FileProcessingService
from findoc.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _stream_size(file: UploadFile) -> int:
    file.file.seek(0, 2)
    size = file.file.tell()
    file.file.seek(0)
    return size


# ==================== Upload ====================

@router.post(
    "/upload",
    response_model=ApiResponse[FileUploadResponse],
    status_code=status.HTTP_201_CREATED,
)
def upload_file(
        file: UploadFile = File(..., description="Financial document to upload"),
        store: ExtractionStore = Depends(get_store_dep),
        processor: FileProcessingService = Depends(get_processor_dep),
):
    """
    Upload and process a document.

    Process:
    1. Validate file (type, size)
    2. Store under UPLOAD_DIR, record as pending
    3. Extract records and persist them (or the error)

    A failed extraction still returns 201: the upload exists with
    status=error and the error message.

    Raises:
        413: File too large
        415: Unsupported type
    """
    logger.info(f"Received upload: {file.filename} ({file.content_type})")

    size = _stream_size(file)
    validate_file_upload(file.content_type, size)

    upload = store.save_upload(
        source=file.file,
        name=file.filename or "upload",
        mime_type=file.content_type,
        size=size,
    )

    try:
        upload = store.process_upload(upload.id, processor)
        message = f"File processed: {len(upload.extracted_data or [])} record(s) extracted"
    except FinDocError as e:
        upload = store.get_upload(upload.id)
        message = f"File stored but processing failed: {e}"

    return ApiResponse[FileUploadResponse](
        status="success" if upload.status == UploadStatus.COMPLETED.value else "error",
        message=message,
        data=upload_to_response(upload),
    )


# ==================== List / Get ====================

@router.get("/uploads", response_model=FileListResponse)
def list_uploads(
        status_filter: Optional[UploadStatus] = Query(None, alias="status"),
        store: ExtractionStore = Depends(get_store_dep),
):
    """List uploads, newest first."""
    uploads = store.list_uploads(status=status_filter.value if status_filter else None)
    return FileListResponse(
        total=len(uploads),
        files=[upload_to_response(u) for u in uploads],
    )


@router.get("/{file_id}", response_model=FileUploadResponse)
def get_upload(file_id: str, store: ExtractionStore = Depends(get_store_dep)):
    upload = store.get_upload(file_id)
    if not upload:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"File not found: {file_id}")
    return upload_to_response(upload)


# ==================== Reprocess ====================

@router.post("/{file_id}/process", response_model=FileUploadResponse)
def process_upload(
        file_id: str,
        store: ExtractionStore = Depends(get_store_dep),
        processor: FileProcessingService = Depends(get_processor_dep),
):
    """
    Re-run extraction for a stored file.

    Raises:
        404: Unknown file id
        415 / 422: Mapped from the extraction error
    """
    if not store.get_upload(file_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"File not found: {file_id}")

    upload = store.process_upload(file_id, processor)
    return upload_to_response(upload)


# ==================== Delete ====================

@router.delete("/{file_id}")
def delete_upload(file_id: str, store: ExtractionStore = Depends(get_store_dep)):
    """Delete the upload record and its stored file."""
    if not store.delete_upload(file_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"File not found: {file_id}")
    return {"status": "success", "message": f"Deleted {file_id}"}
