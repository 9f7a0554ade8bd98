"""
Scan API router: receipt screenshot -> suggested lot fields.
"""

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.concurrency import run_in_threadpool
import logging

from resale_tracker.config import settings
from resale_tracker.models.lot import ScanResponse
from resale_tracker.services.extraction import extract_order_data, build_parser
from resale_tracker.services.ocr import OCREngineHandle, get_engine_handle
from resale_tracker.utils.images import make_thumbnail

router = APIRouter(prefix="/scan", tags=["scan"])
logger = logging.getLogger(__name__)

ALLOWED_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"]


@router.post("", response_model=ScanResponse)
async def scan_receipt(
    file: UploadFile = File(...),
    engine_handle: OCREngineHandle = Depends(get_engine_handle),
):
    """
    OCR an order/receipt screenshot and suggest name, cost and quantity.

    OCR failures are reported inside the result (success=False) so the
    client can fall back to manual entry.

    Args:
        file: Uploaded image

    Returns:
        Extraction result plus a thumbnail for the lot
    """
    if file.content_type not in ALLOWED_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type: {file.content_type}. Allowed: JPG, PNG, WEBP, GIF"
        )

    file_data = await file.read()
    file_size_mb = len(file_data) / (1024 * 1024)
    if file_size_mb > settings.MAX_UPLOAD_MB:
        raise HTTPException(
            status_code=400,
            detail=f"File too large: {file_size_mb:.2f}MB. Maximum: {settings.MAX_UPLOAD_MB}MB"
        )

    logger.debug("Running extraction on uploaded file", extra={"filename": file.filename})
    result = await run_in_threadpool(
        extract_order_data,
        file_data,
        None,
        engine_handle,
        build_parser(),
    )

    thumbnail = None
    if result.success:
        try:
            thumbnail = make_thumbnail(file_data, settings.THUMBNAIL_SIZE)
        except OSError as e:
            logger.warning("Thumbnail generation failed", extra={
                "filename": file.filename,
                "error": str(e)
            })

    return ScanResponse(result=result, thumbnail=thumbnail)
