"""
Extraction orchestrator: receipt image -> ExtractionResult.

Runs OCR through the engine handle, parses the text, and packages the
result. OCR failures never propagate: the caller always gets a result it can
show in the manual-entry form.
"""

import logging
from typing import Callable, Optional, Protocol, Union

from resale_tracker.config import settings
from resale_tracker.models.lot import ExtractionResult
from resale_tracker.services.ocr import ImageSource, OCREngineHandle, get_engine_handle
from resale_tracker.services.parser import ReceiptParser, UNNAMED_ITEM
from resale_tracker.utils.vocabulary import vocabulary_from_settings

logger = logging.getLogger(__name__)

PROGRESS_STARTED = 10
PROGRESS_ENGINE_READY = 30
PROGRESS_RECOGNIZED = 80
PROGRESS_DONE = 100


class ProgressObserver(Protocol):
    def progress(self, percentage: int) -> None:
        ...


class _CallbackObserver:
    """Adapts a plain ``callback(percentage)`` to ProgressObserver."""

    def __init__(self, callback: Callable[[int], None]):
        self._callback = callback

    def progress(self, percentage: int) -> None:
        self._callback(percentage)


def _notify(observer: Optional[ProgressObserver], percentage: int) -> None:
    if observer is None:
        return
    try:
        observer.progress(percentage)
    except Exception:
        logger.warning("Progress observer failed", exc_info=True)


def build_parser() -> ReceiptParser:
    """ReceiptParser configured from application settings."""
    return ReceiptParser(
        vocabulary=vocabulary_from_settings(settings),
        min_score=settings.NAME_MIN_SCORE,
        max_price=settings.MAX_PLAUSIBLE_PRICE,
    )


def extract_order_data(
    image: ImageSource,
    on_progress: Union[ProgressObserver, Callable[[int], None], None] = None,
    engine_handle: Optional[OCREngineHandle] = None,
    parser: Optional[ReceiptParser] = None,
) -> ExtractionResult:
    """
    OCR a receipt/order screenshot and guess the lot fields.

    Progress is reported at 10 (started), 30 (engine ready),
    80 (text recognized) and 100 (parsed).

    Args:
        image: Image bytes, path, file object or PIL image
        on_progress: Observer or callable receiving integer percentages
        engine_handle: OCR engine owner; defaults to the process-wide handle
        parser: Receipt parser; defaults to one built from settings

    Returns:
        ExtractionResult. On OCR failure success is False, error holds the
        message and the fields keep their defaults.
    """
    observer = on_progress
    if observer is not None and not hasattr(observer, 'progress'):
        observer = _CallbackObserver(observer)
    handle = engine_handle or get_engine_handle()

    try:
        _notify(observer, PROGRESS_STARTED)
        handle.ensure_ready()
        # Observers run outside the engine lock
        _notify(observer, PROGRESS_ENGINE_READY)
        with handle.acquire() as engine:
            ocr_result = engine.recognize(image)
        _notify(observer, PROGRESS_RECOGNIZED)
    except Exception as e:
        logger.error("OCR failed", extra={"error": str(e)}, exc_info=True)
        return ExtractionResult(
            name=UNNAMED_ITEM,
            raw_text="",
            success=False,
            error=str(e) or e.__class__.__name__,
        )

    text = ocr_result.text or ""
    logger.debug("OCR text extracted", extra={
        "text_length": len(text),
        "confidence": ocr_result.confidence,
    })

    fields = (parser or build_parser()).parse(text)
    result = ExtractionResult(
        name=fields.name,
        cost=fields.cost,
        quantity=fields.quantity,
        raw_text=text,
        success=True,
        warnings=fields.warnings,
        confidence=ocr_result.confidence,
    )

    logger.info("Receipt extraction complete", extra={
        "name_found": fields.name_found,
        "cost": str(fields.cost),
        "quantity": fields.quantity,
    })
    _notify(observer, PROGRESS_DONE)
    return result
