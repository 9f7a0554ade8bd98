"""
OCR service for extracting text from receipt/order screenshots.

Tesseract is wrapped behind a small engine interface so the extraction
pipeline can be driven by a fake in tests. The engine lives in an
OCREngineHandle that creates it lazily and serializes access to it.
"""

import io
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Dict, Iterator, List, Optional, Protocol, Tuple, Union

import pytesseract
from PIL import Image, ImageEnhance

from resale_tracker.config import settings

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, BinaryIO, Image.Image]


class OCRError(Exception):
    """Raised when the OCR engine cannot start or cannot read an image."""


@dataclass
class OCRResult:
    """Recognized text plus confidence metadata."""
    text: str
    confidence: Optional[float] = None  # Mean word confidence, 0-100
    word_count: int = 0


class OCREngine(Protocol):
    def recognize(self, image: ImageSource) -> OCRResult:
        ...


class TesseractEngine:
    """OCR engine backed by Tesseract via pytesseract."""

    def __init__(
        self,
        tesseract_cmd: Optional[str] = None,
        lang: Optional[str] = None,
        config: Optional[str] = None,
        preprocess: Optional[bool] = None,
    ):
        """Initialize with explicit options, falling back to settings."""
        cmd = tesseract_cmd if tesseract_cmd is not None else settings.TESSERACT_CMD
        if cmd:
            pytesseract.pytesseract.tesseract_cmd = cmd
        self.lang = lang or settings.TESSERACT_LANG
        self.config = config or settings.TESSERACT_CONFIG
        self.preprocess = settings.OCR_PREPROCESS if preprocess is None else preprocess

    def recognize(self, image: ImageSource) -> OCRResult:
        """
        Run Tesseract on an image.

        Args:
            image: Raw bytes, a path, a binary file object or a PIL image

        Returns:
            OCRResult with text rebuilt line by line

        Raises:
            OCRError: image unreadable or Tesseract failed
        """
        try:
            pil_image = self._load_image(image)
            if self.preprocess:
                pil_image = self._preprocess_image(pil_image)
            data = pytesseract.image_to_data(
                pil_image,
                lang=self.lang,
                config=self.config,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, OSError, ValueError) as e:
            raise OCRError(f"OCR failed: {e}") from e

        return self._build_result(data)

    @staticmethod
    def _load_image(image: ImageSource) -> Image.Image:
        if isinstance(image, Image.Image):
            return image
        if isinstance(image, (bytes, bytearray)):
            image = io.BytesIO(image)
        pil_image = Image.open(image)
        pil_image.load()
        return pil_image

    @staticmethod
    def _preprocess_image(image: Image.Image) -> Image.Image:
        """
        Grayscale plus a contrast boost; helps with low-contrast screenshots.

        Args:
            image: PIL Image object

        Returns:
            Preprocessed image
        """
        if image.mode != 'RGB':
            image = image.convert('RGB')
        image = image.convert('L')
        return ImageEnhance.Contrast(image).enhance(2.0)

    @staticmethod
    def _build_result(data: Dict[str, List[Any]]) -> OCRResult:
        """Group image_to_data words into lines by (block, paragraph, line)."""
        lines: Dict[Tuple[int, int, int], List[str]] = {}
        confidences: List[float] = []

        for i, word in enumerate(data.get('text', [])):
            word = (word or '').strip()
            if not word:
                continue
            line_id = (
                int(data['block_num'][i]),
                int(data['par_num'][i]),
                int(data['line_num'][i]),
            )
            lines.setdefault(line_id, []).append(word)
            try:
                conf = float(data['conf'][i])
            except (KeyError, IndexError, TypeError, ValueError):
                continue
            if conf >= 0:
                confidences.append(conf)

        text = "\n".join(" ".join(words) for words in lines.values())
        confidence = sum(confidences) / len(confidences) if confidences else None
        return OCRResult(text=text, confidence=confidence, word_count=sum(len(w) for w in lines.values()))


class OCREngineHandle:
    """
    Owns one lazily created OCR engine.

    Tesseract invocations share process-wide configuration, so recognition
    is serialized: ``acquire()`` holds a lock for as long as the caller uses
    the engine.
    """

    def __init__(self, factory: Callable[[], OCREngine]):
        self._factory = factory
        self._engine: Optional[OCREngine] = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    def _ensure_engine(self) -> OCREngine:
        # Caller holds self._lock
        if self._engine is None:
            logger.info("Initializing OCR engine")
            try:
                self._engine = self._factory()
            except OCRError:
                raise
            except Exception as e:
                raise OCRError(f"OCR engine initialization failed: {e}") from e
        return self._engine

    def ensure_ready(self) -> None:
        """
        Create the engine now if it does not exist yet.

        Raises:
            OCRError: engine creation failed
        """
        with self._lock:
            self._ensure_engine()

    @contextmanager
    def acquire(self) -> Iterator[OCREngine]:
        """
        Yield the engine, creating it on first use.

        Raises:
            OCRError: engine creation failed
        """
        with self._lock:
            yield self._ensure_engine()

    def recognize(self, image: ImageSource) -> OCRResult:
        with self.acquire() as engine:
            return engine.recognize(image)

    def reset(self) -> None:
        """Drop the engine; the next acquire() creates a fresh one."""
        with self._lock:
            self._engine = None


_default_handle: Optional[OCREngineHandle] = None
_default_handle_lock = threading.Lock()


def get_engine_handle() -> OCREngineHandle:
    """Process-wide handle around a TesseractEngine built from settings."""
    global _default_handle
    with _default_handle_lock:
        if _default_handle is None:
            _default_handle = OCREngineHandle(TesseractEngine)
        return _default_handle
