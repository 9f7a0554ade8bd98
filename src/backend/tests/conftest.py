"""
Shared fixtures: a scriptable OCR engine and sample images.
"""

import io

import pytest
from PIL import Image

from resale_tracker.services.ocr import OCREngineHandle, OCRResult


COLE_HAAN_ORDER = """\
Your Orders
Order placed March 3, 2024
Order # 112-4455667-1234567
Cole Haan Men's Grand Crosscourt Sneaker (M)
Sold by: Cole Haan
Qty: 2
Ship to: John Smith — CA 90210
Total: $89.99
"""


class FakeEngine:
    """OCR engine that returns canned text or raises a canned error."""

    def __init__(self, text="", confidence=91.5, error=None):
        self.text = text
        self.confidence = confidence
        self.error = error
        self.calls = 0

    def recognize(self, image):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return OCRResult(text=self.text, confidence=self.confidence, word_count=len(self.text.split()))


@pytest.fixture
def make_handle():
    """Build (handle, engine) pairs around a FakeEngine."""
    def _make(text="", confidence=91.5, error=None):
        engine = FakeEngine(text=text, confidence=confidence, error=error)
        return OCREngineHandle(lambda: engine), engine
    return _make


@pytest.fixture
def cole_haan_text():
    return COLE_HAAN_ORDER


@pytest.fixture
def png_bytes():
    """A small, valid PNG screenshot stand-in."""
    buffer = io.BytesIO()
    Image.new('RGB', (400, 200), 'white').save(buffer, format='PNG')
    return buffer.getvalue()
