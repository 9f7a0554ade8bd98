"""
Tests for the extraction orchestrator and OCR engine handle.
"""

import threading
import time
from decimal import Decimal

import pytest

from resale_tracker.services.extraction import extract_order_data
from resale_tracker.services.ocr import OCREngineHandle, OCRError, OCRResult
from resale_tracker.services.parser import ReceiptParser, NO_NAME_WARNING


class RecordingObserver:
    def __init__(self):
        self.values = []

    def progress(self, percentage):
        self.values.append(percentage)


class TestExtractOrderData:

    def test_successful_extraction(self, make_handle, cole_haan_text):
        handle, engine = make_handle(text=cole_haan_text, confidence=88.0)
        observer = RecordingObserver()

        result = extract_order_data(b"image-bytes", observer, engine_handle=handle, parser=ReceiptParser())

        assert result.success
        assert result.error is None
        assert result.name == "Cole Haan Men's Grand Crosscourt Sneaker (M)"
        assert result.cost == Decimal("89.99")
        assert result.quantity == 2
        assert result.raw_text == cole_haan_text
        assert result.confidence == 88.0
        assert observer.values == [10, 30, 80, 100]
        assert engine.calls == 1

    def test_plain_callable_progress(self, make_handle):
        handle, _ = make_handle(text="Total: $10.00")
        seen = []
        extract_order_data(b"img", seen.append, engine_handle=handle)
        assert seen == [10, 30, 80, 100]

    def test_progress_is_optional(self, make_handle):
        handle, _ = make_handle(text="Qty: 3")
        assert extract_order_data(b"img", engine_handle=handle).quantity == 3

    @pytest.mark.parametrize("text", ["", "   \n \n"])
    def test_blank_ocr_text(self, make_handle, text):
        handle, _ = make_handle(text=text)
        result = extract_order_data(b"img", engine_handle=handle)
        assert result.success
        assert result.name == "Unnamed Item"
        assert result.cost == Decimal("0")
        assert result.quantity == 1
        assert result.warnings == [NO_NAME_WARNING]

    def test_recognition_failure_is_downgraded(self, make_handle):
        handle, _ = make_handle(error=OCRError("image unreadable"))
        observer = RecordingObserver()

        result = extract_order_data(b"img", observer, engine_handle=handle)

        assert not result.success
        assert result.error == "image unreadable"
        assert result.name == "Unnamed Item"
        assert result.cost == Decimal("0")
        assert result.quantity == 1
        assert result.raw_text == ""
        assert observer.values == [10, 30]

    def test_unexpected_engine_exception_is_downgraded(self, make_handle):
        handle, _ = make_handle(error=RuntimeError("segfault in engine"))
        result = extract_order_data(b"img", engine_handle=handle)
        assert not result.success
        assert result.error == "segfault in engine"

    def test_engine_init_failure_is_downgraded(self):
        def broken_factory():
            raise RuntimeError("tesseract is not installed")

        result = extract_order_data(b"img", engine_handle=OCREngineHandle(broken_factory))

        assert not result.success
        assert "tesseract is not installed" in result.error
        assert result.name == "Unnamed Item"

    def test_observer_errors_do_not_fail_extraction(self, make_handle):
        handle, _ = make_handle(text="Qty: 4")

        def noisy(percentage):
            raise ValueError("ui went away")

        result = extract_order_data(b"img", noisy, engine_handle=handle)
        assert result.success
        assert result.quantity == 4

    def test_observer_runs_outside_engine_lock(self, make_handle):
        handle, engine = make_handle(text="Qty: 1")
        other_finished = []
        finished_during_notify = []

        def observer(percentage):
            if percentage != 30:
                return
            # Another request must be able to use the engine while we are notified
            worker = threading.Thread(target=lambda: other_finished.append(handle.recognize(b"other")))
            worker.start()
            worker.join(timeout=2)
            finished_during_notify.append(not worker.is_alive())

        result = extract_order_data(b"img", observer, engine_handle=handle)

        assert result.success
        assert finished_during_notify == [True]
        assert len(other_finished) == 1
        assert engine.calls == 2


class TestOCREngineHandle:

    def test_engine_created_lazily_and_reused(self):
        created = []

        class Engine:
            def recognize(self, image):
                return OCRResult(text="ok")

        def factory():
            created.append(1)
            return Engine()

        handle = OCREngineHandle(factory)
        assert not handle.initialized
        assert created == []

        extract_order_data(b"a", engine_handle=handle)
        extract_order_data(b"b", engine_handle=handle)

        assert handle.initialized
        assert created == [1]

    def test_reset_drops_engine(self):
        created = []

        class Engine:
            def recognize(self, image):
                return OCRResult(text="")

        def factory():
            created.append(1)
            return Engine()

        handle = OCREngineHandle(factory)
        handle.recognize(b"a")
        handle.reset()
        assert not handle.initialized
        handle.recognize(b"b")
        assert len(created) == 2

    def test_init_failure_is_retried_on_next_call(self):
        attempts = []

        class Engine:
            def recognize(self, image):
                return OCRResult(text="Qty: 2")

        def flaky_factory():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("first start failed")
            return Engine()

        handle = OCREngineHandle(flaky_factory)
        with pytest.raises(OCRError):
            handle.recognize(b"a")
        assert handle.recognize(b"a").text == "Qty: 2"

    def test_recognition_is_serialized(self):
        class SlowEngine:
            def __init__(self):
                self.active = 0
                self.max_active = 0
                self._counter_lock = threading.Lock()

            def recognize(self, image):
                with self._counter_lock:
                    self.active += 1
                    self.max_active = max(self.max_active, self.active)
                time.sleep(0.02)
                with self._counter_lock:
                    self.active -= 1
                return OCRResult(text="Qty: 1")

        engine = SlowEngine()
        handle = OCREngineHandle(lambda: engine)
        results = []

        def worker():
            results.append(extract_order_data(b"img", engine_handle=handle, parser=ReceiptParser()))

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 5
        assert all(r.success for r in results)
        assert engine.max_active == 1
