"""Tests for the shared OCR engine (tesseract itself is patched out)."""
import threading
import time
from pathlib import Path

import pytest
from PIL import Image

from findoc.utils.extractors import ocr_extractor
from findoc.utils.extractors.ocr_extractor import OCREngine


class SlowTesseract:
    """Records how many recognitions run at once."""

    def __init__(self, delay=0.05):
        self.delay = delay
        self.active = 0
        self.peak = 0
        self.calls = []
        self._lock = threading.Lock()

    def image_to_string(self, image, lang=None):
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
            self.calls.append((image, lang))
        time.sleep(self.delay)
        with self._lock:
            self.active -= 1
        return "  Revenue 100\n"


@pytest.fixture
def slow_tesseract(monkeypatch):
    fake = SlowTesseract()
    monkeypatch.setattr(ocr_extractor.pytesseract, "image_to_string", fake.image_to_string)
    return fake


def _run_concurrently(engine, count):
    threads = [
        threading.Thread(target=engine.recognize, args=(Path(f"page{i}.png"),))
        for i in range(count)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


class TestRecognize:

    def test_single_worker_serializes_calls(self, slow_tesseract):
        _run_concurrently(OCREngine(max_workers=1), 4)

        assert len(slow_tesseract.calls) == 4
        assert slow_tesseract.peak == 1

    def test_pool_allows_parallel_calls(self, slow_tesseract):
        _run_concurrently(OCREngine(max_workers=2), 4)

        assert 1 <= slow_tesseract.peak <= 2

    def test_path_passed_as_string_and_text_stripped(self, slow_tesseract):
        text = OCREngine(lang="deu", max_workers=1).recognize(Path("scan.png"))

        assert text == "Revenue 100"
        assert slow_tesseract.calls == [("scan.png", "deu")]

    def test_rejects_zero_workers(self):
        with pytest.raises(ValueError):
            OCREngine(max_workers=0)


class TestRecognizePdfPage:

    def test_rasterizes_one_page(self, slow_tesseract, monkeypatch):
        requested = {}

        def convert(path, first_page, last_page, dpi):
            requested.update(path=path, first=first_page, last=last_page, dpi=dpi)
            return [Image.new("L", (10, 10))]

        monkeypatch.setattr(ocr_extractor, "convert_from_path", convert)
        monkeypatch.setattr(
            ocr_extractor.pytesseract, "image_to_data",
            lambda image, lang=None, output_type=None: {"conf": ["-1", "80", "90"]},
        )

        result = OCREngine(dpi=150, max_workers=1).recognize_pdf_page(Path("report.pdf"), 3)

        assert requested == {"path": "report.pdf", "first": 3, "last": 3, "dpi": 150}
        assert result["page_number"] == 3
        assert result["text"] == "Revenue 100"
        assert result["confidence"] == pytest.approx(0.85)

    def test_no_image_returns_none(self, monkeypatch):
        monkeypatch.setattr(ocr_extractor, "convert_from_path", lambda *args, **kwargs: [])

        assert OCREngine(max_workers=1).recognize_pdf_page(Path("report.pdf"), 1) is None
