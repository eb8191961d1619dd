"""
Shared fixtures: small PDFs built with PyMuPDF and fake OCR collaborators.
"""

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import fitz
import pytest

from docsim.core.models import ExtractedText, ExtractionMethod
from docsim.core.validation import OcrRecognitionError, PageRasterizationError
from docsim.utils.ocr_engine import OCRBackend
from docsim.utils.page_rasterizer import PageRasterizer

_PAGE_NUMBER = re.compile(r"_p(\d+)\.")


def page_number_of(image_path) -> int:
    return int(_PAGE_NUMBER.search(Path(image_path).name).group(1))


@pytest.fixture
def make_pdf(tmp_path):
    """Factory writing a PDF whose pages hold the given text (None = blank scan-like page)."""
    def _make(name: str, pages: Iterable[Optional[str]]) -> Path:
        path = tmp_path / name
        doc = fitz.open()
        for text in pages:
            page = doc.new_page(width=300, height=400)
            if text:
                page.insert_text((36, 48), text, fontsize=10)
            else:
                page.draw_rect(fitz.Rect(50, 50, 150, 120), color=(0, 0, 0), fill=(0.5, 0.5, 0.5))
        doc.save(path)
        doc.close()
        return path
    return _make


class FakeOCR(OCRBackend):
    """Returns ``page N`` text, failing on selected pages."""

    name = "fake"

    def __init__(self, failing_pages=(), texts: Optional[Dict[int, str]] = None):
        self.failing_pages = set(failing_pages)
        self.texts = texts or {}
        self.calls: List[int] = []
        self.seen_files_existed: List[bool] = []

    def recognize_text(self, image_path) -> str:
        page = page_number_of(image_path)
        self.calls.append(page)
        self.seen_files_existed.append(Path(image_path).exists())
        if page in self.failing_pages:
            raise OcrRecognitionError(f"simulated OCR failure on page {page}")
        return self.texts.get(page, f"text of page {page}")


class FakeRasterizer(PageRasterizer):
    """Writes a placeholder image file instead of rendering."""

    def __init__(self, temp_dir, failing_pages=()):
        super().__init__(temp_dir=temp_dir)
        self.failing_pages = set(failing_pages)
        self.rendered: List[Path] = []

    def render_page(self, document, page_number):
        if page_number in self.failing_pages:
            raise PageRasterizationError(f"simulated render failure on page {page_number}",
                                         page_number=page_number)
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        path = self._image_path(document, page_number)
        path.write_bytes(b"not really a png")
        self.rendered.append(path)
        return path


class FakePDFExtractor:
    """Structured-text extractor with canned answers."""

    def __init__(self, text="", page_count=0, fail_direct=False, fail_page_count=False):
        self.text = text
        self.page_count = page_count
        self.fail_direct = fail_direct
        self.fail_page_count = fail_page_count

    def extract_embedded_text(self, document):
        if self.fail_direct:
            raise RuntimeError("cannot parse PDF")
        return self.text, self.page_count

    def get_page_count(self, document):
        if self.fail_page_count:
            raise RuntimeError("cannot read page tree")
        return self.page_count


class FakeDocumentExtractor:
    """Stands in for DocumentTextExtractor in comparator tests."""

    def __init__(self, texts: Dict[str, str], method=ExtractionMethod.DIRECT):
        self.texts = texts
        self.method = method
        self.calls: List[str] = []

    def extract(self, document, cancel_event=None):
        self.calls.append(Path(document).name)
        return ExtractedText(self.texts[Path(document).name], self.method)


@pytest.fixture
def pdf_file(tmp_path):
    """Factory for placeholder document files handed to fake extractors."""
    def _make(name: str) -> Path:
        path = tmp_path / name
        path.write_bytes(b"%PDF-1.4 placeholder")
        return path
    return _make
