"""
Text extraction for a single document.

Direct extraction of the embedded text layer is tried first. When it
yields too little text the document is rasterized page by page and each
page is sent through OCR. Pages are processed strictly in order and one
at a time; a page that fails to render or recognize contributes nothing
and the remaining pages still run.
"""

import threading
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .logging_config import LoggerMixin
from .models import ExtractedText, ExtractionMethod, PageOutcome
from .pdf_handler import DocumentHandle, PDFTextExtractor, document_label
from .validation import ExtractionCancelledError, ExtractionError
from ..utils.ocr_engine import OCRBackend
from ..utils.page_rasterizer import PageRasterizer

# Direct text must be strictly longer than this to skip OCR
MIN_DIRECT_TEXT_CHARS = 30


class ExtractionState(Enum):
    DIRECT_ATTEMPT = "direct_attempt"
    OCR_FALLBACK = "ocr_fallback"
    DONE = "done"


def state_after_direct_attempt(text: str, min_chars: int = MIN_DIRECT_TEXT_CHARS) -> ExtractionState:
    """The only transition out of DIRECT_ATTEMPT."""
    if len(text.strip()) > min_chars:
        return ExtractionState.DONE
    return ExtractionState.OCR_FALLBACK


def fold_page_outcomes(outcomes: Iterable[PageOutcome]) -> Tuple[str, Tuple[int, ...]]:
    """
    Concatenate successful page texts in page order.

    Returns:
        Tuple of (text, failed_page_numbers)
    """
    ordered = sorted(outcomes, key=lambda o: o.page_number)
    text = "".join(o.text + "\n" for o in ordered if o.ok)
    failed = tuple(o.page_number for o in ordered if not o.ok)
    return text.strip(), failed


class DocumentTextExtractor(LoggerMixin):
    """Extracts the full text of one PDF, with OCR fallback."""

    def __init__(
        self,
        pdf_extractor: Optional[PDFTextExtractor] = None,
        rasterizer: Optional[PageRasterizer] = None,
        ocr_backend: Optional[OCRBackend] = None,
        min_direct_chars: int = MIN_DIRECT_TEXT_CHARS,
    ):
        """
        Initialize DocumentTextExtractor.

        Args:
            pdf_extractor: Reader for the embedded text layer
            rasterizer: Renders pages to temporary images
            ocr_backend: OCR service; None disables the fallback path
            min_direct_chars: Direct text length that must be exceeded to skip OCR
        """
        self.pdf_extractor = pdf_extractor or PDFTextExtractor()
        self.rasterizer = rasterizer or PageRasterizer()
        self.ocr_backend = ocr_backend
        self.min_direct_chars = min_direct_chars

    def extract(self, document: DocumentHandle,
                cancel_event: Optional[threading.Event] = None) -> ExtractedText:
        """
        Extract the text of a document.

        Args:
            document: Path to the PDF
            cancel_event: When set, OCR stops before the next page

        Returns:
            ExtractedText tagged ``direct`` or ``ocr``; the text may be empty

        Raises:
            ExtractionCancelledError: If cancelled between OCR pages
        """
        label = document_label(document)

        with self.log_operation("extract_text", document=label):
            direct_text, page_count = self._attempt_direct_extraction(document)
            state = state_after_direct_attempt(direct_text, self.min_direct_chars)

            if state is ExtractionState.DONE:
                self.logger.info(f"Direct text extraction successful ({len(direct_text)} chars)",
                                 extra={'document': label, 'method': ExtractionMethod.DIRECT.value})
                return ExtractedText(direct_text, ExtractionMethod.DIRECT, page_count=page_count)

            self.logger.info(f"Direct text too short ({len(direct_text)} chars), falling back to OCR",
                             extra={'document': label})
            return self._ocr_fallback(document, cancel_event)

    def _attempt_direct_extraction(self, document: DocumentHandle) -> Tuple[str, int]:
        # A failed direct read counts as an empty text layer
        try:
            text, page_count = self.pdf_extractor.extract_embedded_text(document)
        except Exception as e:
            self.logger.warning(f"Direct text extraction failed ({type(e).__name__}: {e})",
                                extra={'document': document_label(document)})
            return "", 0
        return text.strip(), page_count

    def _ocr_fallback(self, document: DocumentHandle,
                      cancel_event: Optional[threading.Event]) -> ExtractedText:
        label = document_label(document)

        if self.ocr_backend is None:
            self.logger.error("OCR backend unavailable, cannot extract scanned document",
                              extra={'document': label})
            return ExtractedText("", ExtractionMethod.OCR)

        try:
            page_count = self.pdf_extractor.get_page_count(document)
        except Exception as e:
            self.logger.error(f"Failed to read PDF page count: {e}", extra={'document': label})
            return ExtractedText("", ExtractionMethod.OCR)

        outcomes: List[PageOutcome] = []
        for page_number in range(1, page_count + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise ExtractionCancelledError(f"Extraction of {label} cancelled before page {page_number}")
            outcomes.append(self._process_page(document, page_number))

        text, failed_pages = fold_page_outcomes(outcomes)
        if failed_pages:
            self.logger.warning(f"OCR skipped {len(failed_pages)} of {page_count} pages: {list(failed_pages)}",
                                extra={'document': label})
        self.logger.info(f"OCR extraction done: {len(text)} chars",
                         extra={'document': label, 'method': ExtractionMethod.OCR.value})
        return ExtractedText(text, ExtractionMethod.OCR, page_count=page_count, failed_pages=failed_pages)

    def _process_page(self, document: DocumentHandle, page_number: int) -> PageOutcome:
        """Render, recognize and clean up one page."""
        context = {'document': document_label(document), 'page': page_number}
        try:
            with self.rasterizer.rendered_page(document, page_number) as image_path:
                self.logger.debug(f"Running OCR on page {page_number}", extra=context)
                text = self.ocr_backend.recognize_text(image_path)
        except ExtractionError as e:
            self.logger.warning(f"Page {page_number} skipped: {e}", extra=context)
            return PageOutcome.failure(page_number, str(e))
        except Exception as e:
            self.logger.warning(f"Page {page_number} skipped, unexpected {type(e).__name__}: {e}", extra=context)
            return PageOutcome.failure(page_number, f"{type(e).__name__}: {e}")

        return PageOutcome.success(page_number, text)
