import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional, Tuple

from .config import ComparisonConfig, get_config
from .line_comparer import LineComparer
from .logging_config import LoggerMixin
from .models import ComparisonResult, ExtractedText
from .pdf_handler import DocumentHandle, PDFTextExtractor, document_label
from .text_extractor import DocumentTextExtractor
from .validation import (
    ComparisonTimeoutError, ContentValidator, FileValidator, OcrBackendUnavailableError,
)
from ..utils.ocr_engine import create_ocr_backend
from ..utils.page_rasterizer import PageRasterizer, RenderOptions


def clean_text(text: Optional[str]) -> str:
    """Normalize line endings to ``\\n`` and trim."""
    return (text or "").replace("\r\n", "\n").replace("\r", "\n").strip()


def split_lines(text: str) -> List[str]:
    """Split on newlines, dropping lines that are blank after trimming."""
    return [line for line in text.split("\n") if line.strip()]


class DocumentComparator(LoggerMixin):
    """
    Compares two PDF documents line by line.

    Both documents are extracted concurrently, cleaned, checked for
    sufficient text and then scored with positional line alignment.
    Either a complete ComparisonResult is returned or an exception is raised.
    """

    def __init__(
        self,
        config: Optional[ComparisonConfig] = None,
        text_extractor: Optional[DocumentTextExtractor] = None,
        line_comparer: Optional[LineComparer] = None,
    ):
        """
        Initialize DocumentComparator.

        Args:
            config: Settings (None = defaults with environment overrides)
            text_extractor: Per-document extractor (None = built from config)
            line_comparer: Line scorer (None = built from config)
        """
        self.config = config or get_config()
        self.text_extractor = text_extractor or self._build_text_extractor()
        self.line_comparer = line_comparer or LineComparer(threshold=self.config.similarity_threshold)

    def _build_text_extractor(self) -> DocumentTextExtractor:
        try:
            ocr_backend = create_ocr_backend(self.config)
        except OcrBackendUnavailableError as e:
            # Text-based PDFs still work without OCR
            self.logger.error(f"OCR fallback disabled: {e}")
            ocr_backend = None

        rasterizer = PageRasterizer(
            options=RenderOptions(
                density=self.config.render_density,
                width=self.config.render_width,
                height=self.config.render_height,
                fmt=self.config.render_format,
            ),
            temp_dir=self.config.temp_dir,
        )
        return DocumentTextExtractor(
            pdf_extractor=PDFTextExtractor(),
            rasterizer=rasterizer,
            ocr_backend=ocr_backend,
            min_direct_chars=self.config.min_direct_chars,
        )

    def extract_pair(self, document_a: DocumentHandle,
                     document_b: DocumentHandle) -> Tuple[ExtractedText, ExtractedText]:
        """
        Extract both documents concurrently.

        Raises:
            ComparisonTimeoutError: If extraction exceeds ``config.timeout_seconds``
        """
        cancel_event = threading.Event()
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="docsim-extract")
        try:
            future_a = executor.submit(self.text_extractor.extract, document_a, cancel_event)
            future_b = executor.submit(self.text_extractor.extract, document_b, cancel_event)
            # The timeout bounds the whole pair, not each document
            _, not_done = wait([future_a, future_b], timeout=self.config.timeout_seconds)
            if not_done:
                cancel_event.set()
                raise ComparisonTimeoutError(
                    f"Text extraction did not finish within {self.config.timeout_seconds}s"
                )
            return future_a.result(), future_b.result()
        finally:
            # Cancelled workers stop at their next page boundary
            executor.shutdown(wait=not cancel_event.is_set())

    def compare(self, document_a: DocumentHandle, document_b: DocumentHandle) -> ComparisonResult:
        """
        Compare two documents.

        Args:
            document_a: Path to the first PDF
            document_b: Path to the second PDF

        Returns:
            ComparisonResult for the pair

        Raises:
            FileValidationError: If either handle does not name an existing file
            InsufficientTextError: If either document yields fewer than
                ``config.min_comparable_chars`` characters of text
            ComparisonTimeoutError: If extraction takes too long
        """
        FileValidator.validate_document(document_a)
        FileValidator.validate_document(document_b)

        with self.log_operation("compare_documents",
                                document=f"{document_label(document_a)} vs {document_label(document_b)}"):
            extracted_a, extracted_b = self.extract_pair(document_a, document_b)

            text_a = clean_text(extracted_a.text)
            text_b = clean_text(extracted_b.text)
            ContentValidator.validate_extracted_text(text_a, "first document", self.config.min_comparable_chars)
            ContentValidator.validate_extracted_text(text_b, "second document", self.config.min_comparable_chars)

            self.logger.info(
                f"Text extraction successful ({extracted_a.method.value}/{extracted_b.method.value}), "
                "starting comparison"
            )
            result = self.line_comparer.compare_lines(split_lines(text_a), split_lines(text_b))

        self.logger.info(f"Comparison completed: {result.similarity:.1%} similarity "
                         f"({result.matching_lines}/{result.total_lines} lines)")
        return result
