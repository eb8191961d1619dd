"""
Core functionality for document comparison.

This package contains the main algorithms and processing logic:
- Embedded PDF text extraction
- Text extraction with OCR fallback
- Jaro-Winkler line scoring and positional line alignment
- Comparison of two documents
"""

from .config import ComparisonConfig, get_config
from .models import ExtractionMethod, ExtractedText, PageOutcome, LineComparison, ComparisonResult
from .similarity import jaro_winkler_similarity
from .line_comparer import LineComparer, normalize_line, SIMILARITY_THRESHOLD
from .pdf_handler import PDFTextExtractor
from .text_extractor import DocumentTextExtractor, ExtractionState, state_after_direct_attempt
from .comparator import DocumentComparator, clean_text, split_lines
from .logging_config import setup_logging, LoggerMixin, ProductionLogger
from .validation import (
    ValidationError, FileValidationError, ParameterValidationError,
    ContentValidationError, InsufficientTextError,
    ExtractionError, PageRasterizationError, OcrRecognitionError,
    OcrBackendUnavailableError, ExtractionCancelledError, ComparisonTimeoutError,
    FileValidator, ParameterValidator, ContentValidator,
    validate_inputs
)

__all__ = [
    'ComparisonConfig',
    'get_config',
    'ExtractionMethod',
    'ExtractedText',
    'PageOutcome',
    'LineComparison',
    'ComparisonResult',
    'jaro_winkler_similarity',
    'LineComparer',
    'normalize_line',
    'SIMILARITY_THRESHOLD',
    'PDFTextExtractor',
    'DocumentTextExtractor',
    'ExtractionState',
    'state_after_direct_attempt',
    'DocumentComparator',
    'clean_text',
    'split_lines',
    'setup_logging',
    'LoggerMixin',
    'ProductionLogger',
    'ValidationError',
    'FileValidationError',
    'ParameterValidationError',
    'ContentValidationError',
    'InsufficientTextError',
    'ExtractionError',
    'PageRasterizationError',
    'OcrRecognitionError',
    'OcrBackendUnavailableError',
    'ExtractionCancelledError',
    'ComparisonTimeoutError',
    'FileValidator',
    'ParameterValidator',
    'ContentValidator',
    'validate_inputs'
]
