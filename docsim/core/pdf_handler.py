import unicodedata
from pathlib import Path
from typing import Tuple, Union

import fitz  # PyMuPDF

from .logging_config import LoggerMixin

DocumentHandle = Union[str, Path]


def normalize_filename(filename: str) -> str:
    """
    Normalize filename for consistent handling of Unicode characters.

    Args:
        filename: Original filename string

    Returns:
        NFC-normalized filename string
    """
    return unicodedata.normalize('NFC', filename)


def safe_filename_encode(filename: str) -> str:
    """
    Safely encode filename for logging and display purposes.

    Args:
        filename: Original filename

    Returns:
        Safely encoded filename string
    """
    try:
        normalized = normalize_filename(filename)
        return normalized.encode('utf-8', errors='replace').decode('utf-8')
    except (UnicodeError, AttributeError):
        return repr(filename)


def document_label(document: DocumentHandle) -> str:
    """Short display name of a document for log records."""
    return safe_filename_encode(Path(document).name)


class PDFTextExtractor(LoggerMixin):
    """
    Reads the embedded text layer of a PDF with PyMuPDF.

    No pixels are rendered here; scanned pages simply yield no text.
    """

    def extract_embedded_text(self, document: DocumentHandle) -> Tuple[str, int]:
        """
        Extract the text layer of every page.

        Args:
            document: Path to the PDF, with or without a ``.pdf`` suffix

        Returns:
            Tuple of (full_text, page_count), pages joined by newlines

        Raises:
            FileNotFoundError: If the document does not exist
            RuntimeError: If PyMuPDF cannot open or parse the document
        """
        with fitz.open(Path(document), filetype="pdf") as doc:
            page_texts = [page.get_text("text") for page in doc]
            page_count = doc.page_count

        text = "\n".join(page_texts)
        self.logger.debug(f"Read {len(text)} embedded chars from {page_count} pages of {document_label(document)}")
        return text, page_count

    def get_page_count(self, document: DocumentHandle) -> int:
        """Return the number of pages in the PDF."""
        with fitz.open(Path(document), filetype="pdf") as doc:
            return doc.page_count
