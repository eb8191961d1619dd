"""
Result types shared by extraction and comparison.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ExtractionMethod(str, Enum):
    """How a document's text was obtained."""
    DIRECT = "direct"
    OCR = "ocr"


@dataclass(frozen=True)
class ExtractedText:
    """Full text of one document and the method that produced it."""
    text: str
    method: ExtractionMethod
    page_count: int = 0
    failed_pages: Tuple[int, ...] = ()


@dataclass(frozen=True)
class PageOutcome:
    """OCR outcome for one page: either text or a failure reason."""
    page_number: int
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, page_number: int, text: str) -> "PageOutcome":
        return cls(page_number=page_number, text=text)

    @classmethod
    def failure(cls, page_number: int, reason: str) -> "PageOutcome":
        return cls(page_number=page_number, error=reason)


@dataclass(frozen=True)
class LineComparison:
    """Similarity of the lines at one position of both documents."""
    line_number: int
    first_line: str
    second_line: str
    similarity: float
    matched: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lineNumber": self.line_number,
            "firstLine": self.first_line,
            "secondLine": self.second_line,
            "similarity": self.similarity,
            "matched": self.matched,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """Line-level report and aggregate score for one document pair."""
    line_comparisons: Tuple[LineComparison, ...] = field(default_factory=tuple)
    matching_lines: int = 0
    total_lines: int = 0
    similarity: float = 0.0

    @property
    def unmatched(self) -> Tuple[LineComparison, ...]:
        return tuple(lc for lc in self.line_comparisons if not lc.matched)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lineComparisons": [lc.to_dict() for lc in self.line_comparisons],
            "matchingLines": self.matching_lines,
            "totalLines": self.total_lines,
            "similarity": self.similarity,
        }
