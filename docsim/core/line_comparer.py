import re
from typing import List, Sequence

from .logging_config import LoggerMixin
from .models import ComparisonResult, LineComparison
from .similarity import jaro_winkler_similarity
from .validation import ParameterValidator, validate_inputs

# Lines at least this similar count as a match
SIMILARITY_THRESHOLD = 0.90

_WHITESPACE_RUN = re.compile(r'\s+')


def normalize_line(line: str) -> str:
    """Case-fold and collapse whitespace runs to a single space."""
    return _WHITESPACE_RUN.sub(' ', line.casefold())


class LineComparer(LoggerMixin):
    """
    Compares two documents line by line using positional alignment.

    Line ``i`` of the first document is only ever compared with line ``i``
    of the second. Nothing is reordered and no gaps are inserted, so an
    inserted or deleted line shifts every later comparison.
    """

    @validate_inputs(
        threshold=lambda x: ParameterValidator.validate_probability(x, "threshold")
    )
    def __init__(self, threshold: float = SIMILARITY_THRESHOLD):
        """
        Initialize LineComparer.

        Args:
            threshold: Minimum similarity (inclusive) for a line pair to match

        Raises:
            ParameterValidationError: If threshold is outside [0, 1]
        """
        self.threshold = threshold

    def compare_lines(self, lines1: Sequence[str], lines2: Sequence[str]) -> ComparisonResult:
        """
        Score every line position of two line sequences.

        Positions where both sides are blank are skipped and do not count
        towards ``total_lines``.

        Args:
            lines1: Lines of the first document
            lines2: Lines of the second document

        Returns:
            ComparisonResult with one LineComparison per scored position
        """
        line_comparisons: List[LineComparison] = []
        matching_lines = 0

        for i in range(max(len(lines1), len(lines2))):
            line1 = lines1[i] if i < len(lines1) else ""
            line2 = lines2[i] if i < len(lines2) else ""

            if not line1.strip() and not line2.strip():
                continue

            score = jaro_winkler_similarity(normalize_line(line1), normalize_line(line2))
            matched = score >= self.threshold
            if matched:
                matching_lines += 1

            line_comparisons.append(LineComparison(
                line_number=i + 1,
                first_line=line1,
                second_line=line2,
                similarity=score,
                matched=matched,
            ))

        total_lines = len(line_comparisons)
        similarity = matching_lines / total_lines if total_lines > 0 else 0.0

        self.logger.debug(f"Compared {total_lines} line positions: {matching_lines} matched ({similarity:.1%})")
        return ComparisonResult(
            line_comparisons=tuple(line_comparisons),
            matching_lines=matching_lines,
            total_lines=total_lines,
            similarity=similarity,
        )
