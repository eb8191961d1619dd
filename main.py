import argparse
import json
import sys

from docsim.core.comparator import DocumentComparator
from docsim.core.config import OCR_BACKENDS, get_config
from docsim.core.logging_config import setup_logging
from docsim.core.validation import (
    ExtractionError, InsufficientTextError, ParameterValidator, ValidationError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare two PDF documents line by line (OCR fallback for scanned files)."
    )
    parser.add_argument("first", help="Path to the first PDF")
    parser.add_argument("second", help="Path to the second PDF")
    parser.add_argument("--threshold", type=float, help="Line match threshold in [0, 1] (default 0.90)")
    parser.add_argument("--ocr-backend", choices=sorted(OCR_BACKENDS), help="OCR service for scanned pages")
    parser.add_argument("--json", action="store_true", help="Print the full report as JSON")
    parser.add_argument("--show-unmatched", action="store_true", help="Only list lines that did not match")
    parser.add_argument("--log-dir", help="Also write rotating log files to this directory")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
        if args.threshold is not None:
            config.similarity_threshold = ParameterValidator.validate_probability(args.threshold, "threshold")
        if args.ocr_backend:
            config.ocr_backend = args.ocr_backend
    except ValidationError as e:
        print(f"Invalid configuration: {e.message}", file=sys.stderr)
        return 1

    setup_logging(
        log_level=config.log_level,
        log_dir=args.log_dir or "logs",
        structured_logging=bool(args.log_dir),
        enable_console=True,
        enable_file=bool(args.log_dir),
    )

    # Step 1: Extract both documents and compare them
    comparator = DocumentComparator(config=config)
    try:
        result = comparator.compare(args.first, args.second)
    except InsufficientTextError as e:
        print(f"{e.message}\n{e.details}", file=sys.stderr)
        return 2
    except (ValidationError, ExtractionError) as e:
        print(f"Comparison failed: {e}", file=sys.stderr)
        return 1

    # Step 2: Report
    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return 0

    print(f"Similarity: {result.similarity:.1%} ({result.matching_lines}/{result.total_lines} lines matched)")
    rows = result.unmatched if args.show_unmatched else result.line_comparisons
    for lc in rows:
        marker = "=" if lc.matched else "x"
        print(f"{lc.line_number:>5} {marker} {lc.similarity:.2f}  {lc.first_line!r} | {lc.second_line!r}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
