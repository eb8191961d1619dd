"""
Input validation and exception taxonomy for the document similarity pipeline.

Extraction and comparison errors are defined here next to the validators
for document handles, settings and extracted text.
"""

import inspect
from functools import wraps
from pathlib import Path
from typing import Any, Optional, Union


# Custom Exception Classes
class ValidationError(Exception):
    """Base class for validation errors."""

    def __init__(self, message: str, field: str = None, value: Any = None):
        self.message = message
        self.field = field
        self.value = value
        super().__init__(self.message)


class FileValidationError(ValidationError):
    """Exception raised for file-related validation errors."""
    pass


class ParameterValidationError(ValidationError):
    """Exception raised for parameter validation errors."""
    pass


class ContentValidationError(ValidationError):
    """Exception raised when extracted content cannot be used."""
    pass


class InsufficientTextError(ContentValidationError):
    """
    Raised when a document yields too little text to compare.

    This is a user-correctable input problem, not a system fault.
    """

    DEFAULT_DETAILS = "Try using clearer, text-based PDFs instead of poor quality scans."

    def __init__(self, message: str, field: str = None, value: Any = None,
                 details: str = DEFAULT_DETAILS):
        super().__init__(message, field=field, value=value)
        self.details = details


class ExtractionError(Exception):
    """Base class for text extraction failures."""
    pass


class PageRasterizationError(ExtractionError):
    """A single page could not be rendered to an image."""

    def __init__(self, message: str, page_number: Optional[int] = None):
        self.page_number = page_number
        super().__init__(message)


class OcrRecognitionError(ExtractionError):
    """The OCR backend failed on a single page image."""
    pass


class OcrBackendUnavailableError(ExtractionError):
    """The OCR backend cannot be initialized (missing binary or credentials)."""
    pass


class ExtractionCancelledError(ExtractionError):
    """Extraction was cancelled between pages."""
    pass


class ComparisonTimeoutError(ExtractionError):
    """Extraction of one or both documents did not finish in time."""
    pass


# Validation Utilities
class FileValidator:
    """Checks on document handles before any extraction starts."""

    @staticmethod
    def validate_document(file_path: Union[str, Path]) -> Path:
        """
        Check that a document handle names an existing file.

        The name is opaque: uploaded documents are often stored without an
        extension, so only the PDF parser decides whether the content is usable.

        Raises:
            FileValidationError: If the handle is empty, missing or not a file
        """
        if not file_path:
            raise FileValidationError("File path cannot be empty", field="file_path", value=file_path)

        path = Path(file_path)
        if not path.exists():
            raise FileValidationError(f"File does not exist: {file_path}", field="file_path", value=file_path)
        if not path.is_file():
            raise FileValidationError(f"Path is not a file: {file_path}", field="file_path", value=file_path)
        return path


def _check_range(value, field: str, min_value, max_value):
    if value < min_value:
        raise ParameterValidationError(f"{field} must be >= {min_value}, got {value}", field=field, value=value)
    if max_value is not None and value > max_value:
        raise ParameterValidationError(f"{field} must be <= {max_value}, got {value}", field=field, value=value)
    return value


class ParameterValidator:
    """Parameter validation utilities."""

    @staticmethod
    def validate_positive_integer(value: Any, field: str, min_value: int = 1, max_value: Optional[int] = None) -> int:
        """Validate an integer setting, accepting numeric strings from the environment."""
        if isinstance(value, bool) or not isinstance(value, int):
            try:
                value = int(value)
            except (ValueError, TypeError):
                raise ParameterValidationError(
                    f"{field} must be an integer, got {type(value).__name__}",
                    field=field,
                    value=value
                )
        return _check_range(value, field, min_value, max_value)

    @staticmethod
    def validate_probability(value: Any, field: str) -> float:
        """Validate a score or threshold in [0, 1]."""
        try:
            value = float(value)
        except (ValueError, TypeError):
            raise ParameterValidationError(
                f"{field} must be a number, got {type(value).__name__}",
                field=field,
                value=value
            )
        return _check_range(value, field, 0.0, 1.0)

    @staticmethod
    def validate_choice(value: Any, field: str, choices: set) -> str:
        """Validate that a string parameter is one of the allowed choices."""
        if not isinstance(value, str) or value.lower() not in choices:
            raise ParameterValidationError(
                f"{field} must be one of {sorted(choices)}, got {value!r}",
                field=field,
                value=value
            )
        return value.lower()


class ContentValidator:
    """Validation of extracted document text."""

    @staticmethod
    def validate_extracted_text(text: str, field: str, min_chars: int = 10) -> str:
        """
        Ensure cleaned text is long enough to be compared.

        Raises:
            InsufficientTextError: If the text is shorter than ``min_chars``
        """
        if len(text or "") < min_chars:
            raise InsufficientTextError(
                f"No readable text extracted from {field} ({len(text or '')} chars, need {min_chars})",
                field=field,
                value=len(text or "")
            )
        return text


# Decorators for validation
def validate_inputs(**validators):
    """
    Decorator to validate function inputs.

    Args:
        **validators: Dict mapping parameter names to validation functions
    """
    def decorator(func):
        sig = inspect.signature(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            bound_args = sig.bind(*args, **kwargs)
            bound_args.apply_defaults()

            for param_name, validator in validators.items():
                if param_name in bound_args.arguments:
                    value = bound_args.arguments[param_name]
                    try:
                        bound_args.arguments[param_name] = validator(value)
                    except ValidationError:
                        raise
                    except Exception as e:
                        raise ParameterValidationError(
                            f"Validation failed for {param_name}: {str(e)}",
                            field=param_name,
                            value=value
                        )

            return func(*bound_args.args, **bound_args.kwargs)
        return wrapper
    return decorator
