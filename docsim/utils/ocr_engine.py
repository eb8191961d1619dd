"""
OCR backends for scanned pages.

Provides:
- A narrow ``recognize_text(image_path) -> str`` interface
- Google Cloud Vision text detection (remote service)
- Tesseract via pytesseract (local binary)
- Backend selection from configuration
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from PIL import Image

from ..core.config import (
    ComparisonConfig, VISION_KEY_ENV, VISION_LOCAL_FILE, VISION_SECRET_FILE,
)
from ..core.validation import OcrBackendUnavailableError, OcrRecognitionError

logger = logging.getLogger(__name__)


class OCRBackend:
    """Recognizes the text of one page image."""

    name = "base"

    def recognize_text(self, image_path: Union[str, Path]) -> str:
        """
        Return all text found in the image.

        An image without text yields an empty string.

        Raises:
            OcrRecognitionError: If recognition fails
        """
        raise NotImplementedError


# ============================================================================
# Google Cloud Vision
# ============================================================================

def load_vision_credentials(
    secret_file: Optional[Path] = None,
    local_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Locate service account credentials for Google Cloud Vision.

    Checked in order: the deployment secret file, a local key file, then
    the JSON content of the ``GOOGLE_CLOUD_KEY`` environment variable.

    Raises:
        OcrBackendUnavailableError: If no source exists or it is not valid JSON
    """
    secret_file = VISION_SECRET_FILE if secret_file is None else Path(secret_file)
    local_file = VISION_LOCAL_FILE if local_file is None else Path(local_file)
    environ = os.environ if environ is None else environ

    try:
        if secret_file.exists():
            logger.info(f"Using secret file {secret_file} for Google Cloud credentials")
            return json.loads(secret_file.read_text(encoding="utf-8"))
        if local_file.exists():
            logger.info(f"Using local key file {local_file} for Google Cloud credentials")
            return json.loads(local_file.read_text(encoding="utf-8"))
        if environ.get(VISION_KEY_ENV):
            logger.info(f"Using {VISION_KEY_ENV} environment variable for Google Cloud credentials")
            return json.loads(environ[VISION_KEY_ENV])
    except (OSError, ValueError) as e:
        raise OcrBackendUnavailableError(f"Google Cloud credentials are unreadable: {e}") from e

    raise OcrBackendUnavailableError(
        "Google Cloud key not found (neither secret file, local file, nor "
        f"{VISION_KEY_ENV} environment variable)"
    )


class GoogleVisionOCR(OCRBackend):
    """OCR using the Google Cloud Vision ``text_detection`` API."""

    name = "vision"

    def __init__(self, client=None, credentials: Optional[Dict[str, Any]] = None,
                 key_file: Path = VISION_LOCAL_FILE):
        """
        Args:
            client: Ready ``ImageAnnotatorClient`` (skips credential lookup)
            credentials: Service account info dict
            key_file: Local key file checked after the deployment secret

        Raises:
            OcrBackendUnavailableError: If the client cannot be created
        """
        if client is None:
            if credentials is None:
                credentials = load_vision_credentials(local_file=Path(key_file))
            try:
                from google.cloud import vision
                client = vision.ImageAnnotatorClient.from_service_account_info(credentials)
            except Exception as e:
                raise OcrBackendUnavailableError(f"Failed to initialize Google Vision client: {e}") from e
            logger.info("Google Vision client initialized")
        self.client = client

    def recognize_text(self, image_path: Union[str, Path]) -> str:
        from google.cloud import vision

        try:
            content = Path(image_path).read_bytes()
            response = self.client.text_detection(image=vision.Image(content=content))
        except Exception as e:
            raise OcrRecognitionError(f"Google Vision request failed: {e}") from e

        if response.error.message:
            raise OcrRecognitionError(f"Google Vision error: {response.error.message}")

        annotations = response.text_annotations
        # First annotation holds the full text block
        return annotations[0].description if annotations else ""


# ============================================================================
# Tesseract
# ============================================================================

class TesseractOCR(OCRBackend):
    """OCR using a local Tesseract install."""

    name = "tesseract"

    def __init__(self, language: str = "eng", config: str = "--oem 3 --psm 6"):
        try:
            import pytesseract
            pytesseract.get_tesseract_version()
        except Exception as e:
            raise OcrBackendUnavailableError(
                f"Tesseract not available: {e}. "
                "Install Tesseract: https://github.com/tesseract-ocr/tesseract"
            ) from e

        self.pytesseract = pytesseract
        self.language = language
        self.config = config

    def recognize_text(self, image_path: Union[str, Path]) -> str:
        try:
            with Image.open(image_path) as img:
                text = self.pytesseract.image_to_string(img, lang=self.language, config=self.config)
        except Exception as e:
            raise OcrRecognitionError(f"Tesseract failed on {Path(image_path).name}: {e}") from e
        return text.strip()


def create_ocr_backend(config: Optional[ComparisonConfig] = None) -> OCRBackend:
    """
    Build the OCR backend named by ``config.ocr_backend``.

    Raises:
        OcrBackendUnavailableError: If the backend cannot be initialized
        ValueError: If the backend name is unknown
    """
    config = config or ComparisonConfig()
    name = config.ocr_backend.lower()

    if name == "vision":
        return GoogleVisionOCR(key_file=config.vision_key_file)
    elif name == "tesseract":
        return TesseractOCR(language=config.tesseract_lang)
    else:
        raise ValueError(f"Unknown OCR backend: {config.ocr_backend}")
