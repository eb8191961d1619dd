"""
Configuration for the document similarity pipeline.

Settings come from dataclass defaults, overridden by ``DOCSIM_*``
environment variables (a ``.env`` file in the working directory is loaded
first).
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .validation import ParameterValidator

load_dotenv()


OCR_BACKENDS = {"vision", "tesseract"}

# Google Vision credential locations, checked in order
VISION_SECRET_FILE = Path("/etc/secrets/google-cloud-key.json")
VISION_LOCAL_FILE = Path("config") / "google-cloud-key.json"
VISION_KEY_ENV = "GOOGLE_CLOUD_KEY"


@dataclass
class ComparisonConfig:
    """Extraction and comparison settings."""
    similarity_threshold: float = 0.90
    # Direct text must be strictly longer than this to skip OCR
    min_direct_chars: int = 30
    # Cleaned text shorter than this cannot be compared
    min_comparable_chars: int = 10
    ocr_backend: str = "vision"
    tesseract_lang: str = "eng"
    render_density: int = 200
    render_width: int = 1200
    render_height: int = 1600
    render_format: str = "png"
    temp_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()) / "docsim_pages")
    timeout_seconds: int = 300
    log_level: str = "INFO"
    vision_key_file: Path = VISION_LOCAL_FILE


def get_config() -> ComparisonConfig:
    """Get the default configuration with environment overrides."""
    config = ComparisonConfig()
    env = os.environ

    if "DOCSIM_SIMILARITY_THRESHOLD" in env:
        config.similarity_threshold = ParameterValidator.validate_probability(
            env["DOCSIM_SIMILARITY_THRESHOLD"], "DOCSIM_SIMILARITY_THRESHOLD")
    if "DOCSIM_MIN_DIRECT_CHARS" in env:
        config.min_direct_chars = ParameterValidator.validate_positive_integer(
            env["DOCSIM_MIN_DIRECT_CHARS"], "DOCSIM_MIN_DIRECT_CHARS", min_value=0)
    if "DOCSIM_MIN_COMPARABLE_CHARS" in env:
        config.min_comparable_chars = ParameterValidator.validate_positive_integer(
            env["DOCSIM_MIN_COMPARABLE_CHARS"], "DOCSIM_MIN_COMPARABLE_CHARS", min_value=0)
    if "DOCSIM_OCR_BACKEND" in env:
        config.ocr_backend = ParameterValidator.validate_choice(
            env["DOCSIM_OCR_BACKEND"], "DOCSIM_OCR_BACKEND", OCR_BACKENDS)
    if "DOCSIM_TESSERACT_LANG" in env:
        config.tesseract_lang = env["DOCSIM_TESSERACT_LANG"]
    if "DOCSIM_RENDER_DENSITY" in env:
        config.render_density = ParameterValidator.validate_positive_integer(
            env["DOCSIM_RENDER_DENSITY"], "DOCSIM_RENDER_DENSITY", min_value=36, max_value=1200)
    if "DOCSIM_RENDER_WIDTH" in env:
        config.render_width = ParameterValidator.validate_positive_integer(
            env["DOCSIM_RENDER_WIDTH"], "DOCSIM_RENDER_WIDTH")
    if "DOCSIM_RENDER_HEIGHT" in env:
        config.render_height = ParameterValidator.validate_positive_integer(
            env["DOCSIM_RENDER_HEIGHT"], "DOCSIM_RENDER_HEIGHT")
    if env.get("DOCSIM_TEMP_DIR"):
        config.temp_dir = Path(env["DOCSIM_TEMP_DIR"])
    if "DOCSIM_TIMEOUT_SECONDS" in env:
        config.timeout_seconds = ParameterValidator.validate_positive_integer(
            env["DOCSIM_TIMEOUT_SECONDS"], "DOCSIM_TIMEOUT_SECONDS")
    if env.get("DOCSIM_LOG_LEVEL"):
        config.log_level = env["DOCSIM_LOG_LEVEL"].upper()
    if env.get("DOCSIM_GOOGLE_KEY_FILE"):
        config.vision_key_file = Path(env["DOCSIM_GOOGLE_KEY_FILE"])

    return config
