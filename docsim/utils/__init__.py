"""
Collaborators used by the OCR fallback path.

This package contains:
- Page rasterization to temporary images (page_rasterizer)
- OCR backends (ocr_engine)
"""

from .page_rasterizer import PageRasterizer, RenderOptions
from .ocr_engine import OCRBackend, GoogleVisionOCR, TesseractOCR, create_ocr_backend

__all__ = [
    'PageRasterizer',
    'RenderOptions',
    'OCRBackend',
    'GoogleVisionOCR',
    'TesseractOCR',
    'create_ocr_backend'
]
