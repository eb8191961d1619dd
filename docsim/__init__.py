"""
Document Similarity Checker

Line-by-line comparison of two submitted documents, with OCR fallback
for scanned PDFs.
"""

__version__ = "1.0.0"
__author__ = "Document Similarity Team"

# Import main modules for easy access
from .core import *
from .utils import *
