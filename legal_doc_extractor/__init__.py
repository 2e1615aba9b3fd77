"""Structured field extraction from OCR text of scanned court documents."""

from .extractors import FieldExtractor, extract
from .schema import ExtractedRecord

__version__ = "0.1.0"

__all__ = ['ExtractedRecord', 'FieldExtractor', 'extract']
