"""Pipeline module for orchestrating OCR and field extraction."""

from .extraction_pipeline import (
    DocumentPipeline,
    ExtractionResult,
    validate_file_size,
    validate_file_type,
)

__all__ = ['DocumentPipeline', 'ExtractionResult', 'validate_file_size', 'validate_file_type']
