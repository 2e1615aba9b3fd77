"""Utility modules for logging and debugging."""

from .logger import (
    get_logger,
    log_extraction_summary,
    log_field_extraction,
    log_ocr_result,
    setup_logger,
)

__all__ = [
    'get_logger',
    'log_extraction_summary',
    'log_field_extraction',
    'log_ocr_result',
    'setup_logger',
]
