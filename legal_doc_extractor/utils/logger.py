"""Logging utilities for the document-processing pipeline."""

import os
import logging
from typing import Any, Optional

from legal_doc_extractor.schema import CONFIDENCE_FIELDS

# Global debug mode flag
DEBUG_MODE = os.getenv("EXTRACTION_DEBUG", "false").lower() == "true"

# Logger instance
_logger: Optional[logging.Logger] = None

RAW_TEXT_PREVIEW_CHARS = 2000


def setup_logger(level: int = logging.INFO, debug_mode: bool = None) -> logging.Logger:
    """
    Set up logger for the extraction pipeline.

    Args:
        level: Logging level (default: INFO)
        debug_mode: Override debug mode (default: from env var)

    Returns:
        Configured logger instance
    """
    global _logger, DEBUG_MODE

    if debug_mode is not None:
        DEBUG_MODE = debug_mode

    if _logger is None:
        _logger = logging.getLogger("extraction_pipeline")

        handler = logging.StreamHandler()

        if DEBUG_MODE:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        else:
            formatter = logging.Formatter(
                '%(levelname)s - %(message)s'
            )

        handler.setFormatter(formatter)
        _logger.addHandler(handler)

        # Prevent duplicate logs
        _logger.propagate = False

    effective_level = logging.DEBUG if DEBUG_MODE else level
    _logger.setLevel(effective_level)
    for handler in _logger.handlers:
        handler.setLevel(effective_level)

    return _logger


def get_logger() -> logging.Logger:
    """Get the global logger instance."""
    if _logger is None:
        return setup_logger()
    return _logger


def log_ocr_result(logger: logging.Logger, ocr_result: Any, debug: bool = False):
    """
    Log OCR recognition results.

    Args:
        logger: Logger instance
        ocr_result: OCRResult object
        debug: If True, log the raw text in debug mode
    """
    logger.info("=" * 60)
    logger.info("OCR RECOGNITION COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Language: {ocr_result.language}")
    logger.info(f"Text length: {len(ocr_result.text)} characters")
    logger.info(f"Words recognized: {ocr_result.word_count}")
    logger.info(f"OCR confidence: {ocr_result.confidence:.3f}")

    if not ocr_result.success:
        logger.warning(f"OCR failed: {ocr_result.error}")

    if debug and DEBUG_MODE:
        logger.debug("=" * 60)
        logger.debug("RAW OCR TEXT:")
        logger.debug("=" * 60)
        logger.debug(ocr_result.text[:RAW_TEXT_PREVIEW_CHARS])
        if len(ocr_result.text) > RAW_TEXT_PREVIEW_CHARS:
            logger.debug(f"... (truncated, total length: {len(ocr_result.text)})")


def log_field_extraction(logger: logging.Logger, field_name: str, value: Any):
    """
    Log a single field extraction result.

    Args:
        logger: Logger instance
        field_name: Name of the field
        value: Extracted value
    """
    if value is not None:
        logger.info(f"  ✓ {field_name:20s}: {value}")
    else:
        logger.info(f"  ✗ {field_name:20s}: None")


def log_extraction_summary(logger: logging.Logger, record: Any):
    """
    Log every field of an extracted record and its confidence.

    Args:
        logger: Logger instance
        record: ExtractedRecord object
    """
    logger.info("=" * 60)
    logger.info("FIELD EXTRACTION")
    logger.info("=" * 60)

    for field_name in CONFIDENCE_FIELDS + ('parties',):
        log_field_extraction(logger, field_name, getattr(record, field_name))

    logger.info(f"Fields extracted: {len(record.extracted_fields)}/{len(CONFIDENCE_FIELDS)}")
    logger.info(f"Overall confidence: {record.confidence:.3f}")
