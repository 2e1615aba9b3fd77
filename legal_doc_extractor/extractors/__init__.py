"""Field extraction logic for court-document OCR text."""

from .field_extractor import (
    FieldExtractor,
    calculate_confidence,
    calculate_extraction_rate,
    extract,
    extract_case_number,
    extract_case_status,
    extract_case_title,
    extract_case_type,
    extract_court_name,
    extract_date,
    extract_judge_name,
    extract_parties,
)
from .postprocessing import categorize_document, generate_summary

__all__ = [
    'FieldExtractor',
    'calculate_confidence',
    'calculate_extraction_rate',
    'categorize_document',
    'extract',
    'extract_case_number',
    'extract_case_status',
    'extract_case_title',
    'extract_case_type',
    'extract_court_name',
    'extract_date',
    'extract_judge_name',
    'extract_parties',
    'generate_summary',
]
