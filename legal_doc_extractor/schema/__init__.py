"""Schema for structured court-document records."""

from .models import CONFIDENCE_FIELDS, ExtractedRecord, Language, empty_record, to_language_code

__all__ = ['CONFIDENCE_FIELDS', 'ExtractedRecord', 'Language', 'empty_record', 'to_language_code']
