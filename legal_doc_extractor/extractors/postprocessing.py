"""Document categorization and summaries built on top of extracted records."""

import re
from typing import Optional

from legal_doc_extractor.schema import ExtractedRecord


# Checked in order against the lower-cased case type
CATEGORY_KEYWORDS = (
    ('criminal', 'criminal'),
    ('civil', 'civil'),
    ('family', 'family'),
    ('writ', 'constitutional'),
    ('bail', 'criminal'),
)

MIN_SENTENCE_LENGTH = 10


def categorize_document(record: Optional[ExtractedRecord]) -> str:
    """
    Map a record's case type to a document category.

    Args:
        record: Extracted record (may be None for failed documents)

    Returns:
        One of 'criminal', 'civil', 'family', 'constitutional' or 'other'
    """
    if record is None or not record.case_type:
        return 'other'

    case_type = record.case_type.lower()
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in case_type:
            return category

    return 'other'


def generate_summary(text: str, max_length: int = 200) -> str:
    """
    Build a short summary from the leading sentences of the text.

    Sentences shorter than MIN_SENTENCE_LENGTH characters are skipped as OCR
    noise. When no sentence fits, the text is truncated instead.

    Args:
        text: Raw document text
        max_length: Maximum summary length in characters

    Returns:
        Summary string (empty for empty text)
    """
    if not text or not isinstance(text, str):
        return ''

    sentences = [
        sentence.strip() for sentence in re.split(r'[.!?]+', text)
        if len(sentence.strip()) > MIN_SENTENCE_LENGTH
    ]

    summary = ''
    for sentence in sentences:
        if len(summary) + len(sentence) > max_length:
            break
        summary += sentence + '. '

    return summary.strip() or text[:max_length] + '...'
