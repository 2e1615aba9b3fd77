"""Deterministic field extraction from the OCR text of court documents."""

import math
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple

from dateutil import parser as date_parser

from legal_doc_extractor.schema import CONFIDENCE_FIELDS, ExtractedRecord, to_language_code


def _compile(patterns: List[str]) -> List[Pattern]:
    return [re.compile(pattern, re.IGNORECASE) for pattern in patterns]


# Patterns are tried in order; the first one that matches wins.
CASE_NUMBER_PATTERNS = _compile([
    r"Case\s*No\.?\s*[A-Z0-9/-]+",
    r"Crl\.?\s*No\.?\s*[A-Z0-9/-]+",
    r"C\.?\s*No\.?\s*[A-Z0-9/-]+",
    r"W\.?\s*P\.?\s*No\.?\s*[A-Z0-9/-]+",
    r"S\.?\s*A\.?\s*No\.?\s*[A-Z0-9/-]+",
])

JUDGE_NAME_PATTERNS = _compile([
    r"BEFORE\s+HON['’]?BLE\s+([A-Z .]+)",
    r"HON['’]?BLE\s+([A-Z .]+)",
    r"JUDGE\s*:?\s*([A-Z .]+)",
])

# Case-sensitive: names must be written in capitals
VALID_JUDGE_NAME = re.compile(r"[A-Z .]+")

NUMERIC_DATE_PATTERN = re.compile(r"(\d{1,2})[-/](\d{1,2})[-/](\d{4})")

NAMED_MONTH_DATE_PATTERNS = _compile([
    r"(\d{1,2})\s+(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+(\d{4})",
    r"(\d{1,2})\s+(January|February|March|April|May|June|July|August|September"
    r"|October|November|December)\s+(\d{4})",
])

CASE_TITLE_PATTERN = re.compile(
    r"(?:IN\s+THE\s+MATTER\s+OF|BETWEEN|IN\s+RE|PETITIONER\s*:|APPLICANT\s*:)\s+([A-Z\s.,&]+)",
    re.IGNORECASE
)

COURT_NAME_PATTERN = re.compile(
    r"(?:HIGH\s*COURT|DISTRICT\s*COURT|SUPREME\s*COURT|SESSIONS\s*COURT"
    r"|FAMILY\s*COURT|CONSUMER\s*COURT)[\s\w]*",
    re.IGNORECASE
)

CASE_TYPE_PATTERN = re.compile(
    r"(?:CRIMINAL|CIVIL|WRIT|BAIL|APPEAL|REVISION|REVIEW)[\s\w]*",
    re.IGNORECASE
)

CASE_STATUS_PATTERN = re.compile(
    r"(?:PENDING|DISPOSED|ADJOURNED|DISMISSED|ALLOWED|REJECTED)[\s\w]*",
    re.IGNORECASE
)

# The side before the separator is built from whitespace-led words, at most
# 30 of them, so a failed search stays linear in the text length.
PARTIES_PATTERNS = _compile([
    r"((?:PETITIONER|APPLICANT|COMPLAINANT)\w*(?:\s+\w+){0,30})\s+(?:VS\.?|V\.S\.|AGAINST)\s+"
    r"((?:RESPONDENT|OPPOSITE\s+PARTY|ACCUSED)[\s\w]*)",
    r"BETWEEN\s+([A-Z.,&]+(?:\s+[A-Z.,&]+){0,30}?)\s+AND\s+([A-Z\s.,&]+)",
])

# Fallback for fields dateutil would otherwise take from today's date
_DATE_DEFAULT = datetime(2000, 1, 1)


def _clean(value: Optional[str]) -> Optional[str]:
    """Trim a matched value; blank matches count as no match."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def extract_case_number(text: str) -> Optional[str]:
    """Return the first case-number span (label and value), or None."""
    for pattern in CASE_NUMBER_PATTERNS:
        match = pattern.search(text)
        if match:
            return _clean(match.group(0))
    return None


def extract_judge_name(text: str) -> Optional[str]:
    """
    Return the presiding judge's name with the HON'BLE label stripped.

    Each label variant is searched once. A candidate must have at least two
    words and consist only of capital letters, spaces and periods; otherwise
    the next label variant is tried.
    """
    for pattern in JUDGE_NAME_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        name = match.group(1).strip()
        if len(name) > 2 and len(name.split(' ')) >= 2 and VALID_JUDGE_NAME.fullmatch(name):
            return name
    return None


def _numeric_date(match: re.Match) -> Optional[datetime]:
    day, month, year = (int(group) for group in match.groups())
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None


def _named_month_date(match: re.Match) -> Optional[datetime]:
    try:
        parsed = date_parser.parse(match.group(0), default=_DATE_DEFAULT)
    except (ValueError, OverflowError):
        return None
    return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)


def extract_date(text: str) -> Optional[datetime]:
    """
    Return the first valid date in the text as midnight UTC.

    Numeric DD/MM/YYYY (or DD-MM-YYYY) dates are built explicitly as
    day/month/year. Dates with a month name are read by dateutil. An invalid
    date falls through to the next pattern.
    """
    match = NUMERIC_DATE_PATTERN.search(text)
    if match:
        date = _numeric_date(match)
        if date is not None:
            return date

    for pattern in NAMED_MONTH_DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            date = _named_month_date(match)
            if date is not None:
                return date
    return None


def extract_case_title(text: str) -> Optional[str]:
    """Return the caption following IN THE MATTER OF / BETWEEN / IN RE."""
    match = CASE_TITLE_PATTERN.search(text)
    return _clean(match.group(1)) if match else None


def extract_court_name(text: str) -> Optional[str]:
    match = COURT_NAME_PATTERN.search(text)
    return _clean(match.group(0)) if match else None


def extract_case_type(text: str) -> Optional[str]:
    match = CASE_TYPE_PATTERN.search(text)
    return _clean(match.group(0)) if match else None


def extract_case_status(text: str) -> Optional[str]:
    match = CASE_STATUS_PATTERN.search(text)
    return _clean(match.group(0)) if match else None


def extract_parties(text: str) -> Optional[Tuple[str, str]]:
    """
    Return (petitioner side, respondent side).

    Tries "PETITIONER ... VS ... RESPONDENT" first, split on the separator
    the match used, then "BETWEEN <A> AND <B>". The first side is limited
    to about thirty words.
    """
    for pattern in PARTIES_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        first, second = _clean(match.group(1)), _clean(match.group(2))
        if first and second:
            return first, second
    return None


def _clamp_confidence(value: float) -> float:
    if value is None or math.isnan(value):
        return 0.0
    return min(max(float(value), 0.0), 1.0)


def calculate_extraction_rate(fields: Dict[str, Any]) -> float:
    """Fraction of the seven primary fields that hold a value."""
    extracted = sum(1 for name in CONFIDENCE_FIELDS if fields.get(name) is not None)
    return extracted / len(CONFIDENCE_FIELDS)


def calculate_confidence(fields: Dict[str, Any], ocr_confidence: float) -> float:
    """
    Combine OCR confidence with the extraction rate.

    Args:
        fields: Extracted field values keyed by record field name
        ocr_confidence: OCR engine confidence, already normalized to [0, 1]

    Returns:
        (ocr_confidence + extraction_rate) / 2
    """
    return (_clamp_confidence(ocr_confidence) + calculate_extraction_rate(fields)) / 2


class FieldExtractor:
    """Stateless extractor mapping OCR text to an ExtractedRecord."""

    FIELD_EXTRACTORS: Dict[str, Callable[[str], Any]] = {
        'case_number': extract_case_number,
        'case_title': extract_case_title,
        'judge_name': extract_judge_name,
        'next_hearing_date': extract_date,
        'case_status': extract_case_status,
        'court_name': extract_court_name,
        'case_type': extract_case_type,
        'parties': extract_parties,
    }

    def extract_fields(self, text: str) -> Dict[str, Any]:
        """
        Run every field extractor over the text.

        Args:
            text: Raw OCR text

        Returns:
            Dictionary of field name to extracted value (None when unmatched)
        """
        if not text:
            return {field_name: None for field_name in self.FIELD_EXTRACTORS}

        return {
            field_name: extractor(text)
            for field_name, extractor in self.FIELD_EXTRACTORS.items()
        }

    def extract(self, text: str, ocr_confidence: float, language: str = 'en') -> ExtractedRecord:
        """
        Extract all fields and score the result.

        Args:
            text: Raw OCR text, kept verbatim as raw_text
            ocr_confidence: OCR engine confidence in [0, 1]
            language: OCR language profile ('en'/'hi', or 'eng'/'hin')

        Returns:
            ExtractedRecord with extracted values and overall confidence
        """
        text = text or ''
        fields = self.extract_fields(text)

        return ExtractedRecord(
            **fields,
            confidence=calculate_confidence(fields, ocr_confidence),
            raw_text=text,
            language=to_language_code(language),
        )


def extract(text: str, ocr_confidence: float, language: str = 'en') -> ExtractedRecord:
    """Extract a record from OCR text; see FieldExtractor.extract."""
    return FieldExtractor().extract(text, ocr_confidence, language)
