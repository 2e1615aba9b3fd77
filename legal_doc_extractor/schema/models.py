"""Canonical record for fields extracted from scanned court documents."""

from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


Language = Literal['en', 'hi']

# Fields counted towards the extraction rate, in reporting order
CONFIDENCE_FIELDS = (
    'case_number',
    'case_title',
    'judge_name',
    'next_hearing_date',
    'case_status',
    'court_name',
    'case_type',
)


class ExtractedRecord(BaseModel):
    """
    Structured fields extracted from the OCR text of one court document.

    Optional fields are None when nothing matched, otherwise a non-empty
    trimmed string (or a UTC date for next_hearing_date). The record is
    immutable once built; raw_text is kept verbatim for audit.
    """

    # Case identification
    case_number: Optional[str] = Field(
        default=None,
        description="Court-assigned case identifier, e.g. 'Case No. ABC123/2024'"
    )

    case_title: Optional[str] = Field(
        default=None,
        description="Case caption following markers like 'IN THE MATTER OF'"
    )

    case_type: Optional[str] = Field(
        default=None,
        description="CRIMINAL, CIVIL, WRIT, BAIL, APPEAL, REVISION or REVIEW plus trailing words"
    )

    case_status: Optional[str] = Field(
        default=None,
        description="PENDING, DISPOSED, ADJOURNED, DISMISSED, ALLOWED or REJECTED plus trailing words"
    )

    # Court and bench
    court_name: Optional[str] = Field(
        default=None,
        description="Court-type phrase such as 'HIGH COURT' plus trailing words"
    )

    judge_name: Optional[str] = Field(
        default=None,
        description="Presiding judge with title retained, e.g. 'JUSTICE JOHN DOE'"
    )

    next_hearing_date: Optional[datetime] = Field(
        default=None,
        description="Next hearing date at UTC midnight"
    )

    parties: Optional[Tuple[str, str]] = Field(
        default=None,
        description="(petitioner/applicant side, respondent/accused side)"
    )

    # Derived metadata
    confidence: float = Field(
        default=0.0,
        description="Blend of OCR confidence and extraction rate",
        ge=0,
        le=1
    )

    raw_text: str = Field(
        default='',
        description="Full OCR output, stored verbatim"
    )

    language: Language = Field(
        default='en',
        description="OCR language profile used for the document"
    )

    @field_validator(
        'case_number', 'case_title', 'case_type', 'case_status', 'court_name', 'judge_name',
        mode='before'
    )
    @classmethod
    def normalize_text(cls, v) -> Optional[str]:
        """Trim text fields and turn blank values into None."""
        if v is None:
            return None

        v = str(v).strip()
        return v or None

    @field_validator('next_hearing_date')
    @classmethod
    def normalize_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Pin hearing dates to midnight UTC."""
        if v is None:
            return None

        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        else:
            v = v.astimezone(timezone.utc)
        return v.replace(hour=0, minute=0, second=0, microsecond=0)

    @field_validator('parties', mode='before')
    @classmethod
    def normalize_parties(cls, v) -> Optional[Tuple[str, str]]:
        """Keep parties only when both sides are present."""
        if v is None or isinstance(v, str):
            return None

        sides = [str(side).strip() for side in v]
        if len(sides) != 2 or not all(sides):
            return None
        return sides[0], sides[1]

    @property
    def extracted_fields(self) -> Tuple[str, ...]:
        """Names of the confidence-counted fields that hold a value."""
        return tuple(
            field_name for field_name in CONFIDENCE_FIELDS
            if getattr(self, field_name) is not None
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to a camelCase dictionary with Python values."""
        return self.model_dump(by_alias=True)

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert record to a JSON-serializable camelCase dictionary."""
        return self.model_dump(mode='json', by_alias=True)

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


def to_language_code(language: Optional[str]) -> Language:
    """
    Map an OCR language profile to the record language tag.

    Accepts both Tesseract-style ('eng', 'hin') and ISO 639-1 ('en', 'hi')
    codes. Anything that is not Hindi falls back to English.
    """
    if language and language.strip().lower() in ('hi', 'hin', 'hindi'):
        return 'hi'
    return 'en'


def empty_record(language: Language = 'en') -> ExtractedRecord:
    """Record used in place of a document that could not be processed."""
    return ExtractedRecord(raw_text='', confidence=0.0, language=language)
