"""Pytest configuration and fixtures."""

import io
from typing import List, Optional, Tuple
from unittest.mock import MagicMock

import pytest
from google.cloud import vision
from PIL import Image

from legal_doc_extractor.ocr import OCRError, OCRResult


SAMPLE_ORDER_TEXT = (
    "IN THE HIGH COURT OF DELHI, AT NEW DELHI\n"
    "Crl. No. 1234/2023\n"
    "BEFORE HON'BLE JUSTICE RAJESH KUMAR\n"
    "IN THE MATTER OF RAM PRASAD (PETITIONER)\n"
    "PETITIONER RAM PRASAD VS RESPONDENT STATE OF DELHI.\n"
    "Bail application - Status: PENDING.\n"
    "Next date of hearing: 15/03/2024\n"
)


class FakeOCRClient:
    """OCR client returning canned text, recording every call."""

    def __init__(self, text: str = SAMPLE_ORDER_TEXT, confidence: float = 0.9, error: Optional[str] = None):
        self.text = text
        self.confidence = confidence
        self.error = error
        self.calls = []

    def extract_text(
        self,
        image_path=None,
        image_bytes=None,
        language='en',
        save_raw_output=False,
        output_dir=None
    ) -> OCRResult:
        self.calls.append({
            'image_path': image_path,
            'image_bytes': image_bytes,
            'language': language,
            'save_raw_output': save_raw_output,
            'output_dir': output_dir,
        })
        if self.error:
            raise OCRError(self.error)
        return OCRResult(
            text=self.text,
            confidence=self.confidence,
            language=language,
            word_count=len(self.text.split())
        )


def image_bytes(image_format: str = 'PNG', size: Tuple[int, int] = (40, 20)) -> bytes:
    """Encode a small blank image in the given format."""
    buffer = io.BytesIO()
    Image.new('RGB', size, color='white').save(buffer, format=image_format)
    return buffer.getvalue()


def vision_response(words: List[Tuple[str, float]], text: Optional[str] = None) -> vision.AnnotateImageResponse:
    """Build a Vision response with one block holding the given words."""
    paragraph = vision.Paragraph(words=[
        vision.Word(symbols=[vision.Symbol(text=char) for char in word], confidence=confidence)
        for word, confidence in words
    ])
    return vision.AnnotateImageResponse(
        full_text_annotation=vision.TextAnnotation(
            text=text if text is not None else ' '.join(word for word, _ in words),
            pages=[vision.Page(blocks=[vision.Block(paragraphs=[paragraph])])]
        )
    )


@pytest.fixture
def sample_text():
    """OCR text of a bail order with every primary field present."""
    return SAMPLE_ORDER_TEXT


@pytest.fixture
def fake_ocr_client():
    """OCR client returning the sample order text."""
    return FakeOCRClient()


@pytest.fixture
def failing_ocr_client():
    """OCR client whose recognition always fails."""
    return FakeOCRClient(error="API Error: quota exceeded")


@pytest.fixture
def mock_vision_client():
    """Mocked ImageAnnotatorClient answering with two recognized words."""
    client = MagicMock()
    client.document_text_detection.return_value = vision_response(
        [("Case", 0.9), ("No.", 0.7)],
        text="Case No. 45/2024"
    )
    return client


@pytest.fixture
def png_path(tmp_path):
    """Path to a small PNG document."""
    path = tmp_path / "order.png"
    path.write_bytes(image_bytes('PNG'))
    return path


@pytest.fixture
def tiff_bytes():
    """A small TIFF image."""
    return image_bytes('TIFF')
