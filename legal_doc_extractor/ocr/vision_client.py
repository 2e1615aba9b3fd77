"""Google Cloud Vision API client for OCR of scanned court documents."""

import io
import json
import math
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import GoogleAPIError
from google.cloud import vision
from google.cloud.vision_v1 import types
from PIL import Image, UnidentifiedImageError

from legal_doc_extractor.schema import Language, to_language_code
from legal_doc_extractor.utils import get_logger, log_ocr_result


SUPPORTED_IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.tif', '.tiff')

# Formats Vision accepts inline; anything else is re-encoded as PNG
VISION_NATIVE_FORMATS = ('PNG', 'JPEG', 'GIF', 'BMP', 'WEBP', 'ICO')


class OCRError(Exception):
    """Raised when the Vision API fails to recognize a document."""


def normalize_confidence(value: Optional[float]) -> float:
    """
    Normalize an OCR confidence score to [0, 1].

    Engines that report percentages (0-100) are scaled down; missing or
    NaN scores count as zero.
    """
    if value is None:
        return 0.0

    value = float(value)
    if math.isnan(value):
        return 0.0
    if value > 1.0:
        value = value / 100.0
    return min(max(value, 0.0), 1.0)


class OCRResult:
    """Container for OCR recognition results."""

    def __init__(
        self,
        text: str,
        confidence: float,
        language: Language = 'en',
        word_count: int = 0,
        raw_response: Optional[Dict[str, Any]] = None,
        success: bool = True,
        error: Optional[str] = None
    ):
        """
        Initialize OCR result.

        Args:
            text: Complete recognized text
            confidence: Normalized recognition confidence in [0, 1]
            language: Language profile used for recognition
            word_count: Number of recognized words
            raw_response: Raw API response for debugging
            success: False when recognition failed
            error: Failure description when success is False
        """
        self.text = text
        self.confidence = normalize_confidence(confidence)
        self.language = language
        self.word_count = word_count
        self.raw_response = raw_response or {}
        self.success = success
        self.error = error

    @classmethod
    def failed(cls, error: str, language: Language = 'en') -> 'OCRResult':
        """Build the result reported for a document that could not be read."""
        return cls(text='', confidence=0.0, language=language, success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert OCR result to dictionary."""
        return {
            'text': self.text,
            'confidence': self.confidence,
            'language': self.language,
            'word_count': self.word_count,
            'success': self.success,
            'error': self.error,
        }

    def __repr__(self) -> str:
        return (f"OCRResult(text_length={len(self.text)}, words={self.word_count}, "
                f"confidence={self.confidence:.3f}, success={self.success})")


class VisionOCRClient:
    """
    Client for Google Cloud Vision DOCUMENT_TEXT_DETECTION.

    The client owns a gRPC transport and should be closed after use,
    preferably by using it as a context manager:

        with VisionOCRClient() as ocr:
            result = ocr.extract_text("order.png", language="hi")
    """

    def __init__(self, credentials_path: Optional[str] = None, client: Any = None):
        """
        Initialize Vision OCR client.

        Args:
            credentials_path: Path to Google Cloud service account JSON file.
                            If None, uses GOOGLE_APPLICATION_CREDENTIALS env var.
            client: Pre-built ImageAnnotatorClient (or compatible object) to use
                    instead of creating one.
        """
        if client is None:
            if credentials_path:
                os.environ['GOOGLE_APPLICATION_CREDENTIALS'] = credentials_path
            client = vision.ImageAnnotatorClient()

        self.client = client
        self._closed = False

    def __enter__(self) -> 'VisionOCRClient':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying API transport."""
        if self._closed:
            return
        self._closed = True
        self.client.transport.close()

    def extract_text(
        self,
        image_path: Optional[str] = None,
        image_bytes: Optional[bytes] = None,
        language: str = 'en',
        save_raw_output: bool = False,
        output_dir: Optional[str] = None
    ) -> OCRResult:
        """
        Recognize text in a document image.

        Args:
            image_path: Path to image file (PNG, JPG or TIFF)
            image_bytes: Image content, used instead of image_path
            language: Language profile hint ('en'/'hi', or 'eng'/'hin')
            save_raw_output: Whether to save the raw API response to a file
            output_dir: Directory to save raw output (defaults to 'output')

        Returns:
            OCRResult with recognized text and normalized confidence

        Raises:
            ValueError: If the image format is unsupported or unreadable
            OCRError: If the Vision API reports an error
        """
        if self._closed:
            raise OCRError("OCR client has been closed")

        language = to_language_code(language)
        content = self._prepare_content(self._load_content(image_path, image_bytes))

        image = vision.Image(content=content)
        image_context = vision.ImageContext(language_hints=[language])

        try:
            response = self.client.document_text_detection(image=image, image_context=image_context)
        except GoogleAPIError as e:
            raise OCRError(f"API Error: {e}") from e

        if response.error.message:
            raise OCRError(f"API Error: {response.error.message}")

        full_text_annotation = response.full_text_annotation
        text = full_text_annotation.text if full_text_annotation else ""

        words = self._extract_words(full_text_annotation)
        raw_response = self._serialize_response(response)

        ocr_result = OCRResult(
            text=text,
            confidence=self._calculate_confidence(words),
            language=language,
            word_count=len(words),
            raw_response=raw_response
        )
        log_ocr_result(get_logger(), ocr_result, debug=True)

        if save_raw_output:
            source_name = Path(image_path).stem if image_path else 'upload'
            self._save_raw_output(source_name, raw_response, output_dir)

        return ocr_result

    def _load_content(self, image_path: Optional[str], image_bytes: Optional[bytes]) -> bytes:
        """Read image content from bytes or a supported file."""
        if image_bytes is not None:
            return image_bytes

        if image_path is None:
            raise ValueError("Either image_path or image_bytes is required")

        image_ext = Path(image_path).suffix.lower()
        if image_ext not in SUPPORTED_IMAGE_EXTENSIONS:
            raise ValueError(f"Unsupported image format: {image_ext}. Use PNG, JPG or TIFF.")

        with open(image_path, 'rb') as image_file:
            return image_file.read()

    def _prepare_content(self, content: bytes) -> bytes:
        """Re-encode images Vision cannot take inline (e.g. TIFF) as PNG."""
        try:
            with Image.open(io.BytesIO(content)) as image:
                if image.format in VISION_NATIVE_FORMATS:
                    return content

                # Multi-page TIFFs: only the first page is recognized
                image.seek(0)
                if image.mode not in ('RGB', 'L'):
                    image = image.convert('RGB')

                buffer = io.BytesIO()
                image.save(buffer, format='PNG')
                return buffer.getvalue()
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Unreadable image: {e}") from e

    def _extract_words(
        self, full_text_annotation: types.TextAnnotation
    ) -> List[Dict[str, Any]]:
        """Extract word texts and confidences."""
        words = []

        if not full_text_annotation or not full_text_annotation.pages:
            return words

        for page in full_text_annotation.pages:
            for block in page.blocks:
                for paragraph in block.paragraphs:
                    for word in paragraph.words:
                        words.append({
                            'text': ''.join(symbol.text for symbol in word.symbols),
                            'confidence': word.confidence
                        })

        return words

    def _calculate_confidence(self, words: List[Dict[str, Any]]) -> float:
        """Mean word confidence, or 0.0 when nothing was recognized."""
        confidences = [w['confidence'] for w in words if w['confidence'] is not None]
        if not confidences:
            return 0.0
        return sum(confidences) / len(confidences)

    def _serialize_response(self, response) -> Dict[str, Any]:
        """Serialize API response to dictionary for debugging."""
        return type(response).to_dict(response)

    def _save_raw_output(
        self,
        source_name: str,
        raw_response: Dict[str, Any],
        output_dir: Optional[str]
    ) -> None:
        """Save raw OCR output to JSON file."""
        if output_dir is None:
            output_dir = 'output'

        Path(output_dir).mkdir(parents=True, exist_ok=True)
        output_path = Path(output_dir) / f"{source_name}_ocr_raw.json"

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(raw_response, f, indent=2, ensure_ascii=False)

        get_logger().info(f"Raw OCR output saved to: {output_path}")
