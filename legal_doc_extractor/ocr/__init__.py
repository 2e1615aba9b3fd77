"""OCR module for recognizing court-document text with Google Cloud Vision."""

from .vision_client import OCRError, OCRResult, VisionOCRClient, normalize_confidence

__all__ = ['OCRError', 'OCRResult', 'VisionOCRClient', 'normalize_confidence']
