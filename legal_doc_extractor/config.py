"""Environment-driven configuration for the document-processing pipeline."""

import os
from typing import Optional

from dotenv import load_dotenv

from legal_doc_extractor.schema import Language, to_language_code


DEFAULT_MAX_UPLOAD_SIZE_MB = 10.0
DEFAULT_OUTPUT_DIR = 'output'


class PipelineConfig:
    """Settings shared by the OCR client and the pipeline."""

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        language: Language = 'en',
        max_upload_size_mb: float = DEFAULT_MAX_UPLOAD_SIZE_MB,
        save_raw_ocr: bool = False,
        output_dir: str = DEFAULT_OUTPUT_DIR
    ):
        """
        Initialize pipeline configuration.

        Args:
            credentials_path: Path to Google Cloud service account JSON file.
                            If None, GOOGLE_APPLICATION_CREDENTIALS is used as-is.
            language: Default OCR language profile ('en' or 'hi')
            max_upload_size_mb: Largest accepted document, in megabytes
            save_raw_ocr: Whether to save raw Vision API responses
            output_dir: Directory for raw OCR output
        """
        self.credentials_path = credentials_path
        self.language = language
        self.max_upload_size_mb = max_upload_size_mb
        self.save_raw_ocr = save_raw_ocr
        self.output_dir = output_dir

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'PipelineConfig':
        """
        Load configuration from the environment (and a .env file if present).

        Args:
            env_file: Optional path to a .env file

        Returns:
            PipelineConfig populated from environment variables
        """
        load_dotenv(env_file)

        return cls(
            credentials_path=os.getenv("GOOGLE_APPLICATION_CREDENTIALS"),
            language=to_language_code(os.getenv("OCR_LANGUAGE", "en")),
            max_upload_size_mb=float(os.getenv("MAX_UPLOAD_SIZE_MB", DEFAULT_MAX_UPLOAD_SIZE_MB)),
            save_raw_ocr=os.getenv("SAVE_RAW_OCR", "false").lower() == "true",
            output_dir=os.getenv("OCR_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
        )

    def __repr__(self) -> str:
        return (f"PipelineConfig(language='{self.language}', "
                f"max_upload_size_mb={self.max_upload_size_mb}, save_raw_ocr={self.save_raw_ocr})")
