"""Document-processing pipeline: upload validation, OCR, and field extraction."""

import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from legal_doc_extractor.config import DEFAULT_MAX_UPLOAD_SIZE_MB, PipelineConfig
from legal_doc_extractor.extractors import FieldExtractor, categorize_document, generate_summary
from legal_doc_extractor.ocr import OCRError, OCRResult, VisionOCRClient
from legal_doc_extractor.ocr.vision_client import SUPPORTED_IMAGE_EXTENSIONS
from legal_doc_extractor.schema import ExtractedRecord, empty_record, to_language_code
from legal_doc_extractor.utils import log_extraction_summary, setup_logger


ALLOWED_CONTENT_TYPES = (
    'image/jpeg',
    'image/jpg',
    'image/png',
    'image/tiff',
)


def validate_file_type(content_type: Optional[str]) -> bool:
    """Check an upload's MIME type against the accepted document types."""
    return content_type in ALLOWED_CONTENT_TYPES


def validate_file_size(size_bytes: int, max_size_mb: float = DEFAULT_MAX_UPLOAD_SIZE_MB) -> bool:
    """Check an upload's size against the limit in megabytes."""
    return size_bytes <= max_size_mb * 1024 * 1024


class ExtractionResult:
    """Result of processing one document."""

    def __init__(
        self,
        record: Optional[ExtractedRecord],
        ocr_result: OCRResult,
        processing_time: float,
        source: str = '',
        category: str = 'other',
        summary: str = ''
    ):
        """
        Initialize extraction result.

        Args:
            record: Extracted record, or None when OCR failed
            ocr_result: OCR result the record was extracted from
            processing_time: Total processing time in seconds
            source: Name of the processed file
            category: Document category derived from the case type
            summary: Short summary of the recognized text
        """
        self.record = record
        self.ocr_result = ocr_result
        self.processing_time = processing_time
        self.source = source
        self.category = category
        self.summary = summary

    @property
    def success(self) -> bool:
        return self.record is not None

    @property
    def error(self) -> Optional[str]:
        return self.ocr_result.error

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'extracted_data': self.record.to_json_dict() if self.record else None,
            'metadata': {
                'source': self.source,
                'success': self.success,
                'error': self.error,
                'category': self.category,
                'summary': self.summary,
                'ocr_confidence': self.ocr_result.confidence,
                'ocr_text_length': len(self.ocr_result.text),
                'ocr_word_count': self.ocr_result.word_count,
                'processing_time_seconds': self.processing_time,
            }
        }


class DocumentPipeline:
    """
    Pipeline running upload validation, OCR and field extraction.

    The OCR client is supplied by the caller, who also owns its lifetime.
    """

    def __init__(
        self,
        ocr_client: Any,
        max_file_size_mb: Optional[float] = None,
        extractor: Optional[FieldExtractor] = None,
        config: Optional[PipelineConfig] = None
    ):
        """
        Initialize document pipeline.

        Args:
            ocr_client: Object with an extract_text(...) -> OCRResult method,
                        usually a VisionOCRClient
            max_file_size_mb: Largest accepted document, in megabytes
                              (default: config.max_upload_size_mb)
            extractor: Field extractor (default: FieldExtractor())
            config: Default language, size limit and raw-output settings
                    (default: PipelineConfig())
        """
        self.ocr_client = ocr_client
        self.config = config or PipelineConfig()
        self.max_file_size_mb = (
            max_file_size_mb if max_file_size_mb is not None else self.config.max_upload_size_mb
        )
        self.extractor = extractor or FieldExtractor()

    @classmethod
    def from_config(cls, ocr_client: Any, config: PipelineConfig) -> 'DocumentPipeline':
        """Build a pipeline whose defaults come from a PipelineConfig."""
        return cls(ocr_client, config=config)

    def process(
        self,
        image_path: str,
        language: Optional[str] = None,
        save_raw_ocr: Optional[bool] = None,
        output_dir: Optional[str] = None
    ) -> ExtractionResult:
        """
        Run the full pipeline on a document image.

        Pipeline steps:
        1. Validate the file (existence, format, size)
        2. OCR with the injected client
        3. Field extraction and confidence scoring
        4. Categorization and summary

        Args:
            image_path: Path to image file (PNG, JPG or TIFF)
            language: OCR language profile ('en'/'hi', or 'eng'/'hin');
                      defaults to config.language
            save_raw_ocr: Whether to save raw OCR output; defaults to config.save_raw_ocr
            output_dir: Directory for raw OCR output; defaults to config.output_dir

        Returns:
            ExtractionResult; record is None when OCR failed

        Raises:
            FileNotFoundError: If the image does not exist
            ValueError: If the image format or size is not accepted
        """
        path = Path(image_path)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        image_ext = path.suffix.lower()
        if image_ext not in SUPPORTED_IMAGE_EXTENSIONS:
            raise ValueError(f"Unsupported image format: {image_ext}. Use PNG, JPG or TIFF.")

        self._check_size(path.stat().st_size)

        return self._run(
            path.name,
            language,
            image_path=str(path),
            save_raw_output=self.config.save_raw_ocr if save_raw_ocr is None else save_raw_ocr,
            output_dir=output_dir or self.config.output_dir
        )

    def process_bytes(
        self,
        image_bytes: bytes,
        filename: str,
        language: Optional[str] = None
    ) -> ExtractionResult:
        """
        Run the pipeline on uploaded image bytes.

        Args:
            image_bytes: Image file bytes
            filename: Original upload name, used for format checks and reporting
            language: OCR language profile; defaults to config.language

        Returns:
            ExtractionResult; record is None when OCR failed

        Raises:
            ValueError: If the upload format or size is not accepted
        """
        image_ext = Path(filename).suffix.lower()
        if image_ext not in SUPPORTED_IMAGE_EXTENSIONS:
            raise ValueError(f"Unsupported image format: {image_ext}. Use PNG, JPG or TIFF.")

        self._check_size(len(image_bytes))

        return self._run(
            filename,
            language,
            image_bytes=image_bytes,
            save_raw_output=self.config.save_raw_ocr,
            output_dir=self.config.output_dir
        )

    def process_many(
        self,
        image_paths: Iterable[str],
        language: Optional[str] = None
    ) -> List[ExtractedRecord]:
        """
        Process documents one after another.

        A document that fails for any reason is reported as an empty record
        (no fields, empty raw text, zero confidence) so the output stays
        aligned with the input.

        Args:
            image_paths: Paths to image files
            language: OCR language profile; defaults to config.language

        Returns:
            One ExtractedRecord per input path, in order
        """
        logger = setup_logger()
        language = to_language_code(language or self.config.language)
        records = []

        for image_path in image_paths:
            try:
                result = self.process(image_path, language=language)
            except (OSError, ValueError) as e:
                logger.error(f"Error processing {image_path}: {e}")
                records.append(empty_record(language))
                continue

            if result.record is None:
                logger.error(f"Error processing {image_path}: {result.error}")
                records.append(empty_record(language))
            else:
                records.append(result.record)

        return records

    @classmethod
    def process_document_once(
        cls,
        image_path: str,
        language: Optional[str] = None,
        credentials_path: Optional[str] = None,
        config: Optional[PipelineConfig] = None
    ) -> ExtractionResult:
        """
        Process a single document with a short-lived Vision client.

        The client is created for this call and always closed afterwards.
        Credentials come from credentials_path, then config.credentials_path.
        """
        config = config or PipelineConfig()
        with VisionOCRClient(credentials_path=credentials_path or config.credentials_path) as ocr_client:
            return cls(ocr_client, config=config).process(image_path, language=language)

    def _check_size(self, size_bytes: int) -> None:
        if not validate_file_size(size_bytes, self.max_file_size_mb):
            raise ValueError(
                f"File too large: {size_bytes} bytes (limit {self.max_file_size_mb} MB)"
            )

    def _run(self, source: str, language: Optional[str], **ocr_kwargs) -> ExtractionResult:
        """OCR a validated document and extract its fields."""
        start_time = time.time()
        language = to_language_code(language or self.config.language)

        logger = setup_logger()
        logger.info("=" * 60)
        logger.info(f"DOCUMENT PIPELINE: {source}")
        logger.info("=" * 60)

        logger.info("Step 1: Performing OCR...")
        try:
            ocr_result = self.ocr_client.extract_text(language=language, **ocr_kwargs)
        except OCRError as e:
            logger.warning(f"OCR failed for {source}: {e}")
            ocr_result = OCRResult.failed(str(e), language=language)

        if not ocr_result.success:
            return ExtractionResult(
                record=None,
                ocr_result=ocr_result,
                processing_time=time.time() - start_time,
                source=source
            )

        logger.info("Step 2: Field extraction...")
        record = self.extractor.extract(ocr_result.text, ocr_result.confidence, language)
        log_extraction_summary(logger, record)

        category = categorize_document(record)
        summary = generate_summary(record.raw_text)

        processing_time = time.time() - start_time
        logger.info("=" * 60)
        logger.info("PROCESSING COMPLETE")
        logger.info(f"Category: {category}")
        logger.info(f"Processing time: {processing_time:.2f}s")
        logger.info("=" * 60)

        return ExtractionResult(
            record=record,
            ocr_result=ocr_result,
            processing_time=processing_time,
            source=source,
            category=category,
            summary=summary
        )
