"""Tests for the Google Cloud Vision OCR adapter."""

import json

import pytest
from google.api_core.exceptions import ServiceUnavailable
from google.cloud import vision
from google.rpc import status_pb2

from legal_doc_extractor.ocr import OCRError, OCRResult, VisionOCRClient, normalize_confidence
from conftest import image_bytes, vision_response

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


class TestNormalizeConfidence:
    """Test confidence normalization at the OCR boundary."""

    @pytest.mark.parametrize("value, expected", [
        (0.5, 0.5),
        (1.0, 1.0),
        (87, 0.87),
        (150, 1.0),
        (-3, 0.0),
        (None, 0.0),
        (float('nan'), 0.0),
    ])
    def test_values(self, value, expected):
        assert normalize_confidence(value) == pytest.approx(expected)

    def test_result_normalizes_percentages(self):
        assert OCRResult(text="x", confidence=92).confidence == pytest.approx(0.92)

    def test_failed_result(self):
        result = OCRResult.failed("engine crashed", language='hi')

        assert result.success is False
        assert result.error == "engine crashed"
        assert result.text == ''
        assert result.confidence == 0.0
        assert result.to_dict()['language'] == 'hi'


class TestExtractText:
    """Test text recognition through a mocked ImageAnnotatorClient."""

    def test_recognizes_text(self, mock_vision_client):
        ocr = VisionOCRClient(client=mock_vision_client)
        result = ocr.extract_text(image_bytes=image_bytes('PNG'))

        assert result.success
        assert result.text == "Case No. 45/2024"
        assert result.word_count == 2
        assert result.confidence == pytest.approx(0.8, abs=1e-6)
        assert result.language == 'en'

    def test_language_hint(self, mock_vision_client):
        ocr = VisionOCRClient(client=mock_vision_client)
        result = ocr.extract_text(image_bytes=image_bytes('PNG'), language='hin')

        kwargs = mock_vision_client.document_text_detection.call_args.kwargs
        assert list(kwargs['image_context'].language_hints) == ['hi']
        assert result.language == 'hi'

    def test_png_sent_unchanged(self, mock_vision_client):
        content = image_bytes('PNG')
        VisionOCRClient(client=mock_vision_client).extract_text(image_bytes=content)

        sent = mock_vision_client.document_text_detection.call_args.kwargs['image']
        assert sent.content == content

    def test_tiff_converted_to_png(self, mock_vision_client, tiff_bytes):
        VisionOCRClient(client=mock_vision_client).extract_text(image_bytes=tiff_bytes)

        sent = mock_vision_client.document_text_detection.call_args.kwargs['image']
        assert sent.content[:8] == PNG_SIGNATURE, "TIFF should be re-encoded as PNG"

    def test_no_words_zero_confidence(self, mock_vision_client):
        mock_vision_client.document_text_detection.return_value = vision.AnnotateImageResponse()
        result = VisionOCRClient(client=mock_vision_client).extract_text(image_bytes=image_bytes('PNG'))

        assert result.text == ''
        assert result.word_count == 0
        assert result.confidence == 0.0

    def test_from_path(self, mock_vision_client, png_path):
        result = VisionOCRClient(client=mock_vision_client).extract_text(image_path=str(png_path))
        assert result.text == "Case No. 45/2024"

    def test_save_raw_output(self, mock_vision_client, png_path, tmp_path):
        output_dir = tmp_path / "raw"
        VisionOCRClient(client=mock_vision_client).extract_text(
            image_path=str(png_path),
            save_raw_output=True,
            output_dir=str(output_dir)
        )

        saved = output_dir / "order_ocr_raw.json"
        assert saved.exists(), "Raw OCR output should be saved"
        assert json.loads(saved.read_text(encoding='utf-8'))


class TestExtractTextErrors:
    """Test OCR error reporting."""

    def test_api_error_in_response(self, mock_vision_client):
        mock_vision_client.document_text_detection.return_value = vision.AnnotateImageResponse(
            error=status_pb2.Status(code=8, message="quota exceeded")
        )

        with pytest.raises(OCRError, match="quota exceeded"):
            VisionOCRClient(client=mock_vision_client).extract_text(image_bytes=image_bytes('PNG'))

    def test_transport_error(self, mock_vision_client):
        mock_vision_client.document_text_detection.side_effect = ServiceUnavailable("backend down")

        with pytest.raises(OCRError, match="backend down"):
            VisionOCRClient(client=mock_vision_client).extract_text(image_bytes=image_bytes('PNG'))

    def test_unsupported_extension(self, mock_vision_client, tmp_path):
        path = tmp_path / "order.pdf"
        path.write_bytes(b"%PDF-1.4")

        with pytest.raises(ValueError, match="Unsupported image format"):
            VisionOCRClient(client=mock_vision_client).extract_text(image_path=str(path))
        mock_vision_client.document_text_detection.assert_not_called()

    def test_unreadable_bytes(self, mock_vision_client):
        with pytest.raises(ValueError, match="Unreadable image"):
            VisionOCRClient(client=mock_vision_client).extract_text(image_bytes=b"not an image")

    def test_no_input(self, mock_vision_client):
        with pytest.raises(ValueError):
            VisionOCRClient(client=mock_vision_client).extract_text()


class TestClientLifecycle:
    """Test that the client is released after use."""

    def test_context_manager_closes_transport(self, mock_vision_client):
        with VisionOCRClient(client=mock_vision_client) as ocr:
            ocr.extract_text(image_bytes=image_bytes('PNG'))

        mock_vision_client.transport.close.assert_called_once()

    def test_close_is_idempotent(self, mock_vision_client):
        ocr = VisionOCRClient(client=mock_vision_client)
        ocr.close()
        ocr.close()

        mock_vision_client.transport.close.assert_called_once()

    def test_closed_client_rejects_requests(self, mock_vision_client):
        ocr = VisionOCRClient(client=mock_vision_client)
        ocr.close()

        with pytest.raises(OCRError, match="closed"):
            ocr.extract_text(image_bytes=image_bytes('PNG'))

    def test_closed_on_error(self, mock_vision_client):
        mock_vision_client.document_text_detection.side_effect = ServiceUnavailable("down")

        with pytest.raises(OCRError):
            with VisionOCRClient(client=mock_vision_client) as ocr:
                ocr.extract_text(image_bytes=image_bytes('PNG'))

        mock_vision_client.transport.close.assert_called_once()
