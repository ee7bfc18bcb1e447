"""Unit tests for pre-flight checks and the recognition fallback policy."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from warranty_ocr.config import DEFAULT_FALLBACK_WHITELIST, DEFAULT_PRIMARY_WHITELIST, ImageConfig
from warranty_ocr.domain.acquisition import TextAcquisitionService, preflight
from warranty_ocr.domain.errors import (
    ImageInvalidError,
    RecognitionFailedError,
    RecognitionFatalError,
    RecognitionRetryableError,
)
from warranty_ocr.domain.models import Recognition

LONG_TEXT = "Invoice Date: 13/06/2025 Total: $500"


def _whitelists(mock_engine: MagicMock) -> list[str]:
    return [c.args[1].char_whitelist for c in mock_engine.recognize.call_args_list]


class TestPreflight:
    """Tests for preflight."""

    def test_valid_image(self, invoice_image: Path) -> None:
        assert preflight(invoice_image, ImageConfig()) == invoice_image.stat().st_size

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ImageInvalidError, match="does not exist"):
            preflight(tmp_path / "missing.jpg", ImageConfig())

    def test_directory_rejected(self, tmp_path: Path) -> None:
        folder = tmp_path / "folder.jpg"
        folder.mkdir()
        with pytest.raises(ImageInvalidError, match="Not a regular file"):
            preflight(folder, ImageConfig())

    def test_zero_byte_file(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.jpg"
        empty.touch()
        with pytest.raises(ImageInvalidError, match="too small: 0 bytes"):
            preflight(empty, ImageConfig())

    def test_minimum_size_inclusive(self, tmp_path: Path) -> None:
        path = tmp_path / "small.png"
        path.write_bytes(b"x" * 1024)
        assert preflight(path, ImageConfig()) == 1024

    def test_too_large(self, tmp_path: Path) -> None:
        path = tmp_path / "big.png"
        path.write_bytes(b"x" * 4096)
        with pytest.raises(ImageInvalidError, match="too large"):
            preflight(path, ImageConfig(max_bytes=2048))

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "test.txt"
        path.write_bytes(b"This is a text file, not an image" * 64)
        with pytest.raises(ImageInvalidError, match="Unsupported file type: .txt"):
            preflight(path, ImageConfig())

    def test_extension_case_insensitive(self, tmp_path: Path) -> None:
        path = tmp_path / "INVOICE.JPG"
        path.write_bytes(b"x" * 2048)
        assert preflight(path, ImageConfig()) == 2048


class TestAcquireText:
    """Tests for TextAcquisitionService.acquire_text."""

    def test_primary_success(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        assert acquisition.acquire_text(invoice_image) == LONG_TEXT
        assert _whitelists(mock_engine) == [DEFAULT_PRIMARY_WHITELIST]

    def test_passes_language_hints(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        acquisition.acquire_text(invoice_image)
        options = mock_engine.recognize.call_args.args[1]
        assert options.language_hints == ("en", "he", "ar")

    def test_invalid_image_skips_recognition(
        self, acquisition: TextAcquisitionService, mock_ocr: MagicMock, tmp_path: Path
    ) -> None:
        empty = tmp_path / "empty.jpg"
        empty.touch()
        with pytest.raises(ImageInvalidError):
            acquisition.acquire_text(empty)
        mock_ocr.session.assert_not_called()

    def test_short_text_triggers_fallback(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = [
            Recognition(text="13/06"),
            Recognition(text=LONG_TEXT),
        ]
        assert acquisition.acquire_text(invoice_image) == LONG_TEXT
        assert _whitelists(mock_engine) == [DEFAULT_PRIMARY_WHITELIST, DEFAULT_FALLBACK_WHITELIST]

    def test_ten_characters_is_too_short(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = [
            Recognition(text="x" * 10),
            Recognition(text="fallback text"),
        ]
        assert acquisition.acquire_text(invoice_image) == "fallback text"

    def test_eleven_characters_is_enough(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.return_value = Recognition(text="x" * 11)
        assert acquisition.acquire_text(invoice_image) == "x" * 11
        assert mock_engine.recognize.call_count == 1

    def test_fallback_text_returned_even_if_shorter(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = [Recognition(text="abc"), Recognition(text="")]
        assert acquisition.acquire_text(invoice_image) == ""

    def test_retryable_error_triggers_fallback(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = [
            RecognitionRetryableError("engine hiccup"),
            Recognition(text=LONG_TEXT),
        ]
        assert acquisition.acquire_text(invoice_image) == LONG_TEXT
        assert mock_engine.recognize.call_count == 2

    def test_untagged_error_treated_as_retryable(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = [
            RuntimeError("timeout talking to engine"),
            Recognition(text=LONG_TEXT),
        ]
        assert acquisition.acquire_text(invoice_image) == LONG_TEXT

    def test_fatal_error_skips_fallback(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = RecognitionFatalError("Image too small")
        with pytest.raises(RecognitionFatalError):
            acquisition.acquire_text(invoice_image)
        assert mock_engine.recognize.call_count == 1

    def test_untagged_quality_error_is_fatal(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = ValueError("Image corrupted")
        with pytest.raises(RecognitionFatalError):
            acquisition.acquire_text(invoice_image)
        assert mock_engine.recognize.call_count == 1

    def test_both_attempts_fail(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = [
            RecognitionRetryableError("first"),
            RecognitionRetryableError("second"),
        ]
        with pytest.raises(RecognitionFailedError, match="Last error: second"):
            acquisition.acquire_text(invoice_image)
        assert mock_engine.recognize.call_count == 2

    def test_fallback_failure_keeps_short_primary_text(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = [
            Recognition(text="13/6/25"),
            RecognitionRetryableError("second"),
        ]
        assert acquisition.acquire_text(invoice_image) == "13/6/25"

    def test_fatal_fallback_error_propagates(
        self, acquisition: TextAcquisitionService, mock_engine: MagicMock, invoice_image: Path
    ) -> None:
        mock_engine.recognize.side_effect = [
            RecognitionRetryableError("first"),
            RecognitionFatalError("Image quality too poor"),
        ]
        with pytest.raises(RecognitionFatalError):
            acquisition.acquire_text(invoice_image)

    def test_session_released_on_success(
        self, acquisition: TextAcquisitionService, mock_ocr: MagicMock, invoice_image: Path
    ) -> None:
        acquisition.acquire_text(invoice_image)
        mock_ocr.session.assert_called_once()
        mock_ocr.session.return_value.__exit__.assert_called_once()

    def test_session_released_on_failure(
        self,
        acquisition: TextAcquisitionService,
        mock_ocr: MagicMock,
        mock_engine: MagicMock,
        invoice_image: Path,
    ) -> None:
        mock_engine.recognize.side_effect = RecognitionFatalError("corrupt")
        with pytest.raises(RecognitionFatalError):
            acquisition.acquire_text(invoice_image)
        mock_ocr.session.return_value.__exit__.assert_called_once()
