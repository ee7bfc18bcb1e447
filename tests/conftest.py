"""Shared test fixtures."""

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from warranty_ocr.config import ImageConfig, OCRConfig, Settings, ValidationConfig
from warranty_ocr.domain.acquisition import TextAcquisitionService
from warranty_ocr.domain.models import Recognition
from warranty_ocr.domain.services import WarrantyValidationService
from warranty_ocr.ports.ocr import OCRPort, RecognitionEngine


@pytest.fixture
def installation_date() -> date:
    return date(2025, 6, 13)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        validation=ValidationConfig(),
        images=ImageConfig(),
        ocr=OCRConfig(),
    )


@pytest.fixture
def invoice_image(tmp_path: Path) -> Path:
    """A file that passes pre-flight checks (content is never decoded)."""
    path = tmp_path / "invoice.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0" + b"\x00" * 2048)
    return path


@pytest.fixture
def mock_engine() -> MagicMock:
    """Mock recognition engine."""
    mock = MagicMock(spec=RecognitionEngine)
    mock.recognize.return_value = Recognition(
        text="Invoice Date: 13/06/2025 Total: $500", confidence=0.91
    )
    return mock


@pytest.fixture
def mock_ocr(mock_engine: MagicMock) -> MagicMock:
    """Mock OCR port whose session yields mock_engine."""
    mock = MagicMock(spec=OCRPort)
    mock.session.return_value.__enter__.return_value = mock_engine
    return mock


@pytest.fixture
def acquisition(mock_ocr: MagicMock, settings: Settings) -> TextAcquisitionService:
    return TextAcquisitionService(ocr=mock_ocr, config=settings.ocr, images=settings.images)


@pytest.fixture
def service(
    acquisition: TextAcquisitionService, settings: Settings
) -> WarrantyValidationService:
    return WarrantyValidationService(
        acquisition=acquisition,
        validation=settings.validation,
        ocr=settings.ocr,
    )
