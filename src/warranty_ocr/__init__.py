"""Invoice date validation for warranty activation."""

from .config import Settings
from .domain.models import ValidationResult, WarrantyStatus
from .domain.services import WarrantyValidationService
from .ports.ocr import OCRPort

__all__ = [
    "ValidationResult",
    "WarrantyStatus",
    "WarrantyValidationService",
    "build_validation_service",
]


def build_validation_service(
    settings: Settings, ocr: OCRPort | None = None
) -> WarrantyValidationService:
    """Wire the validation pipeline, defaulting to the Tesseract adapter."""
    from .adapters.ocr import TesseractAdapter
    from .domain.acquisition import TextAcquisitionService

    acquisition = TextAcquisitionService(
        ocr=ocr or TesseractAdapter(settings.ocr),
        config=settings.ocr,
        images=settings.images,
    )
    return WarrantyValidationService(
        acquisition=acquisition,
        validation=settings.validation,
        ocr=settings.ocr,
    )
