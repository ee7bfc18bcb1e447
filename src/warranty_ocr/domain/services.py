"""Domain services - orchestrate invoice validation."""

import logging
from datetime import date, datetime
from pathlib import Path

from ..config import OCRConfig, ValidationConfig
from .acquisition import TextAcquisitionService
from .errors import ImageInvalidError, RecognitionFailedError, RecognitionFatalError
from .extraction import extract_dates
from .models import ValidationResult, WarrantyStatus
from .tolerance import check_tolerance

logger = logging.getLogger(__name__)

INSUFFICIENT_TEXT = "insufficient text extracted"
POOR_QUALITY = (
    "Image quality too poor for processing - "
    "please upload a clearer, higher resolution image"
)
RECOGNITION_FAILED = (
    "Unable to extract text from image - please check image quality and try again"
)


def describe_error(error: Exception) -> str:
    """User-facing message for an acquisition failure."""
    if isinstance(error, ImageInvalidError):
        return f"Image validation failed: {error}"
    if isinstance(error, RecognitionFatalError):
        return POOR_QUALITY
    if isinstance(error, RecognitionFailedError):
        return RECOGNITION_FAILED
    return f"OCR processing failed: {str(error) or type(error).__name__}"


class WarrantyValidationService:
    """Decides a warranty status from an invoice image."""

    def __init__(
        self,
        acquisition: TextAcquisitionService,
        validation: ValidationConfig,
        ocr: OCRConfig,
    ) -> None:
        self.acquisition = acquisition
        self.validation = validation
        self.ocr = ocr

    def validate_warranty_by_ocr(
        self, image_path: Path | str, installation_date: date | datetime
    ) -> ValidationResult:
        """Validate an invoice image against the claimed installation date.

        Never raises: every failure becomes an IN_PROGRESS result with an
        error message, so warranty creation is never blocked.
        """
        path = Path(image_path)
        logger.info(f"Validating: {path.name} (installed {installation_date})")

        try:
            text = self.acquisition.acquire_text(path)
        except Exception as e:
            logger.warning(f"Text acquisition failed: {e}")
            return ValidationResult(
                status=WarrantyStatus.IN_PROGRESS,
                error=describe_error(e),
            )

        if len(text) < self.ocr.min_text_length:
            logger.info(f"Only {len(text)} characters recognized, marking for review")
            return ValidationResult(
                status=WarrantyStatus.IN_PROGRESS,
                raw_text=text,
                error=INSUFFICIENT_TEXT,
            )

        try:
            dates = extract_dates(
                text,
                min_year=self.validation.min_year,
                max_year=self.validation.max_year,
                min_token_length=self.validation.min_token_length,
            )
            decision = check_tolerance(
                installation_date, dates, self.validation.tolerance_days
            )
        except Exception as e:
            logger.exception(f"Date validation failed: {e}")
            return ValidationResult(
                status=WarrantyStatus.IN_PROGRESS,
                raw_text=text,
                error=describe_error(e),
            )

        logger.info(f"Validation result: {decision.status.value}")
        return ValidationResult(
            status=decision.status,
            extracted_dates=tuple(dates),
            raw_text=text,
            matching_date=decision.matching_date,
            days_difference=decision.days_difference,
        )
