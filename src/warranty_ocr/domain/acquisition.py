"""Text acquisition: pre-flight checks plus a two-pass recognition policy."""

import logging
from pathlib import Path

from ..config import ImageConfig, OCRConfig
from ..ports.ocr import OCRPort, RecognitionEngine
from .errors import (
    ImageInvalidError,
    RecognitionError,
    RecognitionFailedError,
    RecognitionRetryableError,
    classify_recognition_error,
)
from .models import Recognition, RecognitionOptions

logger = logging.getLogger(__name__)


def preflight(path: Path, config: ImageConfig) -> int:
    """Validate an image file before recognition.

    Returns the file size in bytes. Raises ImageInvalidError with a
    human-readable reason.
    """
    if not path.exists():
        raise ImageInvalidError("Image file does not exist")
    if not path.is_file():
        raise ImageInvalidError(f"Not a regular file: {path.name}")

    size = path.stat().st_size
    if size < config.min_bytes:
        raise ImageInvalidError(
            f"Image file too small: {size} bytes (minimum {config.min_bytes} bytes)"
        )
    if size > config.max_bytes:
        raise ImageInvalidError(
            f"Image file too large: {size / 1024 / 1024:.1f}MB "
            f"(maximum {config.max_bytes / 1024 / 1024:.0f}MB)"
        )

    suffix = path.suffix.lower()
    if suffix not in config.allowed_extensions:
        raise ImageInvalidError(
            f"Unsupported file type: {suffix or '(none)'}. "
            f"Allowed: {', '.join(config.allowed_extensions)}"
        )

    return size


class TextAcquisitionService:
    """Recognizes invoice text, retrying once with a permissive charset."""

    def __init__(self, ocr: OCRPort, config: OCRConfig, images: ImageConfig) -> None:
        self.ocr = ocr
        self.config = config
        self.images = images

    def acquire_text(self, path: Path) -> str:
        """Return recognized text for an invoice image.

        Pipeline:
            1. Pre-flight checks (no engine call on failure)
            2. Primary attempt with the strict charset
            3. One fallback attempt with the permissive charset when the
               primary text is too short or the primary error is retryable

        Fatal (image-quality) errors propagate without a fallback.
        """
        path = Path(path)
        size = preflight(path, self.images)
        logger.info(f"Recognizing: {path.name} ({round(size / 1024)}KB)")

        with self.ocr.session() as engine:
            primary_text: str | None = None
            try:
                primary = self._attempt(engine, path, self.config.primary_whitelist, "primary")
            except RecognitionRetryableError as e:
                logger.warning(f"Primary recognition failed: {e}")
            else:
                if len(primary.text) > self.config.fallback_text_length:
                    return primary.text
                primary_text = primary.text
                logger.info(
                    f"Primary recognition returned {len(primary.text)} characters, "
                    "retrying with permissive charset"
                )

            try:
                fallback = self._attempt(
                    engine, path, self.config.fallback_whitelist, "fallback"
                )
            except RecognitionRetryableError as e:
                if primary_text is not None:
                    logger.warning(f"Fallback recognition failed, keeping primary text: {e}")
                    return primary_text
                raise RecognitionFailedError(
                    "All recognition attempts failed. The image content may be too "
                    f"unclear to read. Last error: {e}"
                ) from e

            return fallback.text

    def _attempt(
        self, engine: RecognitionEngine, path: Path, whitelist: str, label: str
    ) -> Recognition:
        options = RecognitionOptions(
            char_whitelist=whitelist,
            language_hints=tuple(self.config.language_hints),
        )
        try:
            recognition = engine.recognize(path, options)
        except RecognitionError:
            raise
        except Exception as e:
            raise classify_recognition_error(e) from e

        if recognition.confidence is not None:
            logger.info(f"{label.capitalize()} recognition confidence: {recognition.confidence:.0%}")
        logger.debug(f"{label.capitalize()} recognition text: {recognition.text!r}")
        return recognition
