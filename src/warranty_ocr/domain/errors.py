"""Error taxonomy for invoice text acquisition."""

# Substrings that mark an engine error as an image-quality problem.
# Only consulted for errors an adapter did not tag itself.
QUALITY_ERROR_MARKERS = (
    "image quality too poor",
    "image too small",
    "corrupt",
    "format not supported",
)


class WarrantyOCRError(Exception):
    """Base class for all invoice validation errors."""


class ImageInvalidError(WarrantyOCRError):
    """Image rejected by pre-flight checks; no recognition was attempted."""


class RecognitionError(WarrantyOCRError):
    """Recognition engine failure."""


class RecognitionRetryableError(RecognitionError):
    """Recognition under-performed; a different parameter set may succeed."""


class RecognitionFatalError(RecognitionError):
    """The image itself is unusable; retrying cannot help."""


class RecognitionFailedError(RecognitionError):
    """Every recognition attempt failed."""


def is_quality_problem(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in QUALITY_ERROR_MARKERS)


def classify_recognition_error(error: Exception) -> RecognitionError:
    """Tag an untagged engine error as fatal or retryable."""
    if isinstance(error, RecognitionError):
        return error
    message = str(error) or type(error).__name__
    if is_quality_problem(message):
        return RecognitionFatalError(message)
    return RecognitionRetryableError(message)
