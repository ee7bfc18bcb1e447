"""OCR port - interface for text recognition."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import Recognition, RecognitionOptions


class RecognitionEngine(ABC):
    """A recognition engine handle owned by a single validation call."""

    @abstractmethod
    def recognize(self, path: Path, options: "RecognitionOptions") -> "Recognition":
        """Recognize text in an image or PDF.

        Raises RecognitionFatalError when the image itself is unusable and
        RecognitionRetryableError when other parameters might succeed.
        """
        pass


class OCRPort(ABC):
    """Interface for acquiring recognition engines."""

    @abstractmethod
    def session(self) -> AbstractContextManager[RecognitionEngine]:
        """Acquire an engine, released when the context exits."""
        pass
