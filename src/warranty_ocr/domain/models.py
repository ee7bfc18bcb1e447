"""Domain models."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class WarrantyStatus(str, Enum):
    """Warranty status produced by invoice validation."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    IN_PROGRESS = "IN_PROGRESS"  # Manual review


@dataclass(frozen=True)
class RecognitionOptions:
    """Parameters for a single recognition attempt."""

    char_whitelist: str
    language_hints: tuple[str, ...] = ()


@dataclass(frozen=True)
class Recognition:
    """Text returned by a recognition engine."""

    text: str
    confidence: float | None = None  # 0..1, when the engine reports one


@dataclass(frozen=True)
class ToleranceDecision:
    """Outcome of comparing candidate dates against the installation date."""

    status: WarrantyStatus
    matching_date: date | None = None
    days_difference: int | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a warranty invoice image."""

    status: WarrantyStatus
    extracted_dates: tuple[date, ...] = ()
    raw_text: str = ""
    matching_date: date | None = None
    days_difference: int | None = None
    error: str | None = None

    @property
    def needs_review(self) -> bool:
        return self.status == WarrantyStatus.IN_PROGRESS

    def as_dict(self) -> dict:
        """Plain representation with ISO dates, for display and serialization."""
        return {
            "status": self.status.value,
            "matching_date": self.matching_date.isoformat() if self.matching_date else None,
            "days_difference": self.days_difference,
            "extracted_dates": [d.isoformat() for d in self.extracted_dates],
            "raw_text": self.raw_text,
            "error": self.error,
        }
