"""Domain layer - core business logic."""

from .models import (
    Recognition,
    RecognitionOptions,
    ToleranceDecision,
    ValidationResult,
    WarrantyStatus,
)

__all__ = [
    "Recognition",
    "RecognitionOptions",
    "ToleranceDecision",
    "ValidationResult",
    "WarrantyStatus",
]
