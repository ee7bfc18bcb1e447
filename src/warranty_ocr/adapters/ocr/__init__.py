"""OCR adapters."""

from .tesseract import TesseractAdapter, TesseractEngine

__all__ = ["TesseractAdapter", "TesseractEngine"]
