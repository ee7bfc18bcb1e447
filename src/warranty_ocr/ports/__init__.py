"""Ports - interfaces for external dependencies."""

from .ocr import OCRPort, RecognitionEngine

__all__ = ["OCRPort", "RecognitionEngine"]
