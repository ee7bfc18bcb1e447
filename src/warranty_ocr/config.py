"""Configuration management using pydantic-settings."""

import tomllib
from pathlib import Path
from typing import Self

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TOLERANCE_DAYS = 21
DEFAULT_MIN_YEAR = 1900
DEFAULT_MAX_YEAR = 2030
DEFAULT_MIN_TOKEN_LENGTH = 6  # "1/1/25"

DEFAULT_MIN_BYTES = 1024
DEFAULT_MAX_BYTES = 50 * 1024 * 1024
DEFAULT_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".pdf"]

DEFAULT_LANGUAGE_HINTS = ["en", "he", "ar"]
HEBREW_LETTERS = "".join(chr(c) for c in range(0x05D0, 0x05EB))
DEFAULT_PRIMARY_WHITELIST = (
    "0123456789"
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    + HEBREW_LETTERS
    + "/.:- "
)
DEFAULT_FALLBACK_WHITELIST = DEFAULT_PRIMARY_WHITELIST + "()[]{}"
DEFAULT_FALLBACK_TEXT_LENGTH = 10
DEFAULT_MIN_TEXT_LENGTH = 5

CONFIG_PATH = Path("~/.config/warranty-ocr/config.toml").expanduser()


class ValidationConfig(BaseSettings):
    """Date extraction and tolerance policy."""

    tolerance_days: int = DEFAULT_TOLERANCE_DAYS
    min_year: int = DEFAULT_MIN_YEAR
    max_year: int = DEFAULT_MAX_YEAR
    min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH


class ImageConfig(BaseSettings):
    """Pre-flight checks applied before any recognition attempt."""

    min_bytes: int = DEFAULT_MIN_BYTES
    max_bytes: int = DEFAULT_MAX_BYTES
    allowed_extensions: list[str] = DEFAULT_EXTENSIONS

    @field_validator("allowed_extensions", mode="after")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]


class OCRConfig(BaseSettings):
    """Recognition engine parameters."""

    language_hints: list[str] = DEFAULT_LANGUAGE_HINTS
    primary_whitelist: str = DEFAULT_PRIMARY_WHITELIST
    fallback_whitelist: str = DEFAULT_FALLBACK_WHITELIST
    fallback_text_length: int = DEFAULT_FALLBACK_TEXT_LENGTH
    min_text_length: int = DEFAULT_MIN_TEXT_LENGTH
    tesseract_cmd: str | None = None
    page_segmentation_mode: int = 6
    min_image_side: int = 32


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WARRANTY_OCR_")

    validation: ValidationConfig = ValidationConfig()
    images: ImageConfig = ImageConfig()
    ocr: OCRConfig = OCRConfig()

    @model_validator(mode="after")
    def check_bounds(self) -> Self:
        if self.validation.min_year > self.validation.max_year:
            raise ValueError("validation.min_year must not exceed validation.max_year")
        if self.images.min_bytes >= self.images.max_bytes:
            raise ValueError("images.min_bytes must be smaller than images.max_bytes")
        return self


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from TOML file, falling back to defaults."""
    path = config_path or CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

        validation = ValidationConfig(**data.get("validation", {}))
        images = ImageConfig(**data.get("images", {}))
        ocr = OCRConfig(**data.get("ocr", {}))
        return Settings(validation=validation, images=images, ocr=ocr)

    return Settings()
