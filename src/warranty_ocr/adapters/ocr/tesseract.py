"""OCR adapter using Tesseract (pytesseract for images, ocrmypdf for PDFs)."""

import logging
import shlex
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pytesseract
from PIL import Image, ImageOps, UnidentifiedImageError
from pytesseract import Output

from ...config import OCRConfig
from ...domain.errors import (
    RecognitionFailedError,
    RecognitionFatalError,
    RecognitionRetryableError,
    is_quality_problem,
)
from ...domain.models import Recognition, RecognitionOptions
from ...ports.ocr import OCRPort, RecognitionEngine

logger = logging.getLogger(__name__)

LANGUAGE_CODES = {"en": "eng", "he": "heb", "ar": "ara"}

# ocrmypdf exit codes for an unreadable input file and an encrypted PDF
PDF_FATAL_EXIT_CODES = {2, 8}


def tesseract_languages(hints: tuple[str, ...]) -> str:
    """Map language hints to a Tesseract language spec, e.g. "eng+heb"."""
    codes = [LANGUAGE_CODES.get(hint, hint) for hint in hints]
    return "+".join(dict.fromkeys(codes)) or "eng"


def tesseract_config(whitelist: str, page_segmentation_mode: int) -> str:
    whitelist_arg = shlex.quote(f"tessedit_char_whitelist={whitelist}")
    return f"--psm {page_segmentation_mode} -c {whitelist_arg}"


def text_from_data(data: dict) -> str:
    """Rebuild text line by line from image_to_data output."""
    lines: dict[tuple, list[str]] = {}
    for i, word in enumerate(data["text"]):
        word = (word or "").strip()
        if not word:
            continue
        key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
        lines.setdefault(key, []).append(word)
    return "\n".join(" ".join(words) for words in lines.values())


def mean_confidence(data: dict) -> float | None:
    """Average word confidence in 0..1; Tesseract reports -1 for non-words."""
    confidences = [float(c) for c in data["conf"] if float(c) >= 0]
    if not confidences:
        return None
    return sum(confidences) / len(confidences) / 100


def use_tesseract_cmd(config: OCRConfig) -> None:
    """Point pytesseract at the configured binary before a call.

    pytesseract reads the command from a process-wide module attribute.
    Adapters with different commands must not run concurrently in threads.
    """
    if config.tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = config.tesseract_cmd


class TesseractEngine(RecognitionEngine):
    """Engine handle bound to one session's working directory."""

    def __init__(self, config: OCRConfig, workdir: Path) -> None:
        self.config = config
        self.workdir = workdir

    def recognize(self, path: Path, options: RecognitionOptions) -> Recognition:
        if path.suffix.lower() == ".pdf":
            return self._recognize_pdf(path, options)
        return self._recognize_image(path, options)

    def _load_image(self, path: Path) -> Image.Image:
        try:
            with Image.open(path) as img:
                image = ImageOps.exif_transpose(img).convert("L")
        except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
            raise RecognitionFatalError(f"Image corrupted or format not supported: {e}") from e

        width, height = image.size
        if min(width, height) < self.config.min_image_side:
            raise RecognitionFatalError(f"Image too small: {width}x{height} pixels")
        return image

    def _recognize_image(self, path: Path, options: RecognitionOptions) -> Recognition:
        image = self._load_image(path)
        use_tesseract_cmd(self.config)
        try:
            data = pytesseract.image_to_data(
                image,
                lang=tesseract_languages(options.language_hints),
                config=tesseract_config(
                    options.char_whitelist, self.config.page_segmentation_mode
                ),
                output_type=Output.DICT,
            )
        except pytesseract.TesseractError as e:
            message = f"Tesseract failed: {e.message}"
            if is_quality_problem(e.message):
                raise RecognitionFatalError(message) from e
            raise RecognitionRetryableError(message) from e

        return Recognition(text=text_from_data(data), confidence=mean_confidence(data))

    def _recognize_pdf(self, path: Path, options: RecognitionOptions) -> Recognition:
        logger.info(f"Running ocrmypdf: {path.name}")

        config_path = self.workdir / "tesseract.cfg"
        config_path.write_text(f"tessedit_char_whitelist {options.char_whitelist}\n")
        sidecar_path = self.workdir / f"{path.stem}.txt"
        output_path = self.workdir / f"{path.stem}.ocr.pdf"

        try:
            subprocess.run(
                [
                    "ocrmypdf",
                    "--quiet",
                    "--force-ocr",
                    "--output-type", "pdf",
                    "-l", tesseract_languages(options.language_hints),
                    "--tesseract-pagesegmode", str(self.config.page_segmentation_mode),
                    "--tesseract-config", str(config_path),
                    "--sidecar", str(sidecar_path),
                    str(path),
                    str(output_path),
                ],
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise RecognitionRetryableError("ocrmypdf is not installed") from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip().splitlines()[-1:] or [""]
            if e.returncode in PDF_FATAL_EXIT_CODES:
                raise RecognitionFatalError(
                    f"PDF corrupted or format not supported (ocrmypdf exit {e.returncode})"
                ) from e
            raise RecognitionRetryableError(
                f"ocrmypdf failed with exit code {e.returncode}: {detail[0]}"
            ) from e

        return Recognition(text=sidecar_path.read_text(encoding="utf-8"))


class TesseractAdapter(OCRPort):
    """OCR implementation using a local Tesseract installation."""

    def __init__(self, config: OCRConfig) -> None:
        self.config = config

    @contextmanager
    def session(self) -> Iterator[TesseractEngine]:
        use_tesseract_cmd(self.config)
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise RecognitionFailedError(
                "Tesseract not available. Please install Tesseract OCR "
                "with the eng, heb and ara language packs"
            ) from e
        logger.debug(f"Tesseract {version} session opened")

        with tempfile.TemporaryDirectory(prefix="warranty-ocr-") as workdir:
            yield TesseractEngine(self.config, Path(workdir))
