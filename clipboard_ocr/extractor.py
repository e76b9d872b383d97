"""Image-to-text extraction: normalize, prepare, detect, group, recognize, assemble."""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from .config import OcrConfig
from .errors import OcrError, OcrErrorKind
from .image import ImageInput, to_rgb8
from .ocr import OcrEngine, RecognizedLine

logger = logging.getLogger(__name__)

LINE_SEPARATOR = " "


def assemble_lines(
    lines: Iterable[Optional[RecognizedLine]], min_line_length: int = 2
) -> str:
    """Join recognized lines in order, skipping declined and too-short lines.

    Lines with fewer than ``min_line_length`` characters are treated as
    detection noise and dropped.
    """
    return LINE_SEPARATOR.join(
        line.text
        for line in lines
        if line is not None and len(line.text) >= min_line_length
    )


class OcrExtractor:
    """Runs the OCR pipeline against a shared, read-only :class:`OcrEngine`.

    The engine bound here is the OCR capability every ``extract`` call uses.
    """

    def __init__(self, engine: OcrEngine, config: Optional[OcrConfig] = None) -> None:
        self._engine = engine
        self._config = config or OcrConfig()

    def extract(self, image: ImageInput) -> str:
        t0 = time.perf_counter()
        try:
            normalized = to_rgb8(image)
        except (TypeError, ValueError) as exc:
            raise OcrError(OcrErrorKind.INVALID_IMAGE, exc) from exc

        try:
            prepared = self._engine.prepare_input(normalized)
        except Exception as exc:
            raise OcrError(OcrErrorKind.PREPARE_FAILED, exc) from exc
        t1 = time.perf_counter()

        try:
            words = list(self._engine.detect_words(prepared))
            lines = list(self._engine.find_text_lines(prepared, words))
        except Exception as exc:
            raise OcrError(OcrErrorKind.DETECTION_FAILED, exc) from exc
        t2 = time.perf_counter()
        logger.debug("[OCR] n_words=%d n_lines=%d", len(words), len(lines))

        try:
            recognized = list(self._engine.recognize_text(prepared, lines))
        except Exception as exc:
            raise OcrError(OcrErrorKind.RECOGNITION_FAILED, exc) from exc
        if len(recognized) != len(lines):
            raise OcrError(
                OcrErrorKind.RECOGNITION_FAILED,
                RuntimeError(f"got {len(recognized)} results for {len(lines)} text lines"),
            )
        t3 = time.perf_counter()

        text = assemble_lines(recognized, self._config.min_line_length)
        logger.info(
            "[PERF] prepare=%.1fms detect=%.1fms recognize=%.1fms total=%.1fms",
            (t1 - t0) * 1000.0,
            (t2 - t1) * 1000.0,
            (t3 - t2) * 1000.0,
            (time.perf_counter() - t0) * 1000.0,
        )
        return text


__all__ = ["OcrExtractor", "assemble_lines", "LINE_SEPARATOR"]
