"""Resolve whatever the clipboard holds into plain text."""

from __future__ import annotations

import logging

from .clipboard import Clipboard, ClipboardFormat
from .errors import OcrError, ResolveError, ResolveErrorKind
from .extractor import OcrExtractor
from .image import decode_image

logger = logging.getLogger(__name__)


class ContentResolver:
    """Text wins over image; images go through OCR; anything else is an error.

    One best-effort attempt per call, no retries, and the clipboard is only
    read.
    """

    def __init__(self, extractor: OcrExtractor) -> None:
        self._extractor = extractor

    def _probe(self, clipboard: Clipboard, fmt: ClipboardFormat) -> bool:
        try:
            return clipboard.has_format(fmt)
        except Exception as exc:
            logger.debug("Clipboard probe for %s failed: %s", fmt.value, exc)
            return False

    def resolve(self, clipboard: Clipboard) -> str:
        if self._probe(clipboard, ClipboardFormat.TEXT):
            logger.info("Clipboard holds text")
            try:
                return clipboard.get_text()
            except Exception as exc:
                raise ResolveError(ResolveErrorKind.TEXT_GET_FAILED, exc) from exc

        if self._probe(clipboard, ClipboardFormat.IMAGE):
            logger.info("Clipboard holds an image, running OCR")
            try:
                raw = clipboard.get_image()
            except Exception as exc:
                raise ResolveError(ResolveErrorKind.IMAGE_GET_FAILED, exc) from exc
            try:
                image = decode_image(raw)
            except (ValueError, OSError) as exc:
                raise ResolveError(ResolveErrorKind.IMAGE_DECODE_FAILED, exc) from exc
            try:
                return self._extractor.extract(image)
            except OcrError as exc:
                raise ResolveError(ResolveErrorKind.EXTRACTION_FAILED, exc) from exc

        raise ResolveError(ResolveErrorKind.NO_USABLE_CONTENT)


__all__ = ["ContentResolver"]
