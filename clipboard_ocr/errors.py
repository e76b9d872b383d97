"""Error taxonomy for clipboard resolution and OCR extraction."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ClipboardOcrError(Exception):
    """Base class for all errors raised by this package."""


class ClipboardError(ClipboardOcrError):
    """Raised by a clipboard backend when a read or write fails."""


class OcrErrorKind(str, Enum):
    INVALID_IMAGE = "invalid_image"
    PREPARE_FAILED = "prepare_failed"
    DETECTION_FAILED = "detection_failed"
    RECOGNITION_FAILED = "recognition_failed"


class ResolveErrorKind(str, Enum):
    NO_USABLE_CONTENT = "no_usable_content"
    TEXT_GET_FAILED = "text_get_failed"
    IMAGE_GET_FAILED = "image_get_failed"
    IMAGE_DECODE_FAILED = "image_decode_failed"
    EXTRACTION_FAILED = "extraction_failed"


_OCR_MESSAGES = {
    OcrErrorKind.INVALID_IMAGE: "Invalid image",
    OcrErrorKind.PREPARE_FAILED: "Failed to prepare OCR input",
    OcrErrorKind.DETECTION_FAILED: "Failed to detect text",
    OcrErrorKind.RECOGNITION_FAILED: "Failed to recognize text",
}

_RESOLVE_MESSAGES = {
    ResolveErrorKind.NO_USABLE_CONTENT: "Unhandled clipboard content: neither text nor image",
    ResolveErrorKind.TEXT_GET_FAILED: "Failed to get text from clipboard",
    ResolveErrorKind.IMAGE_GET_FAILED: "Failed to get image from clipboard",
    ResolveErrorKind.IMAGE_DECODE_FAILED: "Failed to convert image data to an image",
    ResolveErrorKind.EXTRACTION_FAILED: "Failed to extract text from image",
}


def _describe(cause: Optional[BaseException]) -> str:
    if cause is None:
        return ""
    text = str(cause)
    return text or cause.__class__.__name__


class OcrError(ClipboardOcrError):
    """A stage of the OCR pipeline failed.

    ``kind`` names the failing stage, ``cause`` keeps the capability's own
    exception so its diagnostic survives wrapping.
    """

    def __init__(self, kind: OcrErrorKind, cause: Optional[BaseException] = None) -> None:
        self.kind = kind
        self.cause = cause
        detail = _describe(cause)
        message = _OCR_MESSAGES[kind]
        super().__init__(f"{message}: {detail}" if detail else message)


class ResolveError(ClipboardOcrError):
    """Clipboard content could not be resolved to text."""

    def __init__(
        self, kind: ResolveErrorKind, cause: Optional[BaseException] = None
    ) -> None:
        self.kind = kind
        self.cause = cause
        detail = _describe(cause)
        message = _RESOLVE_MESSAGES[kind]
        super().__init__(f"{message}: {detail}" if detail else message)


__all__ = [
    "ClipboardOcrError",
    "ClipboardError",
    "OcrError",
    "OcrErrorKind",
    "ResolveError",
    "ResolveErrorKind",
]
