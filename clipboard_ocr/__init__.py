"""Resolve clipboard text or images into plain text."""

from .errors import (
    ClipboardError,
    ClipboardOcrError,
    OcrError,
    OcrErrorKind,
    ResolveError,
    ResolveErrorKind,
)
from .extractor import OcrExtractor, assemble_lines
from .resolver import ContentResolver

__all__ = [
    "ClipboardError",
    "ClipboardOcrError",
    "ContentResolver",
    "OcrError",
    "OcrErrorKind",
    "OcrExtractor",
    "ResolveError",
    "ResolveErrorKind",
    "assemble_lines",
]
