"""Clipboard access for the OCR app.

Text goes through pyperclip, images through Pillow's ``ImageGrab``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

import pyperclip
from PIL import Image, ImageGrab

from .errors import ClipboardError
from .image import RawImage

logger = logging.getLogger(__name__)


class ClipboardFormat(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class Clipboard(Protocol):
    """Format probing plus retrieval.

    Retrieval can fail even right after a positive probe, since other
    processes may change the clipboard in between.
    """

    def has_format(self, fmt: ClipboardFormat) -> bool:
        ...

    def get_text(self) -> str:
        ...

    def get_image(self) -> RawImage:
        ...

    def set_text(self, text: str) -> None:
        ...


class SystemClipboard:
    """:class:`Clipboard` for the desktop session the process runs in."""

    def has_format(self, fmt: ClipboardFormat) -> bool:
        try:
            if fmt is ClipboardFormat.TEXT:
                return bool(pyperclip.paste())
            if fmt is ClipboardFormat.IMAGE:
                return isinstance(ImageGrab.grabclipboard(), Image.Image)
        except Exception as exc:
            logger.debug("Clipboard probe for %s failed: %s", fmt.value, exc)
            return False
        raise ValueError(f"Unknown clipboard format: {fmt!r}")

    def get_text(self) -> str:
        try:
            return pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(str(exc)) from exc

    def get_image(self) -> RawImage:
        try:
            content = ImageGrab.grabclipboard()
        except (NotImplementedError, OSError) as exc:
            raise ClipboardError(str(exc) or exc.__class__.__name__) from exc
        if not isinstance(content, Image.Image):
            raise ClipboardError("clipboard does not contain an image")
        return RawImage.from_pil(content)

    def set_text(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(str(exc)) from exc


__all__ = ["Clipboard", "ClipboardFormat", "SystemClipboard"]
