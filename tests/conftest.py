from typing import List, Optional, Sequence
from unittest.mock import MagicMock

from clipboard_ocr.clipboard import ClipboardFormat
from clipboard_ocr.errors import ClipboardError
from clipboard_ocr.image import RawImage
from clipboard_ocr.ocr import DetectedWord, RecognizedLine, TextLine


class FakeClipboard:
    """In-memory clipboard. ``text``/``image`` of None means the format is absent."""

    def __init__(
        self,
        text: Optional[str] = None,
        image: Optional[RawImage] = None,
        text_error: Optional[Exception] = None,
        image_error: Optional[Exception] = None,
    ) -> None:
        self.text = text
        self.image = image
        self.text_error = text_error
        self.image_error = image_error
        self.written: List[str] = []

    def has_format(self, fmt: ClipboardFormat) -> bool:
        if fmt is ClipboardFormat.TEXT:
            return self.text is not None
        return self.image is not None

    def get_text(self) -> str:
        if self.text_error is not None:
            raise self.text_error
        if self.text is None:
            raise ClipboardError("no text")
        return self.text

    def get_image(self) -> RawImage:
        if self.image_error is not None:
            raise self.image_error
        if self.image is None:
            raise ClipboardError("no image")
        return self.image

    def set_text(self, text: str) -> None:
        self.written.append(text)
        self.text = text


class FakeEngine:
    """OCR engine returning canned lines; one detected word per line."""

    def __init__(self, texts: Sequence[Optional[str]] = ()) -> None:
        self.texts = list(texts)
        self.prepare_input = MagicMock(side_effect=lambda image: image)
        self.detect_words = MagicMock(side_effect=self._detect)
        self.find_text_lines = MagicMock(side_effect=self._group)
        self.recognize_text = MagicMock(side_effect=self._recognize)

    def _detect(self, prepared) -> List[DetectedWord]:
        return [
            DetectedWord.from_rect(0, i * 20, 50, i * 20 + 10)
            for i in range(len(self.texts))
        ]

    def _group(self, prepared, words) -> List[TextLine]:
        return [TextLine(words=(w,)) for w in words]

    def _recognize(self, prepared, lines) -> List[Optional[RecognizedLine]]:
        return [
            None if text is None else RecognizedLine(text=text, confidence=0.9)
            for text in self.texts[: len(lines)]
        ]


def make_raw_image(width: int = 8, height: int = 4) -> RawImage:
    return RawImage(
        width=width,
        height=height,
        encoding="RGBA",
        data=bytes([255]) * (width * height * 4),
    )
