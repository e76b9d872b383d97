"""OCR capability: pipeline data types and the PaddleOCR adaptor.

The extractor only talks to the :class:`OcrEngine` protocol. The
PaddleOCR-backed engine loads a text-detection model and a text-recognition
model once; the instance is then shared read-only by every extraction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence, Tuple

import cv2
import numpy as np

from .config import OcrConfig
from .image import NormalizedImage
from .utils import clip_bbox, group_words_into_lines, is_bbox_valid, union_boxes

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class PreparedInput:
    """Engine-side view of an image (BGR array for PaddleOCR)."""

    image: np.ndarray
    width: int
    height: int


@dataclass(frozen=True)
class DetectedWord:
    """A word region in image coordinates, as four corner points."""

    points: Tuple[Point, Point, Point, Point]
    score: Optional[float] = None

    @classmethod
    def from_rect(cls, x1: float, y1: float, x2: float, y2: float, score=None):
        return cls(points=((x1, y1), (x2, y1), (x2, y2), (x1, y2)), score=score)

    @property
    def bbox(self) -> List[int]:
        """Axis-aligned ``[x1, y1, x2, y2]`` around the quadrilateral."""
        pts = np.asarray(self.points, dtype=np.float64)
        x1, y1 = np.floor(pts.min(axis=0)).astype(int)
        x2, y2 = np.ceil(pts.max(axis=0)).astype(int)
        return [int(x1), int(y1), int(x2), int(y2)]


@dataclass(frozen=True)
class TextLine:
    words: Tuple[DetectedWord, ...]

    @property
    def bbox(self) -> List[int]:
        return union_boxes([w.bbox for w in self.words])


@dataclass(frozen=True)
class RecognizedLine:
    text: str
    confidence: Optional[float] = None

    def __str__(self) -> str:
        return self.text


class OcrEngine(Protocol):
    """Two-stage OCR capability consumed by the extractor."""

    def prepare_input(self, image: NormalizedImage) -> Any:
        ...

    def detect_words(self, prepared: Any) -> Sequence[DetectedWord]:
        ...

    def find_text_lines(
        self, prepared: Any, words: Sequence[DetectedWord]
    ) -> Sequence[TextLine]:
        ...

    def recognize_text(
        self, prepared: Any, lines: Sequence[TextLine]
    ) -> Sequence[Optional[RecognizedLine]]:
        ...


def _result_field(result: Any, key: str) -> Any:
    """Read ``key`` from a PaddleOCR result object (dict-like, or wrapped under ``res``)."""
    if isinstance(result, dict):
        if key in result:
            return result[key]
        inner = result.get("res")
        if isinstance(inner, dict):
            return inner.get(key)
        return None
    return getattr(result, key, None)


def _safe_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class PaddleOcrEngine:
    """:class:`OcrEngine` backed by PaddleOCR's standalone detection/recognition modules."""

    def __init__(self, detector: Any, recognizer: Any, config: Optional[OcrConfig] = None):
        self._detector = detector
        self._recognizer = recognizer
        self._config = config or OcrConfig()

    @classmethod
    def from_config(cls, config: OcrConfig) -> "PaddleOcrEngine":
        """Load both models. Errors propagate; callers treat them as fatal."""
        from paddleocr import TextDetection, TextRecognition

        logger.info(
            "Loading OCR models: det=%s rec=%s device=%s",
            config.det_model_dir or config.det_model_name,
            config.rec_model_dir or config.rec_model_name,
            config.device,
        )
        detector = TextDetection(
            model_name=config.det_model_name,
            model_dir=config.det_model_dir,
            device=config.device,
        )
        recognizer = TextRecognition(
            model_name=config.rec_model_name,
            model_dir=config.rec_model_dir,
            device=config.device,
        )
        return cls(detector, recognizer, config)

    @property
    def config(self) -> OcrConfig:
        return self._config

    def prepare_input(self, image: NormalizedImage) -> PreparedInput:
        limit = self._config.max_input_side
        if limit and max(image.width, image.height) > limit:
            raise ValueError(
                f"image {image.width}x{image.height} exceeds the maximum side of {limit}px"
            )
        bgr = cv2.cvtColor(image.as_array(), cv2.COLOR_RGB2BGR)
        return PreparedInput(image=bgr, width=image.width, height=image.height)

    def detect_words(self, prepared: PreparedInput) -> List[DetectedWord]:
        results = self._detector.predict(prepared.image, batch_size=1)
        words: List[DetectedWord] = []
        for result in results or []:
            polys = _result_field(result, "dt_polys")
            scores = _result_field(result, "dt_scores")
            if polys is None:
                continue
            scores = list(scores) if scores is not None else []
            for i, poly in enumerate(polys):
                pts = np.asarray(poly, dtype=np.float32).reshape(-1, 2)
                if len(pts) < 4:
                    continue
                if len(pts) > 4:
                    # curved text polygons: keep their rotated bounding box
                    pts = cv2.boxPoints(cv2.minAreaRect(pts))
                quad = tuple((float(x), float(y)) for x, y in pts[:4])
                score = _safe_float(scores[i]) if i < len(scores) else None
                words.append(DetectedWord(points=quad, score=score))
        return words

    def find_text_lines(
        self, prepared: PreparedInput, words: Sequence[DetectedWord]
    ) -> List[TextLine]:
        boxes = [w.bbox for w in words]
        groups = group_words_into_lines(
            boxes,
            y_overlap_ratio=self._config.line_y_overlap_ratio,
            x_gap_ratio=self._config.line_x_gap_ratio,
        )
        return [TextLine(words=tuple(words[i] for i in group)) for group in groups]

    def recognize_text(
        self, prepared: PreparedInput, lines: Sequence[TextLine]
    ) -> List[Optional[RecognizedLine]]:
        out: List[Optional[RecognizedLine]] = [None] * len(lines)
        crops: List[np.ndarray] = []
        slots: List[int] = []
        for i, line in enumerate(lines):
            if not line.words:
                continue
            x1, y1, x2, y2 = clip_bbox(line.bbox, prepared.width, prepared.height)
            if not is_bbox_valid([x1, y1, x2, y2]):
                continue
            crops.append(np.ascontiguousarray(prepared.image[y1:y2, x1:x2]))
            slots.append(i)

        if not crops:
            return out

        results = list(self._recognizer.predict(crops, batch_size=len(crops)) or [])
        if len(results) != len(crops):
            raise RuntimeError(
                f"recognizer returned {len(results)} results for {len(crops)} lines"
            )
        for slot, result in zip(slots, results):
            text = _result_field(result, "rec_text")
            if text is None:
                continue
            score = _safe_float(_result_field(result, "rec_score"))
            out[slot] = RecognizedLine(text=str(text), confidence=score)
        return out


__all__ = [
    "DetectedWord",
    "OcrEngine",
    "PaddleOcrEngine",
    "PreparedInput",
    "RecognizedLine",
    "TextLine",
]
