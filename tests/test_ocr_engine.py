import sys
import types
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from clipboard_ocr.config import OcrConfig
from clipboard_ocr.extractor import OcrExtractor
from clipboard_ocr.image import NormalizedImage
from clipboard_ocr.ocr import DetectedWord, PaddleOcrEngine, RecognizedLine, TextLine


def _quad(x1, y1, x2, y2):
    return [[x1, y1], [x2, y1], [x2, y2], [x1, y2]]


def _normalized(width=200, height=100):
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[..., 0] = 255  # pure red in RGB
    return NormalizedImage.from_array(array)


@pytest.fixture
def detector():
    det = MagicMock()
    det.predict.return_value = [
        {
            "dt_polys": np.array(
                [
                    _quad(110, 10, 190, 30),
                    _quad(10, 12, 100, 32),
                    _quad(10, 60, 80, 80),
                ],
                dtype=np.int16,
            ),
            "dt_scores": [0.9, 0.8, 0.7],
        }
    ]
    return det


@pytest.fixture
def recognizer():
    rec = MagicMock()

    def _predict(crops, batch_size=1):
        return [
            {"res": {"rec_text": f"w{crop.shape[1]}", "rec_score": 0.95}}
            for crop in crops
        ]

    rec.predict.side_effect = _predict
    return rec


def test_prepare_converts_rgb_to_bgr():
    engine = PaddleOcrEngine(MagicMock(), MagicMock())
    prepared = engine.prepare_input(_normalized(4, 2))
    assert prepared.image.shape == (2, 4, 3)
    assert prepared.image[0, 0].tolist() == [0, 0, 255]
    assert (prepared.width, prepared.height) == (4, 2)


def test_prepare_rejects_oversize_images():
    engine = PaddleOcrEngine(MagicMock(), MagicMock(), OcrConfig(max_input_side=50))
    with pytest.raises(ValueError, match="maximum side"):
        engine.prepare_input(_normalized(60, 10))


def test_detect_words_reads_polygons(detector):
    engine = PaddleOcrEngine(detector, MagicMock())
    prepared = engine.prepare_input(_normalized())
    words = engine.detect_words(prepared)
    assert [w.bbox for w in words] == [
        [110, 10, 190, 30],
        [10, 12, 100, 32],
        [10, 60, 80, 80],
    ]
    assert words[0].score == pytest.approx(0.9)
    detector.predict.assert_called_once()


def test_detect_words_handles_empty_result():
    det = MagicMock()
    det.predict.return_value = [{"dt_polys": [], "dt_scores": []}]
    engine = PaddleOcrEngine(det, MagicMock())
    assert engine.detect_words(engine.prepare_input(_normalized())) == []


def test_find_text_lines_groups_by_row(detector):
    engine = PaddleOcrEngine(detector, MagicMock())
    prepared = engine.prepare_input(_normalized())
    lines = engine.find_text_lines(prepared, engine.detect_words(prepared))
    assert [line.bbox for line in lines] == [[10, 10, 190, 32], [10, 60, 80, 80]]
    assert [w.bbox[0] for w in lines[0].words] == [10, 110]


def test_recognize_text_crops_each_line(detector, recognizer):
    engine = PaddleOcrEngine(detector, recognizer)
    prepared = engine.prepare_input(_normalized())
    lines = engine.find_text_lines(prepared, engine.detect_words(prepared))
    result = engine.recognize_text(prepared, lines)
    assert result == [
        RecognizedLine(text="w180", confidence=0.95),
        RecognizedLine(text="w70", confidence=0.95),
    ]
    crops = recognizer.predict.call_args[0][0]
    assert [c.shape for c in crops] == [(22, 180, 3), (20, 70, 3)]


def test_recognize_text_declines_degenerate_lines(recognizer):
    engine = PaddleOcrEngine(MagicMock(), recognizer)
    prepared = engine.prepare_input(_normalized())
    outside = TextLine(words=(DetectedWord.from_rect(300, 300, 400, 320),))
    inside = TextLine(words=(DetectedWord.from_rect(0, 0, 50, 20),))
    result = engine.recognize_text(prepared, [outside, inside, TextLine(words=())])
    assert result == [None, RecognizedLine(text="w50", confidence=0.95), None]
    assert len(recognizer.predict.call_args[0][0]) == 1


def test_recognize_text_without_lines_skips_model(recognizer):
    engine = PaddleOcrEngine(MagicMock(), recognizer)
    assert engine.recognize_text(engine.prepare_input(_normalized()), []) == []
    recognizer.predict.assert_not_called()


def test_recognize_text_result_count_mismatch():
    rec = MagicMock()
    rec.predict.return_value = []
    engine = PaddleOcrEngine(MagicMock(), rec)
    line = TextLine(words=(DetectedWord.from_rect(0, 0, 50, 20),))
    with pytest.raises(RuntimeError):
        engine.recognize_text(engine.prepare_input(_normalized()), [line])


def test_full_pipeline_with_paddle_adaptor(detector, recognizer):
    extractor = OcrExtractor(PaddleOcrEngine(detector, recognizer))
    assert extractor.extract(_normalized().as_array()) == "w180 w70"


def test_from_config_loads_both_models():
    fake = types.ModuleType("paddleocr")
    fake.TextDetection = MagicMock(name="TextDetection")
    fake.TextRecognition = MagicMock(name="TextRecognition")
    config = OcrConfig(det_model_dir="/models/det", device="cpu")

    with patch.dict(sys.modules, {"paddleocr": fake}):
        engine = PaddleOcrEngine.from_config(config)

    fake.TextDetection.assert_called_once_with(
        model_name="PP-OCRv5_mobile_det", model_dir="/models/det", device="cpu"
    )
    fake.TextRecognition.assert_called_once_with(
        model_name="PP-OCRv5_mobile_rec", model_dir=None, device="cpu"
    )
    assert engine.config is config
