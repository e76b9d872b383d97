from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    v = v.strip()
    return v or default


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(float(v))
    except ValueError:
        return default


@dataclass(frozen=True)
class OcrConfig:
    # assembly
    min_line_length: int = 2
    # models
    det_model_name: str = "PP-OCRv5_mobile_det"
    rec_model_name: str = "PP-OCRv5_mobile_rec"
    det_model_dir: Optional[str] = None
    rec_model_dir: Optional[str] = None
    device: str = "cpu"
    # input limits
    max_input_side: int = 8192
    # line grouping
    line_y_overlap_ratio: float = 0.5
    line_x_gap_ratio: float = 2.0
    # logging
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.min_line_length < 0:
            object.__setattr__(self, "min_line_length", 0)


def load_ocr_config() -> OcrConfig:
    defaults = OcrConfig()
    return OcrConfig(
        min_line_length=_env_int("OCR_MIN_LINE_LENGTH", defaults.min_line_length),
        det_model_name=_env_str("OCR_DET_MODEL", defaults.det_model_name),
        rec_model_name=_env_str("OCR_REC_MODEL", defaults.rec_model_name),
        det_model_dir=_env_str("OCR_DET_MODEL_DIR", defaults.det_model_dir),
        rec_model_dir=_env_str("OCR_REC_MODEL_DIR", defaults.rec_model_dir),
        device=_env_str("OCR_DEVICE", defaults.device),
        max_input_side=_env_int("OCR_MAX_INPUT_SIDE", defaults.max_input_side),
        line_y_overlap_ratio=_env_float(
            "OCR_LINE_Y_OVERLAP", defaults.line_y_overlap_ratio
        ),
        line_x_gap_ratio=_env_float("OCR_LINE_X_GAP_RATIO", defaults.line_x_gap_ratio),
        log_level=(_env_str("OCR_LOG_LEVEL", defaults.log_level) or "INFO").upper(),
    )


__all__ = ["OcrConfig", "load_ocr_config"]
