"""CLI entry point for the clipboard OCR application."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from PIL import Image

from . import logging_utils
from .app import ClipboardOcrController, run_window
from .clipboard import SystemClipboard
from .config import load_ocr_config
from .errors import ClipboardOcrError
from .extractor import OcrExtractor
from .ocr import PaddleOcrEngine
from .resolver import ContentResolver


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Turn clipboard text or images into plain text."
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Resolve the clipboard once, print JSON and exit instead of opening a window.",
    )
    parser.add_argument(
        "--image", type=Path, help="OCR an image file instead of the clipboard."
    )
    parser.add_argument(
        "--min-line-length",
        type=int,
        help="Override OCR_MIN_LINE_LENGTH for this run.",
    )
    return parser


def _print_json(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False), flush=True)


def _run_once(extractor: OcrExtractor, image_path: Optional[Path]) -> int:
    logger = logging_utils.get_logger()
    try:
        if image_path is not None:
            path = image_path.expanduser().resolve()
            logger.info("Loading image: %s", path)
            with Image.open(path) as img:
                text = extractor.extract(img.convert("RGB"))
        else:
            text = ContentResolver(extractor).resolve(SystemClipboard())
    except (ClipboardOcrError, OSError) as exc:
        logger.error("Resolution failed: %s", exc)
        _print_json({"success": False, "error": str(exc)})
        return 1
    _print_json({"success": True, "text": text})
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.min_line_length is not None:
        os.environ["OCR_MIN_LINE_LENGTH"] = str(args.min_line_length)

    config = load_ocr_config()
    logger = logging_utils.get_logger(config.log_level)

    try:
        engine = PaddleOcrEngine.from_config(config)
    except Exception as exc:
        print(f"Error loading OCR models: {exc}", file=sys.stderr)
        return 1
    extractor = OcrExtractor(engine, config)

    if args.once or args.image is not None:
        return _run_once(extractor, args.image)

    logger.info("Opening clipboard window")
    clipboard = SystemClipboard()
    run_window(ClipboardOcrController(ContentResolver(extractor), clipboard))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
