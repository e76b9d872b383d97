"""Image containers and color-space normalization for the OCR pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import cv2
import numpy as np
from PIL import Image

# native encoding -> (Pillow mode, Pillow raw decoder mode)
_ENCODINGS = {
    "RGB": ("RGB", "RGB"),
    "RGBA": ("RGBA", "RGBA"),
    "BGR": ("RGB", "BGR"),
    "BGRA": ("RGBA", "BGRA"),
    "L": ("L", "L"),
}

CHANNELS = 3


@dataclass(frozen=True)
class RawImage:
    """Pixels as handed over by a clipboard backend, in their native channel order."""

    width: int
    height: int
    encoding: str
    data: bytes

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RawImage":
        if image.mode not in _ENCODINGS:
            image = image.convert("RGBA")
        return cls(
            width=image.width,
            height=image.height,
            encoding=image.mode,
            data=image.tobytes(),
        )


def decode_image(raw: RawImage) -> Image.Image:
    """Decode a :class:`RawImage` into a Pillow image.

    Raises ``ValueError`` for unknown encodings, degenerate sizes, or a pixel
    buffer whose length does not match the declared size (padded rows
    included).
    """
    try:
        mode, raw_mode = _ENCODINGS[raw.encoding.upper()]
    except KeyError:
        raise ValueError(f"unsupported pixel encoding: {raw.encoding}") from None
    if raw.width <= 0 or raw.height <= 0:
        raise ValueError(f"degenerate image size: {raw.width}x{raw.height}")
    expected = raw.width * raw.height * len(raw_mode)
    if len(raw.data) != expected:
        raise ValueError(
            f"pixel buffer has {len(raw.data)} bytes, expected {expected} "
            f"for {raw.width}x{raw.height} {raw.encoding}"
        )
    return Image.frombytes(mode, (raw.width, raw.height), raw.data, "raw", raw_mode)


@dataclass(frozen=True)
class NormalizedImage:
    """8-bit, 3-channel RGB pixel buffer ready to be handed to an OCR engine."""

    data: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"degenerate image size: {self.width}x{self.height}")
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise ValueError(
                f"pixel buffer has {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}x{CHANNELS}"
            )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "NormalizedImage":
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"expected an HxWx3 array, got shape {array.shape}")
        height, width = array.shape[:2]
        return cls(data=np.ascontiguousarray(array).tobytes(), width=width, height=height)

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.width, self.height

    def as_array(self) -> np.ndarray:
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        )


ImageInput = Union[Image.Image, np.ndarray, NormalizedImage]


def _array_to_rgb(array: np.ndarray) -> np.ndarray:
    if array.dtype != np.uint8:
        raise ValueError(f"expected 8-bit pixels, got dtype {array.dtype}")
    if array.ndim == 2:
        if array.size == 0:
            raise ValueError(f"degenerate image size: {array.shape}")
        return cv2.cvtColor(array, cv2.COLOR_GRAY2RGB)
    if array.ndim == 3 and array.shape[2] == 4:
        if array.size == 0:
            raise ValueError(f"degenerate image size: {array.shape}")
        return cv2.cvtColor(array, cv2.COLOR_RGBA2RGB)
    return array


def to_rgb8(image: ImageInput) -> NormalizedImage:
    """Normalize a Pillow image or a ``numpy`` array to 8-bit RGB.

    Arrays are taken to be in RGB(A) order; grayscale arrays are expanded.
    """
    if isinstance(image, NormalizedImage):
        return image
    if isinstance(image, Image.Image):
        if image.width <= 0 or image.height <= 0:
            raise ValueError(f"degenerate image size: {image.width}x{image.height}")
        array = np.asarray(image.convert("RGB"), dtype=np.uint8)
    elif isinstance(image, np.ndarray):
        array = _array_to_rgb(image)
    else:
        raise TypeError(f"unsupported image type: {type(image).__name__}")
    return NormalizedImage.from_array(array)


__all__ = ["RawImage", "NormalizedImage", "ImageInput", "decode_image", "to_rgb8"]
