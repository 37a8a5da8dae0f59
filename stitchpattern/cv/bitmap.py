from __future__ import annotations

import io
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image

from ..core.errors import InvalidInputError
from ..core.types import ResampleMode

BitmapSource = Union[np.ndarray, Image.Image, bytes, bytearray, str, Path]


def _from_array(arr: np.ndarray) -> np.ndarray:
    if arr.size == 0:
        raise InvalidInputError("Bitmap is empty")
    if arr.dtype != np.uint8:
        if arr.dtype == np.bool_ or np.issubdtype(arr.dtype, np.integer):
            arr = np.clip(arr.astype(np.int64), 0, 255).astype(np.uint8)
        else:
            raise InvalidInputError(f"Expected 8-bit channels, got dtype {arr.dtype}")

    if arr.ndim == 2:
        arr = arr[:, :, None]
    if arr.ndim != 3 or arr.shape[2] not in (1, 3, 4):
        raise InvalidInputError(f"Unsupported bitmap shape {arr.shape}")

    h, w, channels = arr.shape
    if channels == 4:
        return np.ascontiguousarray(arr)

    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[:, :, :3] = arr if channels == 3 else np.repeat(arr, 3, axis=2)
    rgba[:, :, 3] = 255
    return rgba


def load_bitmap(source: BitmapSource) -> np.ndarray:
    """
    Normalise any supported bitmap source to an ``H x W x 4`` uint8 RGBA array.

    Accepts numpy arrays (grayscale, RGB or RGBA), PIL images, encoded image bytes
    and file paths.
    """
    if isinstance(source, np.ndarray):
        return _from_array(source)

    if isinstance(source, Image.Image):
        return _from_array(np.array(source.convert("RGBA")))

    if isinstance(source, (bytes, bytearray, str, Path)):
        stream = io.BytesIO(bytes(source)) if isinstance(source, (bytes, bytearray)) else source
        try:
            with Image.open(stream) as img:
                img.load()
                rgba = img.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise InvalidInputError(f"Could not decode bitmap: {exc}") from exc
        return _from_array(np.array(rgba))

    raise InvalidInputError(f"Unsupported bitmap source type {type(source).__name__}")


def resample_bitmap(
    rgba: np.ndarray,
    width: int,
    height: int,
    mode: ResampleMode = "area",
) -> np.ndarray:
    """
    Resize to exactly ``width x height``. Area averaging is used when shrinking in
    both directions; enlarging keeps hard pixel edges.
    """
    import cv2

    h, w = rgba.shape[:2]
    if (w, h) == (width, height):
        return rgba

    if mode != "area" or width > w or height > h:
        out = cv2.resize(rgba, (width, height), interpolation=cv2.INTER_NEAREST)
        return out.reshape(height, width, rgba.shape[2])

    # average premultiplied colour so transparent pixels do not tint their neighbours
    premultiplied = rgba.astype(np.float32)
    premultiplied[:, :, :3] *= premultiplied[:, :, 3:4] / 255.0
    out = cv2.resize(premultiplied, (width, height), interpolation=cv2.INTER_AREA)
    out = out.reshape(height, width, 4)

    alpha = out[:, :, 3:4]
    rgb = np.where(alpha > 0, out[:, :, :3] * 255.0 / np.maximum(alpha, 1e-6), 0.0)
    result = np.empty((height, width, 4), dtype=np.uint8)
    result[:, :, :3] = np.clip(np.rint(rgb), 0, 255)
    result[:, :, 3] = np.clip(np.rint(alpha[:, :, 0]), 0, 255)
    return result


def fit_dimensions(src_width: int, src_height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """Scale a source size down to fit a bounding box, keeping the aspect ratio. Never upscales."""
    if min(src_width, src_height, max_width, max_height) <= 0:
        raise InvalidInputError("Dimensions must be positive")
    scale = min(max_width / src_width, max_height / src_height, 1.0)
    return (
        max(1, min(max_width, int(round(src_width * scale)))),
        max(1, min(max_height, int(round(src_height * scale)))),
    )


__all__ = ["BitmapSource", "fit_dimensions", "load_bitmap", "resample_bitmap"]
