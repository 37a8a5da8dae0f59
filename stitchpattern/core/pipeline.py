from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
from pydantic import ValidationError

from ..color.capper import PaletteCapper
from ..color.catalog import build_catalog, load_catalog
from ..color.matcher import CatalogMatcher
from ..cv.bitmap import BitmapSource, load_bitmap, resample_bitmap
from ..models.pattern import Cell, Pattern, QuantizationSettings, ReferenceColor
from ..settings import DEFAULT_BRAND
from .errors import InvalidInputError
from .legend import build_legend
from .symbols import symbol_for_index
from .types import ProgressCallback
from .validation import build_sanity_report

logger = logging.getLogger(__name__)

# Pixels with alpha at or below this value are left empty.
ALPHA_THRESHOLD = 128
DITHER_PROBABILITY = 0.5
DITHER_AMPLITUDE = 10.0


# =====================================================================
#  Helpers
# =====================================================================


def _coerce_settings(settings: Union[QuantizationSettings, Mapping[str, Any]]) -> QuantizationSettings:
    if isinstance(settings, QuantizationSettings):
        resolved = settings
    else:
        try:
            resolved = QuantizationSettings(**dict(settings))
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid quantization settings: {exc}") from exc

    if resolved.width <= 0 or resolved.height <= 0:
        raise InvalidInputError(
            f"Target size must be positive, got {resolved.width}x{resolved.height}"
        )
    if resolved.maxColors < 1:
        raise InvalidInputError(f"maxColors must be at least 1, got {resolved.maxColors}")
    return resolved


def _query_colors(
    pixels: np.ndarray,
    dithering: bool,
    rng: Optional[np.random.Generator],
) -> np.ndarray:
    """
    RGB used for matching. With dithering on, each pixel flips a coin and, on heads,
    every channel gets independent uniform noise before matching. The noise only
    steers the match; it is never written back.
    """
    rgb = pixels[:, :, :3].astype(np.float64)
    if not dithering:
        return rgb

    h, w = rgb.shape[:2]
    coins = rng.random((h, w)) < DITHER_PROBABILITY
    noise = rng.uniform(-DITHER_AMPLITUDE, DITHER_AMPLITUDE, size=(h, w, 3))
    jittered = np.clip(rgb + noise, 0.0, 255.0)
    return np.where(coins[:, :, None], jittered, rgb)


# =====================================================================
#  IMAGE → PATTERN
# =====================================================================


def quantize(
    bitmap: BitmapSource,
    settings: Union[QuantizationSettings, Mapping[str, Any]],
    *,
    catalog: Optional[Sequence[ReferenceColor]] = None,
    rng: Optional[np.random.Generator] = None,
    progress: Optional[ProgressCallback] = None,
) -> Pattern:
    """
    Main pipeline:
      1) decode & resample the bitmap to exactly width x height
      2) build the matching query per pixel (optionally dithered)
      3) match every opaque pixel against the full catalog (vectorised)
      4) walk rows in order, capping the palette and assigning symbols
      5) build the Pattern model

    ``catalog`` defaults to the built-in DMC catalog. ``rng`` is the only source of
    randomness; when omitted, one is seeded from ``settings.seed``. ``progress`` is
    called with the completed fraction after every row; raising from it aborts the run.
    """
    resolved = _coerce_settings(settings)
    palette = build_catalog(catalog) if catalog is not None else load_catalog(DEFAULT_BRAND)
    matcher = CatalogMatcher(palette)

    # 1) decode & resample
    source = load_bitmap(bitmap)
    src_h, src_w = source.shape[:2]
    pixels = resample_bitmap(source, resolved.width, resolved.height, mode=resolved.resample)
    height, width = pixels.shape[:2]

    # 2) per-pixel query colours
    if resolved.dithering and rng is None:
        rng = np.random.default_rng(resolved.seed)
    queries = _query_colors(pixels, resolved.dithering, rng)
    opaque = pixels[:, :, 3] > ALPHA_THRESHOLD

    # 3) full-catalog match; -1 marks empty cells
    matched = np.full((height, width), -1, dtype=np.intp)
    matched[opaque] = matcher.match_many(queries[opaque])

    # 4) sequential merge keeps usedColors in first-encounter order
    capper = PaletteCapper(resolved.maxColors)
    grid: List[List[Cell]] = []
    for y, row_indices in enumerate(matched.tolist()):
        row: List[Cell] = []
        for x, catalog_index in enumerate(row_indices):
            if catalog_index < 0:
                row.append(Cell(x=x, y=y))
                continue
            color = capper.resolve(palette[catalog_index])
            symbol = symbol_for_index(capper.index_of(color))
            row.append(Cell(x=x, y=y, color=color, symbol=symbol))
        grid.append(row)
        if progress is not None:
            progress((y + 1) / height)

    used = list(capper.used)
    filled = int(opaque.sum())
    if not filled:
        logger.warning("Bitmap is fully transparent; pattern has no stitches")

    # 5) build Pattern
    meta: Dict[str, Any] = {
        "brand": palette[0].brand,
        "palette_size": len(used),
        "total_stitches": filled,
        "max_colors": resolved.maxColors,
        "dithering": resolved.dithering,
        "seed": resolved.seed,
        "resample": resolved.resample,
        "source_size": [src_w, src_h],
    }
    pattern = Pattern(
        width=width,
        height=height,
        grid=grid,
        usedColors=used,
        clothCount=resolved.clothCount,
        title=resolved.title,
        meta=meta,
    )
    pattern.meta["legend"] = build_legend(pattern)
    pattern.meta["sanity"] = build_sanity_report(pattern, max_colors=resolved.maxColors)

    logger.info(
        "Quantized %dx%d bitmap to %dx%d grid with %d colours (%d stitches)",
        src_w,
        src_h,
        width,
        height,
        len(used),
        filled,
    )
    return pattern


__all__ = ["ALPHA_THRESHOLD", "DITHER_AMPLITUDE", "DITHER_PROBABILITY", "quantize"]
