from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from stitchpattern.color.catalog import build_catalog

RED = (200, 30, 40)
BLUE = (40, 60, 190)


def make_grid_image(
    cols: int,
    rows: int,
    cell: int = 10,
    colors: Sequence[Tuple[int, int, int]] = (RED, BLUE),
    alpha: int = 255,
) -> np.ndarray:
    """Checkerboard of ``cols x rows`` solid blocks, each ``cell`` pixels wide, as RGBA."""
    canvas = np.zeros((rows * cell, cols * cell, 4), dtype=np.uint8)
    canvas[:, :, 3] = alpha
    for y in range(rows):
        for x in range(cols):
            color = colors[(x + y) % len(colors)]
            canvas[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :3] = color
    return canvas


def make_stripes(colors: Sequence[Tuple[int, int, int]], stripe: int = 4, height: int = 4) -> np.ndarray:
    """Vertical stripes, one per colour, left to right, as RGB."""
    canvas = np.zeros((height, stripe * len(colors), 3), dtype=np.uint8)
    for i, color in enumerate(colors):
        canvas[:, i * stripe : (i + 1) * stripe] = color
    return canvas


def make_gradient(width: int = 64, height: int = 48) -> np.ndarray:
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    canvas = np.zeros((height, width, 3), dtype=np.uint8)
    canvas[:, :, 0] = xs[None, :].astype(np.uint8)
    canvas[:, :, 1] = ys[:, None].astype(np.uint8)
    canvas[:, :, 2] = 128
    return canvas


def small_catalog():
    return build_catalog(
        [
            ("K", "Black", (0, 0, 0)),
            ("W", "White", (255, 255, 255)),
            ("R", "Red", (200, 30, 40)),
            ("B", "Blue", (40, 60, 190)),
            ("G", "Green", (30, 160, 60)),
        ],
        brand="Test",
    )
