from __future__ import annotations

from collections import Counter
from typing import List

from ..models.pattern import Pattern
from .symbols import symbol_for_index


def build_legend(pattern: Pattern) -> List[dict]:
    """Return one row per used colour with symbol, colour and stitch counts, most used first."""

    counts: Counter[str] = Counter(
        cell.color.code for cell in pattern.iter_cells() if cell.color is not None
    )
    total = sum(counts.values()) or 1

    legend: List[dict] = []
    for index, color in enumerate(pattern.usedColors):
        count = counts.get(color.code, 0)
        legend.append(
            {
                "brand": color.brand,
                "code": color.code,
                "name": color.name,
                "symbol": symbol_for_index(index),
                "rgb": list(color.rgb),
                "hex": color.hex,
                "count": count,
                "percent": round(count / total * 100, 2),
            }
        )
    # sort is stable, so equal counts keep first-encounter order
    legend.sort(key=lambda row: row["count"], reverse=True)
    return legend
