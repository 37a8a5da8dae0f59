from __future__ import annotations

from typing import Dict, List, Optional

from ..models.pattern import Pattern
from .symbols import symbol_for_index


def _collect_issues(pattern: Pattern, max_colors: Optional[int]) -> List[Dict[str, object]]:
    issues: List[Dict[str, object]] = []
    index = {color.code: i for i, color in enumerate(pattern.usedColors)}

    if max_colors is not None and len(pattern.usedColors) > max_colors:
        issues.append(
            {
                "code": "palette_over_budget",
                "details": {"palette_size": len(pattern.usedColors), "max_colors": max_colors},
            }
        )

    encountered: List[str] = []
    seen: set[str] = set()
    for cell in pattern.iter_cells():
        if cell.color is None:
            if cell.symbol:
                issues.append({"code": "symbol_on_empty_cell", "details": {"x": cell.x, "y": cell.y}})
            continue
        code = cell.color.code
        position = index.get(code)
        if position is None:
            issues.append(
                {"code": "unknown_color", "details": {"x": cell.x, "y": cell.y, "color": code}}
            )
            continue
        if cell.symbol != symbol_for_index(position):
            issues.append(
                {
                    "code": "symbol_mismatch",
                    "details": {"x": cell.x, "y": cell.y, "color": code, "symbol": cell.symbol},
                }
            )
        if code not in seen:
            seen.add(code)
            encountered.append(code)

    listed = [color.code for color in pattern.usedColors if color.code in seen]
    if listed != encountered:
        issues.append(
            {"code": "order_mismatch", "details": {"used": listed, "encountered": encountered}}
        )
    unused = [color.code for color in pattern.usedColors if color.code not in seen]
    if unused:
        issues.append({"code": "unused_color", "details": {"colors": unused}})
    return issues


def build_sanity_report(pattern: Pattern, max_colors: Optional[int] = None) -> Dict[str, object]:
    """
    Check the pattern invariants: every placed colour is listed once in usedColors in
    row-major first-encounter order, symbols follow usedColors positions and the
    palette stays within budget.
    """
    issues = _collect_issues(pattern, max_colors)
    total_cells = pattern.width * pattern.height
    filled = pattern.stitch_count()
    return {
        "status": "ok" if not issues else "flagged",
        "issues": issues,
        "metrics": {
            "palette_size": len(pattern.usedColors),
            "grid_width": pattern.width,
            "grid_height": pattern.height,
            "filled_cells": filled,
            "empty_cells": total_cells - filled,
            "fill_ratio": round(filled / total_cells, 3),
        },
    }


__all__ = ["build_sanity_report"]
