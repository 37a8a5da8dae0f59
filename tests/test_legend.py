from __future__ import annotations

import pytest

from stitchpattern.core.legend import build_legend
from stitchpattern.core.pattern_edit import apply_meta_updates
from stitchpattern.core.pipeline import quantize
from stitchpattern.core.validation import build_sanity_report
from stitchpattern.models.pattern import Cell, QuantizationSettings
from tests.utils import BLUE, RED, make_stripes, small_catalog


def _pattern():
    img = make_stripes([RED, BLUE, BLUE], stripe=1, height=2)
    settings = QuantizationSettings(width=3, height=2, maxColors=4, title="Stripes")
    return quantize(img, settings, catalog=small_catalog())


def test_legend_counts_and_order():
    pattern = _pattern()
    legend = build_legend(pattern)
    assert [row["code"] for row in legend] == ["B", "R"]
    assert [row["count"] for row in legend] == [4, 2]
    assert legend[0]["symbol"] == pattern.symbol_for(pattern.usedColors[1])
    assert legend[0]["hex"] == "#283CBE"
    assert sum(row["percent"] for row in legend) == pytest.approx(100.0)
    assert sum(row["count"] for row in legend) == pattern.stitch_count()


def test_meta_updates_leave_cells_alone():
    pattern = _pattern()
    updated = apply_meta_updates(pattern, {"title": "Renamed", "clothCount": 18, "notes": "gift"})
    assert updated.title == "Renamed"
    assert updated.clothCount == 18
    assert updated.meta["notes"] == "gift"
    assert updated.grid is pattern.grid
    assert pattern.title == "Stripes"
    assert "notes" not in pattern.meta

    with pytest.raises(ValueError):
        apply_meta_updates(pattern, {"clothCount": 0})


def test_sanity_report_flags_broken_invariants():
    pattern = _pattern()
    assert build_sanity_report(pattern, max_colors=4)["status"] == "ok"

    # put a colour the palette never listed into the grid
    stray = small_catalog()[4]
    pattern.grid[0][0] = Cell(x=0, y=0, color=stray, symbol="Z")
    pattern.grid[1][0] = Cell(x=0, y=1, color=stray, symbol="Z")
    report = build_sanity_report(pattern, max_colors=1)
    codes = {issue["code"] for issue in report["issues"]}
    assert report["status"] == "flagged"
    assert {"unknown_color", "palette_over_budget", "unused_color"} <= codes
    assert report["metrics"]["filled_cells"] == 6
