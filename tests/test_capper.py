from __future__ import annotations

import pytest

from stitchpattern.color.capper import PaletteCapper
from stitchpattern.core.errors import InvalidInputError
from tests.utils import small_catalog


def _by_code():
    return {color.code: color for color in small_catalog()}


def test_appends_until_budget_is_reached():
    colors = _by_code()
    capper = PaletteCapper(2)
    assert capper.resolve(colors["R"]) is colors["R"]
    assert capper.resolve(colors["B"]) is colors["B"]
    assert [c.code for c in capper.used] == ["R", "B"]
    assert capper.is_full
    assert capper.index_of(colors["B"]) == 1


def test_known_colour_is_returned_unchanged():
    colors = _by_code()
    capper = PaletteCapper(1)
    capper.resolve(colors["R"])
    assert capper.resolve(colors["R"]) is colors["R"]
    assert len(capper.used) == 1


def test_over_budget_colour_redirects_to_closest_used():
    colors = _by_code()
    capper = PaletteCapper(2)
    capper.resolve(colors["R"])
    capper.resolve(colors["B"])
    # green is closer to blue than to red
    assert capper.resolve(colors["G"]).code == "B"
    assert capper.resolve(colors["W"]).code in {"R", "B"}
    assert [c.code for c in capper.used] == ["R", "B"]


def test_budget_must_be_positive():
    with pytest.raises(InvalidInputError):
        PaletteCapper(0)
