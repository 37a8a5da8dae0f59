from __future__ import annotations

from typing import Any, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from ..core.symbols import symbol_for_index
from ..core.types import RGB, ResampleMode
from ..settings import DEFAULT_CLOTH_COUNT, DEFAULT_TITLE


class ReferenceColor(BaseModel):
    """A catalog thread colour. Instances are shared between cells, never copied."""

    model_config = ConfigDict(frozen=True)

    brand: str = "DMC"
    code: str
    name: str
    rgb: RGB

    @field_validator("rgb")
    @classmethod
    def _check_channels(cls, value: RGB) -> RGB:
        if any(not 0 <= c <= 255 for c in value):
            raise ValueError(f"rgb channels must be within 0..255, got {value}")
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hex(self) -> str:
        r, g, b = self.rgb
        return f"#{r:02X}{g:02X}{b:02X}"


class Cell(BaseModel):
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    color: Optional[ReferenceColor] = None
    symbol: str = ""

    @property
    def is_empty(self) -> bool:
        return self.color is None


class QuantizationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    maxColors: int
    dithering: bool = False
    clothCount: int = DEFAULT_CLOTH_COUNT
    title: str = DEFAULT_TITLE
    seed: Optional[int] = None
    resample: ResampleMode = "area"


class Pattern(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    grid: List[List[Cell]]
    usedColors: List[ReferenceColor]
    clothCount: int = DEFAULT_CLOTH_COUNT
    title: str = DEFAULT_TITLE
    meta: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_grid_shape(self) -> "Pattern":
        if len(self.grid) != self.height:
            raise ValueError(f"grid has {len(self.grid)} rows, expected {self.height}")
        for y, row in enumerate(self.grid):
            if len(row) != self.width:
                raise ValueError(f"row {y} has {len(row)} cells, expected {self.width}")
            for x, cell in enumerate(row):
                if cell.x != x or cell.y != y:
                    raise ValueError(f"cell at [{y}][{x}] reports ({cell.x}, {cell.y})")
        codes = [c.code for c in self.usedColors]
        if len(codes) != len(set(codes)):
            raise ValueError("usedColors contains duplicate codes")
        return self

    def cell(self, x: int, y: int) -> Cell:
        return self.grid[y][x]

    def iter_cells(self) -> Iterator[Cell]:
        for row in self.grid:
            yield from row

    def color_index(self, code: str) -> int:
        for idx, color in enumerate(self.usedColors):
            if color.code == code:
                return idx
        raise KeyError(code)

    def symbol_for(self, color: ReferenceColor) -> str:
        return symbol_for_index(self.color_index(color.code))

    def stitch_count(self) -> int:
        return sum(1 for cell in self.iter_cells() if cell.color is not None)
