"""Turn raster images into cross-stitch patterns matched against a thread catalog."""

from .color.catalog import build_catalog, load_catalog
from .color.matcher import nearest
from .core.errors import InvalidInputError
from .core.pipeline import quantize
from .core.symbols import SYMBOL_TABLE
from .models.pattern import Cell, Pattern, QuantizationSettings, ReferenceColor

__version__ = "0.1.0"

__all__ = [
    "Cell",
    "InvalidInputError",
    "Pattern",
    "QuantizationSettings",
    "ReferenceColor",
    "SYMBOL_TABLE",
    "build_catalog",
    "load_catalog",
    "nearest",
    "quantize",
]
