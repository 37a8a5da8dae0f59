from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Mapping, Sequence, Tuple, Union

from ..core.errors import InvalidInputError
from ..models.pattern import ReferenceColor

# Order matters: it decides nearest-colour ties and symbol precedence.
DMC = [
    {"brand": "DMC", "code": "310", "name": "Black", "rgb": (0, 0, 0)},
    {"brand": "DMC", "code": "White", "name": "White", "rgb": (255, 255, 255)},
    {"brand": "DMC", "code": "B5200", "name": "Very Dark Cranberry", "rgb": (139, 0, 0)},
    {"brand": "DMC", "code": "666", "name": "Bright Red", "rgb": (255, 0, 0)},
    {"brand": "DMC", "code": "816", "name": "Dark Rose", "rgb": (220, 20, 60)},
    {"brand": "DMC", "code": "608", "name": "Spice Pink", "rgb": (255, 105, 180)},
    {"brand": "DMC", "code": "746", "name": "Tangerine", "rgb": (255, 140, 0)},
    {"brand": "DMC", "code": "742", "name": "Tangerine - Light", "rgb": (255, 165, 0)},
    {"brand": "DMC", "code": "741", "name": "Orange", "rgb": (255, 127, 80)},
    {"brand": "DMC", "code": "3822", "name": "Pumpkin", "rgb": (255, 99, 71)},
    {"brand": "DMC", "code": "921", "name": "Copper", "rgb": (184, 115, 51)},
    {"brand": "DMC", "code": "3821", "name": "Harvest Gold", "rgb": (218, 165, 32)},
    {"brand": "DMC", "code": "307", "name": "Lemon", "rgb": (255, 215, 0)},
    {"brand": "DMC", "code": "744", "name": "Yellow", "rgb": (255, 255, 0)},
    {"brand": "DMC", "code": "743", "name": "Canary", "rgb": (255, 255, 224)},
    {"brand": "DMC", "code": "3823", "name": "Maize", "rgb": (240, 230, 140)},
    {"brand": "DMC", "code": "3819", "name": "Avocado", "rgb": (173, 255, 47)},
    {"brand": "DMC", "code": "704", "name": "Chartreuse", "rgb": (127, 255, 0)},
    {"brand": "DMC", "code": "367", "name": "Kelly Green", "rgb": (50, 205, 50)},
    {"brand": "DMC", "code": "368", "name": "Hunter Green", "rgb": (34, 139, 34)},
    {"brand": "DMC", "code": "3810", "name": "Pine Green", "rgb": (0, 100, 0)},
    {"brand": "DMC", "code": "501", "name": "Blue Green", "rgb": (0, 139, 139)},
    {"brand": "DMC", "code": "803", "name": "Peacock Blue", "rgb": (0, 128, 128)},
    {"brand": "DMC", "code": "807", "name": "Teal Green", "rgb": (0, 128, 128)},
    {"brand": "DMC", "code": "991", "name": "Royal Blue", "rgb": (65, 105, 225)},
    {"brand": "DMC", "code": "992", "name": "Dark Blue", "rgb": (0, 0, 128)},
    {"brand": "DMC", "code": "993", "name": "Navy Blue", "rgb": (0, 0, 128)},
    {"brand": "DMC", "code": "995", "name": "Blue", "rgb": (0, 0, 255)},
    {"brand": "DMC", "code": "996", "name": "Light Blue", "rgb": (135, 206, 235)},
    {"brand": "DMC", "code": "775", "name": "Baby Blue", "rgb": (135, 206, 250)},
    {"brand": "DMC", "code": "800", "name": "Imperial Purple", "rgb": (75, 0, 130)},
    {"brand": "DMC", "code": "550", "name": "Violet", "rgb": (139, 0, 139)},
    {"brand": "DMC", "code": "209", "name": "Purple", "rgb": (128, 0, 128)},
    {"brand": "DMC", "code": "333", "name": "Lavender", "rgb": (230, 230, 250)},
    {"brand": "DMC", "code": "605", "name": "Mauve", "rgb": (221, 160, 221)},
    {"brand": "DMC", "code": "602", "name": "Dusty Rose", "rgb": (188, 143, 143)},
    {"brand": "DMC", "code": "3773", "name": "Tan", "rgb": (210, 180, 140)},
    {"brand": "DMC", "code": "3781", "name": "Beige", "rgb": (245, 222, 179)},
    {"brand": "DMC", "code": "3782", "name": "Light Beige", "rgb": (250, 235, 215)},
    {"brand": "DMC", "code": "632", "name": "Flesh", "rgb": (253, 188, 180)},
    {"brand": "DMC", "code": "3771", "name": "Brown", "rgb": (165, 42, 42)},
    {"brand": "DMC", "code": "3031", "name": "Dark Brown", "rgb": (101, 67, 33)},
    {"brand": "DMC", "code": "3371", "name": "Mushroom", "rgb": (192, 192, 192)},
    {"brand": "DMC", "code": "414", "name": "Steel Gray", "rgb": (128, 128, 128)},
    {"brand": "DMC", "code": "415", "name": "Silver", "rgb": (192, 192, 192)},
    {"brand": "DMC", "code": "762", "name": "Pearl Gray", "rgb": (211, 211, 211)},
    {"brand": "DMC", "code": "3841", "name": "Charcoal Gray", "rgb": (105, 105, 105)},
]

_BUILTIN = {
    "DMC": DMC,
}

CatalogEntry = Union[ReferenceColor, Mapping[str, object], Sequence[object]]


def _to_color(entry: CatalogEntry, brand: str) -> ReferenceColor:
    if isinstance(entry, ReferenceColor):
        return entry
    if isinstance(entry, Mapping):
        data = dict(entry)
        data.setdefault("brand", brand)
        return ReferenceColor(**data)
    code, name, rgb = entry
    return ReferenceColor(brand=brand, code=str(code), name=str(name), rgb=tuple(rgb))


def build_catalog(entries: Iterable[CatalogEntry], brand: str = "DMC") -> Tuple[ReferenceColor, ...]:
    """
    Build an ordered, immutable catalog from ReferenceColor instances, dicts or
    ``(code, name, rgb)`` tuples. Codes must be unique.
    """
    try:
        colors = tuple(_to_color(entry, brand) for entry in entries)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid catalog entry: {exc}") from exc
    if not colors:
        raise InvalidInputError("Catalog must contain at least one colour")

    seen: set[str] = set()
    for color in colors:
        if color.code in seen:
            raise InvalidInputError(f"Duplicate catalog code {color.code!r}")
        seen.add(color.code)
    return colors


def available_brands() -> list[str]:
    return sorted(_BUILTIN)


@lru_cache(maxsize=None)
def load_catalog(brand: str = "DMC") -> Tuple[ReferenceColor, ...]:
    entries = _BUILTIN.get(brand)
    if entries is None:
        raise InvalidInputError(f"Unknown catalog brand {brand!r}")
    return build_catalog(entries, brand=brand)


__all__ = ["DMC", "available_brands", "build_catalog", "load_catalog"]
