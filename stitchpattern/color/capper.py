from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from ..core.errors import InvalidInputError
from ..models.pattern import ReferenceColor
from .matcher import nearest

logger = logging.getLogger(__name__)


class PaletteCapper:
    """
    Single-writer accumulator of the colours placed in one pattern.

    Colours are appended in the order they are first resolved. Once ``max_colors``
    distinct colours are in use, any new colour is redirected to the closest colour
    already in use and the used list stops growing.
    """

    def __init__(self, max_colors: int) -> None:
        if max_colors < 1:
            raise InvalidInputError(f"maxColors must be at least 1, got {max_colors}")
        self.max_colors = int(max_colors)
        self._used: List[ReferenceColor] = []
        self._index: Dict[str, int] = {}
        # valid only because the used list is frozen once it is full
        self._redirects: Dict[str, ReferenceColor] = {}

    @property
    def used(self) -> Tuple[ReferenceColor, ...]:
        return tuple(self._used)

    @property
    def is_full(self) -> bool:
        return len(self._used) >= self.max_colors

    def index_of(self, color: ReferenceColor) -> int:
        return self._index[color.code]

    def resolve(self, color: ReferenceColor) -> ReferenceColor:
        if color.code in self._index:
            return color

        if not self.is_full:
            self._index[color.code] = len(self._used)
            self._used.append(color)
            if self.is_full:
                logger.debug("Colour budget of %d reached", self.max_colors)
            return color

        redirect = self._redirects.get(color.code)
        if redirect is None:
            redirect = nearest(color.rgb, self._used)
            self._redirects[color.code] = redirect
        return redirect


__all__ = ["PaletteCapper"]
