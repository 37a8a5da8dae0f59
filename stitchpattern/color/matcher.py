from __future__ import annotations

from typing import Sequence

import numpy as np
from sklearn.neighbors import KDTree

from ..core.errors import InvalidInputError
from ..core.types import RGBLike
from ..models.pattern import ReferenceColor

# Slack added to the radius query so equidistant catalog entries are all returned.
_TIE_EPSILON = 1e-9


def clamp_rgb(rgb: RGBLike) -> np.ndarray:
    arr = np.asarray(rgb, dtype=float)
    if arr.shape != (3,):
        raise InvalidInputError(f"Expected an RGB triple, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError(f"RGB components must be finite, got {rgb!r}")
    return np.clip(arr, 0.0, 255.0)


def color_distance(rgb_a: RGBLike, rgb_b: RGBLike) -> float:
    a = np.array(rgb_a, dtype=float)
    b = np.array(rgb_b, dtype=float)
    return float(np.linalg.norm(a - b))


def nearest(rgb: RGBLike, candidates: Sequence[ReferenceColor]) -> ReferenceColor:
    """
    Return the candidate closest to ``rgb`` by Euclidean RGB distance.

    The query is clamped to 0..255 first. When several candidates share the minimum
    distance the one that comes first in ``candidates`` wins, so catalog order is part
    of the result.
    """
    pool = list(candidates)
    if not pool:
        raise InvalidInputError("Cannot match against an empty candidate set")

    query = clamp_rgb(rgb)
    points = np.array([c.rgb for c in pool], dtype=float)
    # squared distances order the same way as Euclidean ones; argmin picks the first minimum
    dist2 = ((points - query) ** 2).sum(axis=1)
    return pool[int(np.argmin(dist2))]


class CatalogMatcher:
    """KD-tree backed matcher for repeated queries against one fixed catalog."""

    def __init__(self, catalog: Sequence[ReferenceColor]) -> None:
        self.catalog = tuple(catalog)
        if not self.catalog:
            raise InvalidInputError("Cannot build a matcher for an empty catalog")
        self._points = np.array([c.rgb for c in self.catalog], dtype=float)
        self._kd = KDTree(self._points)

    def __len__(self) -> int:
        return len(self.catalog)

    def match(self, rgb: RGBLike) -> ReferenceColor:
        query = clamp_rgb(rgb)
        return self.catalog[int(self.match_many(query[None, :])[0])]

    def match_many(self, rgb: np.ndarray) -> np.ndarray:
        """
        Match an ``(N, 3)`` array of colours and return catalog indices.

        Identical query colours are matched once. The tree answers the distance;
        a radius query then collects every entry at that distance so ties resolve to
        the lowest catalog index, exactly as :func:`nearest` does.
        """
        queries = np.asarray(rgb, dtype=float).reshape(-1, 3)
        if queries.shape[0] == 0:
            return np.empty(0, dtype=np.intp)
        if not np.all(np.isfinite(queries)):
            raise InvalidInputError("RGB components must be finite")
        queries = np.clip(queries, 0.0, 255.0)

        unique, inverse = np.unique(queries, axis=0, return_inverse=True)
        dist, ind = self._kd.query(unique, k=1)
        best = ind[:, 0].astype(np.intp)

        if len(self.catalog) > 1:
            radius = dist[:, 0] * (1.0 + _TIE_EPSILON) + _TIE_EPSILON
            neighbours = self._kd.query_radius(unique, r=radius)
            for row, found in enumerate(neighbours):
                if found.size < 2:
                    continue
                dist2 = ((self._points[found] - unique[row]) ** 2).sum(axis=1)
                tied = found[dist2 == dist2.min()]
                best[row] = int(tied.min())

        return best[inverse.reshape(-1)]


__all__ = ["CatalogMatcher", "clamp_rgb", "color_distance", "nearest"]
