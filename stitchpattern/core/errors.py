from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised for inputs the quantizer cannot work with.

    Covers empty candidate sets, non-positive grid dimensions, an invalid colour
    budget and bitmaps that cannot be decoded. Nothing is retried and no partial
    pattern is produced.
    """


__all__ = ["InvalidInputError"]
