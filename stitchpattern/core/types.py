"""Common lightweight type aliases used across the pipeline."""

from typing import Callable, Literal, Sequence, Tuple, Union

RGB = Tuple[int, int, int]
RGBLike = Union[Sequence[int], Sequence[float]]
ResampleMode = Literal["area", "nearest"]
ProgressCallback = Callable[[float], None]

__all__ = ["RGB", "RGBLike", "ResampleMode", "ProgressCallback"]
