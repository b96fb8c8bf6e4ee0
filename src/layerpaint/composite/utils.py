"""Pixel and box helpers shared by the compositing code."""

from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

BBox = tuple[int, int, int, int]
Float = Union[float, NDArray[np.floating]]


def divide(a: NDArray[np.floating], b: NDArray[np.floating]) -> NDArray[np.floating]:
    """Elementwise ``a / b`` with zero wherever ``b`` is zero."""
    with np.errstate(divide="ignore", invalid="ignore"):
        out = np.true_divide(a, b)
    out[~np.isfinite(out)] = 0.0
    return out


def union(backdrop: Float, source: Float) -> Float:
    """Porter-Duff alpha union, ``a + b - ab``."""
    return backdrop + source - backdrop * source


def clip(x: NDArray[np.floating]) -> NDArray[np.floating]:
    return np.clip(x, 0.0, 1.0)


def intersect(a: BBox, b: BBox) -> Optional[BBox]:
    """Overlap of two ``(left, top, right, bottom)`` boxes, or None."""
    left, top = max(a[0], b[0]), max(a[1], b[1])
    right, bottom = min(a[2], b[2]), min(a[3], b[3])
    if left >= right or top >= bottom:
        return None
    return left, top, right, bottom


def region(
    viewport: BBox, bbox: BBox
) -> Optional[tuple[tuple[slice, slice], tuple[slice, slice]]]:
    """Slices of ``viewport`` and ``bbox`` arrays covering their overlap.

    Both boxes are ``(left, top, right, bottom)`` in world coordinates. Returns
    ``None`` when they do not overlap.
    """
    inter = intersect(viewport, bbox)
    if inter is None:
        return None
    left, top, right, bottom = inter

    def _slices(box: BBox) -> tuple[slice, slice]:
        return (
            slice(top - box[1], bottom - box[1]),
            slice(left - box[0], right - box[0]),
        )

    return _slices(viewport), _slices(bbox)


def to_float(pixels: NDArray[np.uint8]) -> NDArray[np.float32]:
    """8-bit pixels as float32 in [0, 1]."""
    return pixels.astype(np.float32) / 255.0


def to_uint8(values: NDArray[np.floating]) -> NDArray[np.uint8]:
    """Round float values in [0, 1] to 8-bit pixels."""
    return np.rint(clip(values) * 255.0).astype(np.uint8)
