"""
Brush stamps.

A stamp is the raster produced by one brush application: a square of side
``2 * size`` placed at ``(x - size, y - size)``, whose color comes from a
pattern tile sampled in world coordinates and whose alpha is the tile alpha
times the brush footprint.

Example::

    from layerpaint.composite.paint import PatternTileCache
    from layerpaint.composite.stamp import BrushSpec, build_stamp

    spec = BrushSpec(size=40, pattern_id='dots', color='#884400', softness=0)
    tile = PatternTileCache().get_tile(spec.pattern_id, spec.color)
    stamp = build_stamp(100, 100, spec, tile)
    stamp.bbox  # (60, 60, 140, 140)
"""

import logging
import math
from typing import Any, Optional

import numpy as np
from attrs import define, field

from layerpaint.composite import paint, utils, vector
from layerpaint.constants import BrushAction, BrushShape

logger = logging.getLogger(__name__)


@define(repr=True)
class BrushSpec:
    """
    Parameters of a single brush application.

    .. py:attribute:: size

        Footprint diameter in pixels.

    .. py:attribute:: softness

        Fraction of the radius over which opacity fades to zero. Zero gives a
        hard edge, and only hard edges honor :py:attr:`shape`.

    .. py:attribute:: roughness

        Vertex jitter of rough footprints, in units of 5% of the radius.

    .. py:attribute:: rng

        Optional random generator for the rough jitter, for replayable strokes.
    """

    size: float
    pattern_id: str = "solid"
    shape: BrushShape = BrushShape.CIRCLE
    softness: float = 0.5
    roughness: float = 0.5
    smooth: bool = False
    opacity: float = 1.0
    color: Optional[str] = None
    action: BrushAction = BrushAction.PAINT
    rng: Any = field(default=None, repr=False, eq=False)

    def is_valid(self) -> bool:
        """Whether this brush can produce a stamp. Never raises."""
        try:
            return (
                math.isfinite(self.size)
                and self.size > 0
                and 0 < self.opacity <= 1
                and 0 <= self.softness <= 1
                and math.isfinite(self.roughness)
                and self.roughness >= 0
                and isinstance(self.shape, BrushShape)
                and isinstance(self.action, BrushAction)
            )
        except TypeError:
            return False


@define(repr=False, eq=False)
class Stamp:
    """Ephemeral stamp raster, float32 RGBA at ``(left, top)``."""

    pixels: np.ndarray
    left: int
    top: int

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        return self.left, self.top, self.left + self.width, self.top + self.height

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def __repr__(self) -> str:
        return "%s(offset=(%d,%d) size=%dx%d)" % (
            self.__class__.__name__,
            self.left,
            self.top,
            self.width,
            self.height,
        )


def stamp_bbox(x: float, y: float, size: float) -> tuple[int, int, int, int]:
    """
    Pixel box of the stamp raster for an application at ``(x, y)``.

    :raise OverflowError: when the box is not representable.
    """
    side = int(math.ceil(2 * size))
    left = int(round(x - size))
    top = int(round(y - size))
    return left, top, left + side, top + side


def draw_footprint(x: float, y: float, spec: BrushSpec, opacity=None, viewport=None):
    """
    Footprint alpha of ``spec`` applied at ``(x, y)``.

    :param viewport: Optional ``(left, top, right, bottom)`` box; only the
        part of the stamp inside it is rasterized.
    :return: Tuple of (alpha, bbox) where alpha is a float32 array covering
        bbox, or None when the stamp misses the viewport.
    """
    opacity = spec.opacity if opacity is None else opacity
    try:
        bbox = stamp_bbox(x, y, spec.size)
    except OverflowError:
        return None
    if viewport is not None:
        bbox = utils.intersect(bbox, viewport)
        if bbox is None:
            return None
    width, height = bbox[2] - bbox[0], bbox[3] - bbox[1]
    cx, cy = x - bbox[0], y - bbox[1]
    radius = spec.size / 2.0
    distance = vector.distance_field(height, width, cx, cy)

    if spec.softness > 0:
        if spec.shape != BrushShape.CIRCLE:
            logger.debug("Soft brushes ignore shape %s" % spec.shape.value)
        alpha = vector.draw_radial_gradient(
            distance, radius * (1 - spec.softness), radius, opacity
        )
    elif spec.shape == BrushShape.ROUGH:
        points = vector.rough_outline(
            cx, cy, radius, spec.roughness, spec.smooth, spec.rng
        )
        alpha = vector.draw_polygon(height, width, points, opacity)
    else:
        alpha = vector.draw_circle(distance, radius, opacity)

    # Large roughness can push vertices past the raster's inscribed circle.
    alpha = np.where(distance <= spec.size, alpha, 0.0).astype(np.float32)
    return alpha, bbox


def build_stamp(
    x: float, y: float, spec: BrushSpec, tile: np.ndarray, viewport=None
) -> Optional[Stamp]:
    """Build the stamp for ``spec`` at ``(x, y)`` filled with ``tile``."""
    footprint = draw_footprint(x, y, spec, viewport=viewport)
    if footprint is None:
        return None
    alpha, bbox = footprint
    pixels = paint.draw_pattern_fill(bbox, tile).astype(np.float32)
    pixels[:, :, 3] *= alpha
    return Stamp(pixels, bbox[0], bbox[1])


def build_eraser(
    x: float, y: float, spec: BrushSpec, viewport=None
) -> Optional[Stamp]:
    """Build a fully opaque, pattern-less stamp for destination-out."""
    footprint = draw_footprint(x, y, spec, opacity=1.0, viewport=viewport)
    if footprint is None:
        return None
    alpha, bbox = footprint
    pixels = np.ones(alpha.shape + (4,), dtype=np.float32)
    pixels[:, :, 3] = alpha
    return Stamp(pixels, bbox[0], bbox[1])
