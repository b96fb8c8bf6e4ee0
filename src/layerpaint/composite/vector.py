"""Brush footprint shapes.

Every function here returns an alpha field of shape ``(height, width)`` in
[0, 1]. Coordinates are local to the field, with the centre of pixel
``[row, col]`` at ``(col + 0.5, row + 0.5)``.
"""

import logging

import numpy as np
from skimage.draw import polygon2mask

from layerpaint.composite import utils
from layerpaint.constants import ROUGH_SEGMENTS, ROUGHNESS_SCALE

logger = logging.getLogger(__name__)

_CURVE_STEPS = 8


def distance_field(height, width, cx, cy):
    """Distance from each pixel centre to ``(cx, cy)``."""
    Y, X = np.mgrid[0:height, 0:width].astype(np.float32)
    return np.hypot(X + 0.5 - cx, Y + 0.5 - cy)


def draw_circle(distance, radius, opacity=1.0):
    """Filled circle with a one pixel anti-aliased rim."""
    return utils.clip(radius - distance + 0.5) * opacity


def draw_radial_gradient(distance, inner, outer, opacity=1.0):
    """Radial ramp from ``opacity`` at ``inner`` down to 0 at ``outer``."""
    if outer <= inner:
        return np.where(distance <= outer, opacity, 0.0).astype(np.float32)
    return utils.clip((outer - distance) / (outer - inner)) * opacity


def rough_outline(cx, cy, radius, roughness, smooth=False, rng=None):
    """
    Vertices of a jittered circle, as an ``(n, 2)`` array of ``(x, y)``.

    ``ROUGH_SEGMENTS + 1`` vertices are placed at evenly spaced angles from 0
    to 2π inclusive, each at radius ``radius * (1 - v / 2 + u * v)`` where
    ``v = roughness * ROUGHNESS_SCALE`` and ``u`` is uniform in [0, 1). When
    ``smooth``, vertices become control points of quadratic curves through
    the midpoints of neighbouring vertices.
    """
    rng = rng if rng is not None else np.random.default_rng()
    count = ROUGH_SEGMENTS + 1
    angles = np.arange(count) / ROUGH_SEGMENTS * 2 * np.pi
    variation = roughness * ROUGHNESS_SCALE
    radii = radius * (1 - variation / 2 + rng.random(count) * variation)
    points = np.stack(
        (cx + np.cos(angles) * radii, cy + np.sin(angles) * radii), axis=1
    )
    if smooth:
        points = _smooth(points)
    return points


def _smooth(points):
    """Flatten the quadratic midpoint curve through ``points``."""
    segments = [points[:1]]
    current = points[0]
    for i in range(1, len(points) - 2):
        end = (points[i] + points[i + 1]) / 2
        segments.append(_quadratic(current, points[i], end))
        current = end
    segments.append(_quadratic(current, points[-2], points[-1]))
    return np.concatenate(segments, axis=0)


def _quadratic(start, control, end):
    t = np.linspace(0, 1, _CURVE_STEPS + 1)[1:, None]
    return (1 - t) ** 2 * start + 2 * (1 - t) * t * control + t**2 * end


def draw_polygon(height, width, points, opacity=1.0):
    """Fill a closed polygon given as ``(x, y)`` vertices."""
    # polygon2mask tests integer (row, col) positions; shift to pixel centres.
    vertices = np.stack((points[:, 1] - 0.5, points[:, 0] - 0.5), axis=1)
    mask = polygon2mask((height, width), vertices)
    return mask.astype(np.float32) * opacity
