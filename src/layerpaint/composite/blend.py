"""
Porter-Duff operators.

All functions take straight (non-premultiplied) float32 RGBA arrays of shape
``(height, width, 4)`` in [0, 1] and return a new array of the same shape.
"""
import logging

import numpy as np

from layerpaint.composite import utils
from layerpaint.constants import Operation

logger = logging.getLogger(__name__)


def source_over(Db, Cs):
    """Draw the source over the backdrop."""
    alpha_b = Db[:, :, 3:]
    alpha_s = Cs[:, :, 3:]
    alpha = utils.union(alpha_b, alpha_s)
    color = utils.divide(
        alpha_s * Cs[:, :, :3] + (1.0 - alpha_s) * alpha_b * Db[:, :, :3], alpha
    )
    return np.concatenate((utils.clip(color), alpha), axis=2)


def destination_out(Db, Cs):
    """Remove the backdrop where the source is opaque."""
    result = Db.copy()
    result[:, :, 3:] = Db[:, :, 3:] * (1.0 - Cs[:, :, 3:])
    return result


def tint(color, alpha):
    """Make a flat-colored RGBA source from an ``(h, w)`` alpha field."""
    height, width = alpha.shape[:2]
    source = np.empty((height, width, 4), dtype=np.float32)
    source[:, :, :3] = color[:3]
    source[:, :, 3] = utils.clip(alpha) * (color[3] if len(color) > 3 else 1.0)
    return source


OPERATIONS = {
    Operation.SOURCE_OVER: source_over,
    Operation.DESTINATION_OUT: destination_out,
}
