"""
Mask module.

The mask layer accumulates coverage from mask strokes. Its alpha gates every
ordinary foreground stamp and is the silhouette the border effects are
derived from.
"""

import logging
from typing import Optional

import numpy as np

from layerpaint.api.layers import LayerStore
from layerpaint.composite import utils
from layerpaint.composite.stamp import Stamp
from layerpaint.constants import LayerName, Operation

logger = logging.getLogger(__name__)


class MaskGate(object):
    """Record mask coverage and restrict foreground painting to it.

    Example::

        gate = MaskGate(store)
        gate.add(mask_stamp)
        gate.paint_foreground(ink_stamp)  # lands only on covered pixels
    """

    def __init__(self, layers: LayerStore):
        self._layers = layers

    @property
    def available(self) -> bool:
        return LayerName.MASK in self._layers

    def coverage(self, bbox: tuple[int, int, int, int]) -> Optional[np.ndarray]:
        """Mask alpha over ``bbox`` as float32, zero outside the canvas."""
        mask = self._layers.get(LayerName.MASK)
        if mask is None:
            return None
        height, width = bbox[3] - bbox[1], bbox[2] - bbox[0]
        alpha = np.zeros((height, width), dtype=np.float32)
        view = utils.region(bbox, mask.bbox)
        if view is not None:
            target, source = view
            alpha[target] = mask.pixels[source][:, :, 3] / 255.0
        return alpha

    def gate(self, stamp: Stamp) -> Optional[Stamp]:
        """Multiply the stamp alpha by the mask alpha at the same offset."""
        coverage = self.coverage(stamp.bbox)
        if coverage is None:
            return None
        pixels = stamp.pixels.copy()
        pixels[:, :, 3] *= coverage
        return Stamp(pixels, stamp.left, stamp.top)

    def paint_foreground(self, stamp: Stamp) -> bool:
        gated = self.gate(stamp)
        if gated is None:
            logger.debug("No mask layer, dropping %s" % stamp)
            return False
        return self._layers.apply_stamp(LayerName.FOREGROUND, gated)

    def add(self, stamp: Stamp) -> bool:
        """Accumulate coverage."""
        if not self.available:
            return False
        return self._layers.apply_stamp(LayerName.MASK, stamp)

    def subtract(self, stamp: Stamp) -> bool:
        """Remove coverage exactly under the stamp."""
        if not self.available:
            return False
        return self._layers.apply_stamp(
            LayerName.MASK, stamp, Operation.DESTINATION_OUT
        )

    def reclaim(self, background_stamp: Stamp, mask_stamp: Stamp) -> bool:
        """
        Approximate subtraction by repainting the background.

        ``background_stamp`` is painted onto the background and
        ``mask_stamp`` is added to the mask, as earlier versions did. Coverage
        is never removed.
        """
        changed = self._layers.apply_stamp(LayerName.BACKGROUND, background_stamp)
        return self.add(mask_stamp) or changed

    def __repr__(self) -> str:
        return "%s(available=%s)" % (self.__class__.__name__, self.available)
