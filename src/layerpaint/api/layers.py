"""
Layer module.

Each engine owns one :py:class:`LayerStore` with a fixed-size RGBA buffer per
:py:class:`~layerpaint.constants.LayerName`. Buffers are allocated once and
only ever mutated in place.
"""

import logging
from typing import Iterator, Optional

import numpy as np
from PIL import Image

from layerpaint.api import pil_io
from layerpaint.composite import paint, utils
from layerpaint.composite.blend import OPERATIONS
from layerpaint.composite.stamp import Stamp
from layerpaint.constants import LayerName, Operation

logger = logging.getLogger(__name__)


class Layer(object):
    """Fixed-size straight RGBA pixel buffer."""

    def __init__(self, name: LayerName, width: int, height: int):
        self._name = LayerName(name)
        self._pixels = np.zeros((height, width, 4), dtype=np.uint8)

    @property
    def name(self) -> LayerName:
        return self._name

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """(Width, Height) tuple."""
        return self.width, self.height

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        return 0, 0, self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """The underlying ``uint8`` buffer. Treat as read-only."""
        return self._pixels

    def is_empty(self) -> bool:
        """Whether the layer is fully transparent."""
        return not self._pixels[:, :, 3].any()

    def numpy(self) -> np.ndarray:
        """Float32 RGBA copy in [0, 1]."""
        return utils.to_float(self._pixels)

    def topil(self) -> Image.Image:
        return pil_io.topil(self._pixels)

    def clear(self) -> None:
        self._pixels[...] = 0

    def fill(self, tile: np.ndarray) -> None:
        """Cover the whole layer with a repeating tile."""
        self._pixels[...] = utils.to_uint8(paint.draw_pattern_fill(self.bbox, tile))

    def set_pixels(self, pixels: Optional[np.ndarray]) -> None:
        """Replace content, pasting ``pixels`` at the origin.

        The layer keeps its size: larger input is cropped and the uncovered
        remainder becomes transparent.
        """
        self.clear()
        if pixels is None:
            return
        height = min(self.height, pixels.shape[0])
        width = min(self.width, pixels.shape[1])
        self._pixels[:height, :width] = pixels[:height, :width, :4]

    def apply(self, stamp: Stamp, operation: Operation = Operation.SOURCE_OVER) -> bool:
        """
        Composite ``stamp`` into this layer in place.

        Pixels where the stamp is fully transparent are left untouched.

        :return: True if any pixel was touched.
        """
        view = utils.region(self.bbox, stamp.bbox)
        if view is None:
            return False
        target, source = view
        src = stamp.pixels[source]
        touched = src[:, :, 3] > 0
        if not touched.any():
            return False

        dst = self._pixels[target]
        result = OPERATIONS[operation](utils.to_float(dst), src)
        dst[touched] = utils.to_uint8(result)[touched]
        return True

    def __repr__(self) -> str:
        return "%s(%r size=%dx%d)" % (
            self.__class__.__name__,
            self._name.value,
            self.width,
            self.height,
        )


class LayerStore(object):
    """
    All layers of one document.

    Example::

        store = LayerStore(200, 200)
        store.apply_stamp('foreground', stamp)
        store['foreground'].topil().save('foreground.png')
    """

    def __init__(self, width: int, height: int, names=tuple(LayerName)):
        if width <= 0 or height <= 0:
            raise ValueError("Invalid canvas size: %dx%d" % (width, height))
        self._width = width
        self._height = height
        self._layers = {
            LayerName(name): Layer(name, width, height) for name in names
        }

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """Canvas box shared by every layer."""
        return 0, 0, self._width, self._height

    def get(self, name) -> Optional[Layer]:
        try:
            return self._layers.get(LayerName(name))
        except ValueError:
            return None

    def apply_stamp(
        self, name, stamp: Stamp, operation: Operation = Operation.SOURCE_OVER
    ) -> bool:
        """Merge ``stamp`` into layer ``name``; the only painting entry point."""
        layer = self.get(name)
        if layer is None:
            logger.debug("Unknown layer %r" % (name,))
            return False
        changed = layer.apply(stamp, operation)
        logger.debug("%s %s %s -> %s" % (operation.value, stamp, name, changed))
        return changed

    def __getitem__(self, name) -> Layer:
        return self._layers[LayerName(name)]

    def __contains__(self, name) -> bool:
        return self.get(name) is not None

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers.values())

    def __len__(self) -> int:
        return len(self._layers)

    def __repr__(self) -> str:
        return "%s(size=%dx%d)" % (self.__class__.__name__, self.width, self.height)
