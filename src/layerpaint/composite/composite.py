"""Composite implementation for layer stacking and border effects."""

import logging
from typing import Iterable

import numpy as np
from attrs import define
from PIL import Image

from layerpaint.api import pil_io
from layerpaint.composite import utils
from layerpaint.composite.blend import source_over
from layerpaint.composite.effects import draw_mask_effects, silhouette
from layerpaint.constants import LayerName, Quality

logger = logging.getLogger(__name__)


@define(repr=False, eq=False)
class Frame:
    """
    Composed, displayable frame.

    Frames are derived data: they can always be regenerated from the layers
    and the effect settings, and are never persisted.
    """

    pixels: np.ndarray
    quality: Quality = Quality.FULL

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def numpy(self) -> np.ndarray:
        """Float32 RGBA copy in [0, 1]."""
        return utils.to_float(self.pixels)

    def topil(self) -> Image.Image:
        return pil_io.topil(self.pixels)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __repr__(self) -> str:
        return "%s(%s size=%dx%d)" % (
            self.__class__.__name__,
            self.quality.value,
            self.width,
            self.height,
        )


class Compositor(object):
    """Composite context.

    Example::

        compositor = Compositor(width, height)
        compositor.apply(background)
        compositor.apply_source(shadow)
        pixels = compositor.finish()
    """

    def __init__(self, width: int, height: int):
        self._color = np.zeros((height, width, 4), dtype=np.float32)

    def apply(self, layer) -> None:
        """Draw a layer; absent or empty layers count as transparent."""
        if layer is None or layer.is_empty():
            return
        logger.debug("Compositing %s" % layer)
        self.apply_source(layer.numpy())

    def apply_source(self, source: np.ndarray) -> None:
        self._color = source_over(self._color, source)

    def finish(self) -> np.ndarray:
        return utils.to_uint8(self._color)


def composite_layers(
    layers, names: Iterable[LayerName] = (LayerName.BACKGROUND, LayerName.FOREGROUND)
) -> np.ndarray:
    """Flatten the named layers, bottom first, without any effects."""
    compositor = Compositor(layers.width, layers.height)
    for name in names:
        compositor.apply(layers.get(name))
    return compositor.finish()


def composite(layers, settings=None, quality: Quality = Quality.FULL) -> Frame:
    """
    Compose the displayable frame.

    Background, then border effects derived from the mask, then foreground,
    then inner effects, then the top layer which is never affected by the
    mask.

    :param layers: :py:class:`~layerpaint.api.layers.LayerStore`.
    :param settings: Optional :py:class:`~layerpaint.api.effects.EffectSettings`.
        When None, or when the mask is empty, no effects are drawn.
    :param quality: :py:class:`~layerpaint.constants.Quality`.
    :return: :py:class:`Frame`.
    """
    compositor = Compositor(layers.width, layers.height)
    compositor.apply(layers.get(LayerName.BACKGROUND))

    under, over = _get_effects(layers, settings, quality)
    for source in under:
        compositor.apply_source(source)
    compositor.apply(layers.get(LayerName.FOREGROUND))
    for source in over:
        compositor.apply_source(source)

    compositor.apply(layers.get(LayerName.TOP))
    return Frame(compositor.finish(), quality)


def _get_effects(layers, settings, quality):
    mask = layers.get(LayerName.MASK)
    if settings is None or mask is None or mask.is_empty():
        return [], []
    shape = silhouette(mask.pixels[:, :, 3])
    return draw_mask_effects(shape, settings, quality)
