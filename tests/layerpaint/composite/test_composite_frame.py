import logging

import numpy as np
import pytest

from layerpaint.api.effects import EffectSettings
from layerpaint.api.layers import LayerStore
from layerpaint.composite import Frame, composite, composite_layers
from layerpaint.constants import LayerName, Quality

logger = logging.getLogger(__name__)


@pytest.fixture
def store():
    store = LayerStore(16, 16)
    store[LayerName.BACKGROUND].set_pixels(np.full((16, 16, 4), 255, dtype=np.uint8))
    return store


def _paint_square(store, name, color, box):
    left, top, right, bottom = box
    pixels = store[name].pixels.copy()
    pixels[top:bottom, left:right] = color
    store[name].set_pixels(pixels)


def test_composite_empty_layers():
    frame = composite(LayerStore(4, 3))
    assert isinstance(frame, Frame)
    assert frame.width == 4
    assert frame.height == 3
    assert not frame.pixels.any()


def test_composite_layer_order(store):
    _paint_square(store, LayerName.FOREGROUND, (255, 0, 0, 255), (0, 0, 8, 8))
    _paint_square(store, LayerName.TOP, (0, 0, 255, 255), (4, 4, 12, 12))
    _paint_square(store, LayerName.MASK, (0, 0, 0, 255), (0, 0, 16, 16))
    frame = composite(store)
    assert tuple(frame.pixels[2, 2]) == (255, 0, 0, 255)
    assert tuple(frame.pixels[6, 6]) == (0, 0, 255, 255)
    assert tuple(frame.pixels[14, 1]) == (255, 255, 255, 255)


def test_composite_layers_ignores_top(store):
    _paint_square(store, LayerName.TOP, (0, 0, 255, 255), (0, 0, 16, 16))
    pixels = composite_layers(store)
    assert np.all(pixels == 255)


def test_composite_without_mask_layer():
    store = LayerStore(8, 8, names=(LayerName.BACKGROUND, LayerName.FOREGROUND))
    frame = composite(store, EffectSettings())
    assert not frame.pixels.any()


def test_composite_effects_need_mask(store):
    plain = composite(store)
    assert composite(store, EffectSettings()) == plain
    _paint_square(store, LayerName.MASK, (0, 0, 0, 255), (6, 6, 10, 10))
    assert composite(store, EffectSettings()) != plain
    assert composite(store, None) == plain


def test_frame_quality(store):
    _paint_square(store, LayerName.MASK, (0, 0, 0, 255), (6, 6, 10, 10))
    frame = composite(store, EffectSettings(), Quality.FAST)
    assert frame.quality == Quality.FAST
    assert "fast" in repr(frame)
    assert frame.numpy().dtype == np.float32
    assert frame.topil().size == (16, 16)
