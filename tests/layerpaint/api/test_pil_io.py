import logging

import numpy as np
import pytest
from PIL import Image

from layerpaint.api import pil_io

logger = logging.getLogger(__name__)


@pytest.mark.parametrize("mode", ["L", "LA", "RGB", "RGBA", "P", "1"])
def test_frompil(mode):
    pixels = pil_io.frompil(Image.new(mode, (5, 3)))
    assert pixels.shape == (3, 5, 4)
    assert pixels.dtype == np.uint8


def test_topil(blue_pixels):
    image = pil_io.topil(blue_pixels)
    assert image.mode == "RGBA"
    assert image.size == (10, 10)


def test_encode_decode(blue_pixels):
    data = pil_io.encode(blue_pixels)
    assert data == pil_io.encode(blue_pixels)
    assert np.array_equal(pil_io.decode(data), blue_pixels)


def test_decode_sources(blue_pixels, tmp_path):
    path = tmp_path / "blue.png"
    pil_io.topil(blue_pixels).save(path)
    for ref in (str(path), path, pil_io.to_data_uri(blue_pixels)):
        assert np.array_equal(pil_io.decode(ref), blue_pixels)


@pytest.mark.parametrize(
    "data",
    [
        b"not an image",
        b"",
        "data:image/png,abc",
        "data:image/png;base64,@@@",
    ],
)
def test_decode_invalid(data):
    assert pil_io.decode(data) is None


def test_decode_missing_file(tmp_path):
    assert pil_io.decode(str(tmp_path / "missing.png")) is None


def test_load_pattern(pattern_file):
    tile = pil_io.load_pattern(pattern_file)
    assert tile.dtype == np.float32
    assert tile.shape == (8, 8, 4)
    assert tile[:, :, 2].min() == 1.0
