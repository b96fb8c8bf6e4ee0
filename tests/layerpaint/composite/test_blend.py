import logging

import numpy as np
import pytest

from layerpaint.composite import utils
from layerpaint.composite.blend import OPERATIONS, destination_out, source_over, tint
from layerpaint.constants import Operation

logger = logging.getLogger(__name__)


def _pixel(r, g, b, a):
    return np.array([[[r, g, b, a]]], dtype=np.float32)


@pytest.mark.parametrize(
    "backdrop, source, expected",
    [
        ((0, 0, 1, 1), (1, 0, 0, 1), (1, 0, 0, 1)),
        ((0, 0, 1, 1), (1, 0, 0, 0), (0, 0, 1, 1)),
        ((0, 0, 0, 0), (1, 0, 0, 0.5), (1, 0, 0, 0.5)),
        ((0, 0, 1, 1), (1, 0, 0, 0.5), (0.5, 0, 0.5, 1)),
        ((0, 0, 1, 0.5), (1, 0, 0, 0.5), (2 / 3.0, 0, 1 / 3.0, 0.75)),
        ((0, 0, 0, 0), (0, 0, 0, 0), (0, 0, 0, 0)),
    ],
)
def test_source_over(backdrop, source, expected):
    result = source_over(_pixel(*backdrop), _pixel(*source))
    assert result.shape == (1, 1, 4)
    assert result[0, 0] == pytest.approx(np.array(expected), abs=1e-6)


def test_destination_out():
    result = destination_out(_pixel(0.2, 0.4, 0.6, 0.8), _pixel(1, 1, 1, 0.5))
    assert result[0, 0] == pytest.approx(np.array([0.2, 0.4, 0.6, 0.4]))


def test_operations():
    assert OPERATIONS[Operation.SOURCE_OVER] is source_over
    assert OPERATIONS[Operation.DESTINATION_OUT] is destination_out


def test_tint():
    alpha = np.array([[0.0, 0.5], [1.0, 2.0]], dtype=np.float32)
    source = tint((1.0, 0.0, 0.0, 0.5), alpha)
    assert source.shape == (2, 2, 4)
    assert np.all(source[:, :, 0] == 1.0)
    assert source[:, :, 3] == pytest.approx(np.array([[0, 0.25], [0.5, 0.5]]))


def test_divide():
    result = utils.divide(np.array([1.0, 0.0, 1.0]), np.array([2.0, 0.0, 0.0]))
    assert result.tolist() == [0.5, 0.0, 0.0]


@pytest.mark.parametrize(
    "viewport, bbox, expected",
    [
        ((0, 0, 10, 10), (20, 20, 30, 30), None),
        ((0, 0, 10, 10), (10, 0, 20, 10), None),
        (
            (0, 0, 10, 10),
            (-2, 5, 4, 15),
            ((slice(5, 10), slice(0, 4)), (slice(0, 5), slice(2, 6))),
        ),
        (
            (0, 0, 10, 10),
            (2, 3, 5, 7),
            ((slice(3, 7), slice(2, 5)), (slice(0, 4), slice(0, 3))),
        ),
    ],
)
def test_region(viewport, bbox, expected):
    assert utils.region(viewport, bbox) == expected


def test_uint8_conversion():
    pixels = np.arange(256, dtype=np.uint8).reshape(16, 16, 1)
    assert np.array_equal(utils.to_uint8(utils.to_float(pixels)), pixels)
