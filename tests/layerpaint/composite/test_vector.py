import logging

import numpy as np
import pytest

from layerpaint.composite import vector
from layerpaint.constants import ROUGH_SEGMENTS, ROUGHNESS_SCALE

logger = logging.getLogger(__name__)


def test_distance_field_pixel_centres():
    distance = vector.distance_field(4, 6, 2.0, 2.0)
    assert distance.shape == (4, 6)
    assert distance[1, 1] == pytest.approx(np.hypot(0.5, 0.5))
    assert distance[2, 2] == pytest.approx(np.hypot(0.5, 0.5))
    assert distance[1, 5] == pytest.approx(np.hypot(3.5, 0.5))


def test_draw_circle():
    distance = vector.distance_field(20, 20, 10.0, 10.0)
    alpha = vector.draw_circle(distance, 5.0)
    assert alpha[10, 10] == 1.0
    assert alpha[10, 13] == 1.0
    assert alpha[10, 16] == 0.0
    assert alpha[0, 0] == 0.0
    rim = (alpha > 0) & (alpha < 1)
    assert rim.any()
    assert np.all(distance[rim] > 4.5)


def test_draw_circle_opacity():
    distance = vector.distance_field(10, 10, 5.0, 5.0)
    alpha = vector.draw_circle(distance, 3.0, 0.25)
    assert alpha.max() == pytest.approx(0.25)


@pytest.mark.parametrize("inner, outer", [(2.0, 6.0), (0.0, 6.0)])
def test_draw_radial_gradient(inner, outer):
    distance = vector.distance_field(20, 20, 10.0, 10.0)
    alpha = vector.draw_radial_gradient(distance, inner, outer, 0.8)
    assert alpha[distance <= inner].tolist() == pytest.approx(
        [0.8] * int((distance <= inner).sum())
    )
    assert np.all(alpha[distance >= outer] == 0)
    ramp = alpha[(distance > inner) & (distance < outer)]
    assert np.all((ramp > 0) & (ramp < 0.8))


def test_draw_radial_gradient_degenerate():
    distance = vector.distance_field(10, 10, 5.0, 5.0)
    alpha = vector.draw_radial_gradient(distance, 3.0, 3.0, 0.5)
    assert set(np.unique(alpha).tolist()) == {0.0, 0.5}


def test_rough_outline_vertices():
    radius, roughness = 10.0, 4.0
    points = vector.rough_outline(0.0, 0.0, radius, roughness)
    assert points.shape == (ROUGH_SEGMENTS + 1, 2)
    radii = np.hypot(points[:, 0], points[:, 1])
    variation = roughness * ROUGHNESS_SCALE
    assert np.all(radii >= radius * (1 - variation / 2) - 1e-6)
    assert np.all(radii <= radius * (1 + variation / 2) + 1e-6)


def test_rough_outline_no_roughness_is_circle():
    points = vector.rough_outline(5.0, 5.0, 8.0, 0.0)
    radii = np.hypot(points[:, 0] - 5.0, points[:, 1] - 5.0)
    assert radii == pytest.approx(np.full(len(points), 8.0))


def test_rough_outline_seeded():
    a = vector.rough_outline(0, 0, 10, 1.0, rng=np.random.default_rng(42))
    b = vector.rough_outline(0, 0, 10, 1.0, rng=np.random.default_rng(42))
    c = vector.rough_outline(0, 0, 10, 1.0, rng=np.random.default_rng(7))
    assert np.array_equal(a, b)
    assert not np.array_equal(a, c)


def test_rough_outline_legacy_random_state():
    a = vector.rough_outline(0, 0, 10, 1.0, rng=np.random.RandomState(1))
    b = vector.rough_outline(0, 0, 10, 1.0, rng=np.random.RandomState(1))
    assert np.array_equal(a, b)


def test_rough_outline_smooth():
    rng = np.random.default_rng(0)
    vertices = vector.rough_outline(0, 0, 10, 2.0, rng=np.random.default_rng(0))
    points = vector.rough_outline(0, 0, 10, 2.0, smooth=True, rng=rng)
    curves = ROUGH_SEGMENTS - 1
    assert len(points) == 1 + curves * vector._CURVE_STEPS
    assert np.allclose(points[0], vertices[0])
    assert np.allclose(points[-1], vertices[-1])


def test_draw_polygon():
    points = np.array([(2.0, 2.0), (8.0, 2.0), (8.0, 8.0), (2.0, 8.0)])
    alpha = vector.draw_polygon(10, 10, points, 0.5)
    assert alpha.dtype == np.float32
    assert np.all(alpha[2:8, 2:8] == 0.5)
    assert alpha.sum() == pytest.approx(36 * 0.5)
