import logging

import numpy as np
import pytest

from layerpaint.api.effects import EffectSettings, Outline, Ripples, Shadow, Stroke
from layerpaint.composite import effects
from layerpaint.constants import FAST_OPACITY, Quality

logger = logging.getLogger(__name__)


@pytest.fixture
def shape():
    alpha = np.zeros((60, 60), dtype=np.uint8)
    alpha[20:40, 20:40] = 255
    return effects.silhouette(alpha)


def _only(**kwargs):
    base = dict(
        stroke=Stroke(enabled=False),
        outline=Outline(enabled=False),
        outer_shadow=Shadow(enabled=False),
        inner_shadow=Shadow(enabled=False),
        ripples=Ripples(enabled=False),
    )
    base.update(kwargs)
    return EffectSettings(**base)


def test_silhouette():
    alpha = np.array([[0, 1, 128, 255]], dtype=np.uint8)
    assert effects.silhouette(alpha).tolist() == [[0.0, 1.0, 1.0, 1.0]]


def test_blur(shape):
    assert np.array_equal(effects.blur(shape, 0), shape)
    blurred = effects.blur(shape, 6)
    assert blurred.shape == shape.shape
    assert blurred[30, 17] > 0
    assert blurred[30, 30] < 1
    assert blurred[0, 0] < 1e-3


def test_spread(shape):
    assert np.array_equal(effects.spread(shape, 0), shape)
    grown = effects.spread(shape, 2)
    assert grown[30, 18] == 1
    assert grown[30, 17] == 0
    assert np.all(grown[shape > 0] == 1)


@pytest.mark.parametrize("settings", [None, EffectSettings(enabled=False), _only()])
def test_no_effects(shape, settings):
    assert effects.draw_mask_effects(shape, settings) == ([], [])


def test_empty_silhouette():
    empty = np.zeros((10, 10), dtype=np.float32)
    assert effects.draw_mask_effects(empty, EffectSettings()) == ([], [])


@pytest.mark.parametrize(
    "quality, n_under, n_over",
    [
        (Quality.FULL, 9 + 1 + 2, 1),
        (Quality.FAST, 1 + 1, 1),
    ],
)
def test_default_pass_counts(shape, quality, n_under, n_over):
    under, over = effects.draw_mask_effects(shape, EffectSettings(), quality)
    assert len(under) == n_under
    assert len(over) == n_over


def test_outline_passes(shape):
    settings = _only(outline=Outline(enabled=True, width=3))
    under, over = effects.draw_mask_effects(shape, settings, Quality.FULL)
    assert len(under) == 2
    assert over == []
    under, _ = effects.draw_mask_effects(shape, settings, Quality.FAST)
    assert len(under) == 1


def test_outer_passes_stay_outside(shape):
    under, _ = effects.draw_mask_effects(shape, EffectSettings(), Quality.FULL)
    for source in under:
        assert source.shape == (60, 60, 4)
        assert np.all(source[:, :, 3][shape > 0] == 0)
        assert source[:, :, 3].max() > 0


def test_inner_shadow_stays_inside(shape):
    settings = _only(inner_shadow=Shadow(color="#ff0000", blur=4))
    _, over = effects.draw_mask_effects(shape, settings)
    (source,) = over
    assert np.all(source[:, :, 3][shape == 0] == 0)
    assert source[20, 30, 3] > source[30, 30, 3]
    assert np.all(source[:, :, 0] == 1.0)


def test_ripples_alpha_order(shape):
    ripples = Ripples(count=3, width=1, gap=1.5)
    passes = effects.draw_ripples(shape, ripples)
    assert len(passes) == 3
    peaks = [p.max() for p in passes]
    assert peaks[0] <= 1.0
    assert peaks[2] <= 1.0 / 3 + 1e-6


def test_ripples_skipped_in_fast_quality(shape):
    settings = _only(ripples=Ripples(count=3, width=1, gap=1.5))
    under, _ = effects.draw_mask_effects(shape, settings, Quality.FULL)
    assert len(under) == 3
    assert effects.draw_mask_effects(shape, settings, Quality.FAST) == ([], [])


def test_fast_opacity(shape):
    settings = _only(outer_shadow=Shadow(blur=6))
    (full,), _ = effects.draw_mask_effects(shape, settings, Quality.FULL)
    (fast,), _ = effects.draw_mask_effects(shape, settings, Quality.FAST)
    assert fast[:, :, 3] == pytest.approx(full[:, :, 3] * FAST_OPACITY, abs=1e-6)


def test_stroke_hard_band(shape):
    settings = _only(stroke=Stroke(width=0.5, color="#00ff00"))
    under, _ = effects.draw_mask_effects(shape, settings, Quality.FULL)
    soft, hard = under
    assert hard[30, 18, 3] == 1.0
    assert hard[30, 17, 3] == 0.0
    assert np.all(hard[:, :, 1] == 1.0)
