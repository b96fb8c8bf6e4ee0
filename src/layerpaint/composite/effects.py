"""
Border effects rendering.

Effects are derived from the mask layer, never stored. The mask alpha is
reduced to a binary silhouette, and every effect is a sequence of passes.
Each pass is an alpha field computed from the silhouette with an explicit
separable Gaussian blur (:py:func:`scipy.ndimage.gaussian_filter`) and/or a
morphological dilation (:py:mod:`skimage.morphology`), stencilled against
the silhouette, and tinted with the effect color.

Passes drawn under the foreground, back to front:

- **Ripples**: ``count`` blurred halos, blur ``i * gap + width`` for ``i``
  from ``count`` down to 1, alpha ``i / count``
- **Outer shadow**: one halo at ``blur``
- **Outline**: a blurred band at full width, then at half width
- **Stroke**: a blurred band at the configured width, then a hard 2 px band

Passes drawn over the foreground:

- **Inner shadow**: the inverted silhouette blurred at ``blur``, kept inside
  the silhouette

In fast quality ripples are skipped and every other effect is a single pass
at reduced opacity.

Example usage (internal)::

    from layerpaint.composite.effects import draw_mask_effects, silhouette

    shape = silhouette(mask_alpha)
    under, over = draw_mask_effects(shape, settings, Quality.FULL)
"""

import logging
import math
from typing import List, Tuple

import numpy as np
from scipy import ndimage
from skimage.morphology import dilation, disk

from layerpaint.composite.blend import tint
from layerpaint.composite.paint import parse_color
from layerpaint.constants import FAST_OPACITY, HARD_STROKE_WIDTH, Quality

logger = logging.getLogger(__name__)


def silhouette(mask_alpha: np.ndarray) -> np.ndarray:
    """Binary opaque silhouette of every pixel with any mask coverage."""
    return (mask_alpha > 0).astype(np.float32)


def blur(shape: np.ndarray, radius: float) -> np.ndarray:
    """Separable Gaussian blur; ``radius`` maps to sigma ``radius / 2``."""
    if radius <= 0:
        return shape.copy()
    return ndimage.gaussian_filter(shape, sigma=radius / 2.0, mode="constant")


def spread(shape: np.ndarray, width: float) -> np.ndarray:
    """Grow the silhouette by ``width`` pixels."""
    radius = int(math.ceil(width))
    if radius <= 0:
        return shape.copy()
    return dilation(shape, disk(radius))


def draw_ripples(shape, effect) -> List[np.ndarray]:
    outside = 1.0 - shape
    passes = []
    for i in range(effect.count, 0, -1):
        alpha = blur(shape, i * effect.gap + effect.width) * outside
        passes.append(alpha * (float(i) / effect.count))
    return passes


def draw_outer_shadow(shape, effect, quality) -> List[np.ndarray]:
    alpha = blur(shape, effect.blur) * (1.0 - shape)
    if quality == Quality.FAST:
        alpha = alpha * FAST_OPACITY
    return [alpha]


def draw_outline(shape, effect, quality) -> List[np.ndarray]:
    outside = 1.0 - shape
    if quality == Quality.FAST:
        band = spread(shape, effect.width) * outside
        return [band * FAST_OPACITY]
    return [
        blur(spread(shape, width), width / 2.0) * outside
        for width in (effect.width, effect.width / 2.0)
    ]


def draw_stroke(shape, effect, quality) -> List[np.ndarray]:
    outside = 1.0 - shape
    soft = blur(spread(shape, effect.width), effect.width / 2.0) * outside
    if quality == Quality.FAST:
        return [soft * FAST_OPACITY]
    hard = spread(shape, HARD_STROKE_WIDTH) * outside
    return [soft, hard]


def draw_inner_shadow(shape, effect, quality) -> List[np.ndarray]:
    alpha = blur(1.0 - shape, effect.blur) * shape
    if quality == Quality.FAST:
        alpha = alpha * FAST_OPACITY
    return [alpha]


def draw_mask_effects(
    shape: np.ndarray, settings, quality: Quality = Quality.FULL
) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """
    Render border effects from a silhouette.

    :param shape: Binary silhouette, float32 ``(height, width)``.
    :param settings: :py:class:`~layerpaint.api.effects.EffectSettings`.
    :param quality: Full or fast rendering.
    :return: Tuple of (under, over) lists of float32 RGBA sources, in drawing
        order. ``under`` goes below the foreground, ``over`` above it.
    """
    under: List[np.ndarray] = []
    over: List[np.ndarray] = []
    if settings is None or not settings.enabled or not shape.any():
        return under, over

    def _tinted(effect, alphas):
        color = parse_color(effect.color)
        return [tint(color, alpha) for alpha in alphas]

    effects = dict(settings)
    if "ripples" in effects and quality == Quality.FULL:
        under.extend(_tinted(effects["ripples"], draw_ripples(shape, effects["ripples"])))
    if "outer_shadow" in effects:
        effect = effects["outer_shadow"]
        under.extend(_tinted(effect, draw_outer_shadow(shape, effect, quality)))
    if "outline" in effects:
        effect = effects["outline"]
        under.extend(_tinted(effect, draw_outline(shape, effect, quality)))
    if "stroke" in effects:
        effect = effects["stroke"]
        under.extend(_tinted(effect, draw_stroke(shape, effect, quality)))
    if "inner_shadow" in effects:
        effect = effects["inner_shadow"]
        over.extend(_tinted(effect, draw_inner_shadow(shape, effect, quality)))

    logger.debug(
        "%s effects: %d passes under, %d over" % (quality.value, len(under), len(over))
    )
    return under, over
