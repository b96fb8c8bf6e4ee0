"""
layerpaint: layered raster painting and compositing engine.

Brush stamps are rasterized from procedural or image pattern tiles and merged
into fixed-size RGBA layers. A mask layer gates foreground painting and drives
border effects (ripples, shadows, outline, stroke) that are derived when the
frame is composed, never stored.

Basic usage::

    from layerpaint import Engine, EffectSettings

    engine = Engine(200, 200, effects=EffectSettings())
    engine.paint(100, 100, 60, 'solid', 'foreground', is_mask_stroke=True)
    engine.paint(100, 100, 40, 'solid', 'foreground', color='#ff0000')
    engine.refresh().topil().save('frame.png')

Architecture:

- :py:mod:`layerpaint.api`: Engine facade, layers, mask gate, effect settings
- :py:mod:`layerpaint.composite`: Stamps, pattern tiles, blending and effects
"""

from layerpaint.api.effects import EffectSettings
from layerpaint.api.engine import Engine, LayerData
from layerpaint.version import __version__

__all__ = ["Engine", "EffectSettings", "LayerData", "__version__"]
