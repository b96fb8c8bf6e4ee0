"""
Composite module for stamp rendering and layer blending.

Key modules:

- :py:mod:`layerpaint.composite.composite`: Frame composition
- :py:mod:`layerpaint.composite.blend`: Porter-Duff operators
- :py:mod:`layerpaint.composite.effects`: Border effects from the mask
- :py:mod:`layerpaint.composite.stamp`: Brush stamps and footprints
- :py:mod:`layerpaint.composite.vector`: Footprint rasterization
- :py:mod:`layerpaint.composite.paint`: Pattern tiles and fills

Layers are straight RGBA ``uint8`` buffers; compositing happens on float32
arrays in [0, 1] and is rounded back once per frame.
"""

from layerpaint.composite.composite import Frame, composite, composite_layers

__all__ = [
    "Frame",
    "composite",
    "composite_layers",
]
