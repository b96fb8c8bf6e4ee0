"""
High-level API for painting documents.

The main entry point is :py:class:`~layerpaint.api.engine.Engine`, which owns
the layer buffers of one document and exposes painting, erasing, frame
composition and snapshot persistence.

Key modules:

- :py:mod:`layerpaint.api.engine`: The engine facade
- :py:mod:`layerpaint.api.layers`: Fixed-size layer buffers
- :py:mod:`layerpaint.api.mask`: Mask coverage and foreground gating
- :py:mod:`layerpaint.api.effects`: Border effect settings
- :py:mod:`layerpaint.api.scheduler`: Coalescing frame recomputation
- :py:mod:`layerpaint.api.pil_io`: Conversion from and to PIL images
"""
