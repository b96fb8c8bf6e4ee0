"""
Engine module.

This module provides :py:class:`Engine`, the entry point for hosts. An engine
owns the layers of one document, the pattern tile cache, the mask gate and the
frame scheduler, and exposes the paint, erase and persistence operations.

Painting is forgiving: malformed brush parameters, unknown layers, invalid
colors and patterns that are not loaded yet are logged and ignored. Nothing
raises out of :py:meth:`Engine.paint` or :py:meth:`Engine.erase`.

Example usage::

    from layerpaint import Engine, EffectSettings

    engine = Engine(400, 300, effects=EffectSettings())

    # Record mask coverage, then ink the foreground inside it
    engine.paint(120, 100, 80, 'solid', 'foreground', is_mask_stroke=True)
    engine.paint(120, 100, 40, 'dots', 'foreground', color='#aa2200', softness=0)

    # While dragging, render cheaply; at rest, one full quality recompute
    engine.set_interactive(True)
    engine.paint(140, 110, 40, 'dots', 'foreground', color='#aa2200')
    engine.set_interactive(False)

    engine.frame.topil().save('frame.png')
    with open('snapshot.png', 'wb') as f:
        f.write(engine.export())
"""

import logging
import math
from typing import Any, Optional, Union

import numpy as np
from attrs import define, evolve
from PIL import Image

from layerpaint.api import pil_io
from layerpaint.api.effects import EffectSettings
from layerpaint.api.layers import LayerStore
from layerpaint.api.mask import MaskGate
from layerpaint.api.scheduler import FrameScheduler
from layerpaint.composite import utils
from layerpaint.composite.composite import Frame, composite, composite_layers
from layerpaint.composite.paint import PatternTileCache
from layerpaint.composite.stamp import (
    BrushSpec,
    build_eraser,
    build_stamp,
    stamp_bbox,
)
from layerpaint.constants import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BACKGROUND_PATTERN,
    BrushAction,
    BrushShape,
    LayerName,
    MaskAction,
    Operation,
    Quality,
    TileState,
)

logger = logging.getLogger(__name__)


@define(frozen=True)
class LayerData:
    """Authoritative pixels of a document, each layer encoded as PNG."""

    background: bytes
    foreground: bytes


class Engine(object):
    """
    Layered painting engine for one document.

    :param width: Canvas width in pixels.
    :param height: Canvas height in pixels.
    :param initial_image: Optional encoded image, file path or ``data:`` URI
        seeding the background. Defaults to a tiled paper texture.
    :param effects: :py:class:`~layerpaint.api.effects.EffectSettings`, a
        dict accepted by :py:meth:`EffectSettings.from_dict`, or None for no
        border effects.
    :param executor: Executor for pattern image loads. Defaults to a private
        single worker thread pool.
    :param scheduler: :py:class:`~layerpaint.api.scheduler.FrameScheduler`.
    :param queue_pending: Keep the latest paint per pattern that is still
        loading, and apply it once the pattern is ready. By default such
        paints are dropped.
    :param legacy_mask_subtract: Subtract mask strokes by repainting the
        background instead of removing coverage.
    :raises ValueError: On a non-positive canvas size or invalid effects.
    """

    def __init__(
        self,
        width: int,
        height: int,
        initial_image: Optional[Union[bytes, str]] = None,
        effects: Optional[Union[EffectSettings, dict]] = None,
        *,
        executor=None,
        scheduler: Optional[FrameScheduler] = None,
        queue_pending: bool = False,
        legacy_mask_subtract: bool = False,
    ):
        self._layers = LayerStore(width, height)
        self._mask = MaskGate(self._layers)
        self._tiles = PatternTileCache(executor=executor, on_ready=self._on_ready)
        self._scheduler = scheduler or FrameScheduler()
        self._effects = _to_settings(effects)
        self._interactive = False
        self._queue_pending = queue_pending
        self._legacy_mask_subtract = legacy_mask_subtract
        self._queued: dict[str, dict[str, Any]] = {}
        self._ready: list[str] = []

        self._init_background(initial_image)
        self._frame = composite(self._layers, self._effects, Quality.FULL)

    def _init_background(self, initial_image) -> None:
        background = self._layers[LayerName.BACKGROUND]
        if initial_image is not None:
            pixels = pil_io.decode(initial_image)
            if pixels is not None:
                background.set_pixels(pixels)
                return
            logger.warning("Falling back to the default background")
        tile = self._tiles.get_tile(
            DEFAULT_BACKGROUND_PATTERN, DEFAULT_BACKGROUND_COLOR
        )
        background.fill(tile)

    @property
    def width(self) -> int:
        return self._layers.width

    @property
    def height(self) -> int:
        return self._layers.height

    @property
    def size(self) -> tuple[int, int]:
        """(Width, Height) tuple."""
        return self.width, self.height

    @property
    def layers(self) -> LayerStore:
        """Layer buffers. Mutate only through paint, erase and import."""
        return self._layers

    @property
    def tiles(self) -> PatternTileCache:
        return self._tiles

    @property
    def scheduler(self) -> FrameScheduler:
        return self._scheduler

    @property
    def effects(self) -> Optional[EffectSettings]:
        """Border effect settings; assigning schedules a recompute."""
        return self._effects

    @effects.setter
    def effects(self, value: Optional[Union[EffectSettings, dict]]) -> None:
        self._effects = _to_settings(value)
        self._invalidate()

    @property
    def interactive(self) -> bool:
        """Whether the user is actively painting; frames render in fast quality."""
        return self._interactive

    def set_interactive(self, value: bool) -> None:
        """
        Switch between fast and full quality.

        Leaving interactive mode cancels any pending recompute and recomposes
        once in full quality.
        """
        self._interactive = bool(value)
        logger.debug("Interactive: %s" % self._interactive)
        if not self._interactive:
            self._scheduler.cancel()
            self._recompose()

    @property
    def quality(self) -> Quality:
        return Quality.FAST if self._interactive else Quality.FULL

    @property
    def frame(self) -> Frame:
        """Last composed frame."""
        return self._frame

    def refresh(self) -> Frame:
        """Collect pattern loads and run the pending recompute now."""
        self.poll()
        self._scheduler.tick()
        return self._frame

    def composite(self, quality: Optional[Quality] = None) -> Frame:
        """Compose a frame from the current layers without scheduling."""
        quality = Quality(quality) if quality is not None else self.quality
        return composite(self._layers, self._effects, quality)

    def topil(self) -> Image.Image:
        """Last composed frame as PIL Image."""
        return self._frame.topil()

    def numpy(self) -> np.ndarray:
        """Last composed frame as float32 RGBA array."""
        return self._frame.numpy()

    def paint(
        self,
        x: float,
        y: float,
        size: float,
        pattern_id: str,
        target_layer: str,
        opacity: float = 1.0,
        softness: float = 0.5,
        color: Optional[str] = None,
        shape: str = "circle",
        roughness: float = 0.5,
        smooth: bool = False,
        is_mask_stroke: bool = False,
        mask_action: Optional[str] = None,
        rng=None,
    ) -> None:
        """
        Apply one brush stamp centered at ``(x, y)``.

        Mask strokes (``is_mask_stroke=True``) ignore ``target_layer`` and add
        to or subtract from the mask according to ``mask_action``. Other
        stamps on the foreground land only where the mask has coverage;
        background and top are never gated.
        """
        self.poll()
        request = dict(
            x=x,
            y=y,
            size=size,
            pattern_id=pattern_id,
            target_layer=target_layer,
            opacity=opacity,
            softness=softness,
            color=color,
            shape=shape,
            roughness=roughness,
            smooth=smooth,
            is_mask_stroke=is_mask_stroke,
            mask_action=mask_action,
            rng=rng,
        )
        self._paint(request)

    def _paint(self, request: dict) -> None:
        x, y, size = request["x"], request["y"], request["size"]
        pattern_id, color = request["pattern_id"], request["color"]
        target_layer = request["target_layer"]
        is_mask_stroke = request["is_mask_stroke"]
        mask_action = request["mask_action"]
        if is_mask_stroke:
            mask = _lookup(MaskAction, mask_action or MaskAction.ADD)
            if mask is None:
                logger.debug("Unknown mask action %r" % (mask_action,))
                return
            action = (
                BrushAction.MASK_SUBTRACT
                if mask == MaskAction.SUBTRACT
                else BrushAction.MASK_ADD
            )
            target = LayerName.MASK
        else:
            action = BrushAction.PAINT
            target = _lookup(LayerName, target_layer)
            if target is None or target not in self._layers:
                logger.debug("Unknown layer %r" % (target_layer,))
                return

        spec = BrushSpec(
            size=size,
            pattern_id=pattern_id,
            shape=_lookup(BrushShape, request["shape"]),
            softness=request["softness"],
            roughness=request["roughness"],
            smooth=request["smooth"],
            opacity=request["opacity"],
            color=color,
            action=action,
            rng=request["rng"],
        )
        if not (_is_finite(x) and _is_finite(y) and spec.is_valid()):
            logger.debug("Ignoring invalid stamp at (%r, %r): %r" % (x, y, spec))
            return
        reach = size * 2 if self._reclaims(action) else size
        if not self._reaches_canvas(x, y, reach):
            logger.debug("Stamp at (%r, %r) misses the canvas" % (x, y))
            return

        tile = self._tiles.get_tile(pattern_id, color)
        if tile is None:
            self._defer(pattern_id, color, request)
            return

        if self._apply(x, y, spec, tile, target):
            self._invalidate()

    def _apply(self, x, y, spec: BrushSpec, tile, target: LayerName) -> bool:
        if self._reclaims(spec.action):
            return self._reclaim(x, y, spec, tile)
        stamp = build_stamp(x, y, spec, tile, viewport=self._layers.bbox)
        if stamp is None:
            return False
        if spec.action == BrushAction.MASK_ADD:
            return self._mask.add(stamp)
        if spec.action == BrushAction.MASK_SUBTRACT:
            return self._mask.subtract(stamp)
        if target == LayerName.FOREGROUND:
            return self._mask.paint_foreground(stamp)
        return self._layers.apply_stamp(target, stamp)

    def _reclaims(self, action: BrushAction) -> bool:
        return self._legacy_mask_subtract and action == BrushAction.MASK_SUBTRACT

    def _reclaim(self, x, y, spec: BrushSpec, tile) -> bool:
        paper = self._tiles.get_tile(
            DEFAULT_BACKGROUND_PATTERN, DEFAULT_BACKGROUND_COLOR
        )
        viewport = self._layers.bbox
        background = build_stamp(
            x, y, evolve(spec, size=spec.size * 2), paper, viewport=viewport
        )
        stamp = build_stamp(x, y, spec, tile, viewport=viewport)
        if background is None:
            return False
        if stamp is None:
            return self._layers.apply_stamp(LayerName.BACKGROUND, background)
        return self._mask.reclaim(background, stamp)

    def _reaches_canvas(self, x: float, y: float, size: float) -> bool:
        try:
            bbox = stamp_bbox(x, y, size)
        except OverflowError:
            return False
        return utils.intersect(bbox, self._layers.bbox) is not None

    def erase(
        self,
        x: float,
        y: float,
        size: float,
        softness: float = 0.5,
        shape: str = "circle",
        roughness: float = 0.5,
        smooth: bool = False,
        target_layer: str = "top",
        rng=None,
    ) -> None:
        """Remove content from ``target_layer`` under the brush footprint."""
        target = _lookup(LayerName, target_layer)
        if target is None or target not in self._layers:
            logger.debug("Unknown layer %r" % (target_layer,))
            return
        spec = BrushSpec(
            size=size,
            shape=_lookup(BrushShape, shape),
            softness=softness,
            roughness=roughness,
            smooth=smooth,
            action=BrushAction.ERASE,
            rng=rng,
        )
        if not (_is_finite(x) and _is_finite(y) and spec.is_valid()):
            logger.debug("Ignoring invalid eraser at (%r, %r): %r" % (x, y, spec))
            return
        stamp = build_eraser(x, y, spec, viewport=self._layers.bbox)
        if stamp is None:
            logger.debug("Eraser at (%r, %r) misses the canvas" % (x, y))
            return
        if self._layers.apply_stamp(target, stamp, Operation.DESTINATION_OUT):
            self._invalidate()

    def poll(self) -> None:
        """
        Collect finished pattern loads and apply paints queued on them.

        Hosts that queue pending paints should call this, or :py:meth:`refresh`,
        once per display refresh.
        """
        self._tiles.poll()
        for pattern_id in list(self._queued):
            if self._tiles.state(pattern_id) == TileState.FAILED:
                logger.debug("Pattern %s failed, dropping queued paint" % pattern_id)
                del self._queued[pattern_id]
        while self._ready:
            request = self._queued.pop(self._ready.pop(0), None)
            if request is not None:
                logger.debug("Applying queued paint on %s" % request["pattern_id"])
                self._paint(request)

    def _on_ready(self, pattern_id: str) -> None:
        if pattern_id in self._queued:
            self._ready.append(pattern_id)

    def _defer(self, pattern_id: str, color, request: dict) -> None:
        state = self._tiles.state(pattern_id, color)
        if state != TileState.PENDING:
            logger.debug("Pattern %s is %s, dropping paint" % (pattern_id, state.value))
            return
        if self._queue_pending:
            logger.debug("Queueing paint on pending pattern %s" % pattern_id)
            self._queued[pattern_id] = request
        else:
            logger.debug("Pattern %s is loading, dropping paint" % pattern_id)

    def export(self, format: str = "PNG") -> bytes:
        """
        Encode the flattened background and foreground.

        Mask, top and border effects are never part of the snapshot.
        """
        return pil_io.encode(composite_layers(self._layers), format=format)

    def import_(self, data: Union[bytes, str]) -> bool:
        """
        Restore a snapshot produced by :py:meth:`export`.

        The image becomes the background and the foreground is cleared; mask
        and top are left as they are. Undecodable data leaves every layer
        untouched.

        :return: True if the snapshot was applied.
        """
        pixels = pil_io.decode(data)
        if pixels is None:
            return False
        self._layers[LayerName.BACKGROUND].set_pixels(pixels)
        self._layers[LayerName.FOREGROUND].clear()
        self._invalidate()
        return True

    def get_layer_data(self) -> LayerData:
        """Encode background and foreground separately as PNG."""
        return LayerData(
            background=self._encode_layer(LayerName.BACKGROUND),
            foreground=self._encode_layer(LayerName.FOREGROUND),
        )

    def _encode_layer(self, name: LayerName) -> bytes:
        layer = self._layers.get(name)
        if layer is None:
            pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        else:
            pixels = layer.pixels
        return pil_io.encode(pixels)

    def close(self) -> None:
        """Cancel the pending recompute and stop the pattern loader."""
        self._scheduler.cancel()
        self._tiles.close()
        self._queued.clear()

    def __enter__(self) -> "Engine":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _invalidate(self) -> None:
        self._scheduler.request(self._recompose)

    def _recompose(self) -> None:
        self._frame = composite(self._layers, self._effects, self.quality)

    def __repr__(self) -> str:
        return "%s(size=%dx%d quality=%s)" % (
            self.__class__.__name__,
            self.width,
            self.height,
            self.quality.value,
        )


def _to_settings(value) -> Optional[EffectSettings]:
    if value is None or isinstance(value, EffectSettings):
        return value
    if isinstance(value, dict):
        return EffectSettings.from_dict(value)
    raise ValueError("Invalid effect settings: %r" % (value,))


def _lookup(kls, value):
    try:
        return kls(value)
    except (TypeError, ValueError):
        return None


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False
