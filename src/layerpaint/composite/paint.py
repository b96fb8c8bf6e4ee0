"""Pattern tiles and pattern fills for brush stamps."""

import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Tuple

import numpy as np

from layerpaint.api import pil_io
from layerpaint.composite import utils
from layerpaint.constants import (
    DEFAULT_BRUSH_COLOR,
    NOISE_DOTS,
    PROCEDURAL_PATTERNS,
    TILE_SIZE,
    TileState,
)
from layerpaint.registry import new_registry

logger = logging.getLogger(__name__)

GENERATORS, register = new_registry(attribute="pattern")

_HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def parse_color(value) -> Optional[Tuple[float, float, float, float]]:
    """Return an RGBA tuple in [0, 1] from a CSS hex color, or None.

    Example::

        >>> parse_color('#ff000080')
        (1.0, 0.0, 0.0, 0.5019607843137255)
    """
    if not isinstance(value, str):
        return None
    match = _HEX_COLOR.match(value.strip())
    if not match:
        return None
    digits = match.group(1)
    if len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits)
    if len(digits) == 6:
        digits += "ff"
    return tuple(int(digits[i : i + 2], 16) / 255.0 for i in range(0, 8, 2))  # type: ignore[return-value]


def _pixel_centers(size: int) -> Tuple[np.ndarray, np.ndarray]:
    Y, X = np.mgrid[0:size, 0:size].astype(np.float32)
    return X + 0.5, Y + 0.5


def _fill(size: int, rgba, coverage) -> np.ndarray:
    tile = np.zeros((size, size, 4), dtype=np.float32)
    tile[:, :, :3] = rgba[:3]
    tile[:, :, 3] = utils.clip(coverage) * rgba[3]
    return tile


@register("solid")
def draw_solid(size: int, rgba) -> np.ndarray:
    return _fill(size, rgba, np.ones((size, size), dtype=np.float32))


@register("dots")
def draw_dots(size: int, rgba) -> np.ndarray:
    """Dots of radius 3 on a 12 px grid, offset by 6 px."""
    X, Y = _pixel_centers(size)
    coverage = np.zeros((size, size), dtype=np.float32)
    for cx in range(6, size, 12):
        for cy in range(6, size, 12):
            distance = np.hypot(X - cx, Y - cy)
            coverage = np.maximum(coverage, 3.0 - distance + 0.5)
    return _fill(size, rgba, coverage)


@register("stripes")
def draw_stripes(size: int, rgba) -> np.ndarray:
    """Diagonal 3 px lines every 8 px, running down and to the right."""
    X, Y = _pixel_centers(size)
    # Distance to the nearest line x - y = 8k, measured across the line.
    offset = np.mod(X - Y, 8.0)
    distance = np.minimum(offset, 8.0 - offset) / np.sqrt(2.0)
    return _fill(size, rgba, 1.5 - distance + 0.5)


@register("noise")
def draw_noise(size: int, rgba) -> np.ndarray:
    """Scattered single pixels of random opacity.

    Placement is intentionally unseeded: two noise tiles of the same color are
    not expected to be identical.
    """
    rng = np.random.default_rng()
    coverage = np.zeros((size, size), dtype=np.float32)
    cols = rng.integers(0, size, NOISE_DOTS)
    rows = rng.integers(0, size, NOISE_DOTS)
    alphas = 0.3 + rng.random(NOISE_DOTS) * 0.7
    for row, col, alpha in zip(rows, cols, alphas):
        coverage[row, col] = utils.union(coverage[row, col], alpha)
    return _fill(size, rgba, coverage)


@register("paper")
def draw_paper(size: int, rgba) -> np.ndarray:
    """Opaque base color with a faint, fixed grain."""
    rng = np.random.RandomState(size)
    grain = rng.uniform(-0.04, 0.04, (size, size, 1)).astype(np.float32)
    tile = _fill(size, rgba, np.ones((size, size), dtype=np.float32))
    tile[:, :, :3] = utils.clip(tile[:, :, :3] + grain)
    return tile


def is_procedural(pattern_id: str) -> bool:
    """Whether ``pattern_id`` names a generated pattern rather than an image."""
    return pattern_id in PROCEDURAL_PATTERNS


def draw_pattern_fill(
    viewport: Tuple[int, int, int, int], tile: np.ndarray
) -> np.ndarray:
    """
    Fill the viewport with a repeating tile.

    The repeat phase is locked to world coordinates: the pixel at world
    ``(x, y)`` always samples ``tile[y % height, x % width]``, so fills of
    neighbouring viewports join without seams.
    """
    left, top, right, bottom = viewport
    rows = np.arange(top, bottom) % tile.shape[0]
    cols = np.arange(left, right) % tile.shape[1]
    return tile[rows[:, None], cols[None, :]]


class PatternTileCache(object):
    """Resolve pattern identifiers to reusable tiles.

    Procedural patterns are synthesized on first request per color. Any other
    identifier names an image (a file path or a ``data:`` URI) which is loaded
    once on a background executor. Until the load completes :py:meth:`get_tile`
    returns None and the caller is expected to try again later; completed loads
    are collected on the caller's thread by :py:meth:`poll`.

    Example::

        cache = PatternTileCache()
        tile = cache.get_tile('dots', '#336699')
        cache.get_tile('textures/grass.png')  # None, loading
    """

    def __init__(
        self,
        executor=None,
        loader: Optional[Callable[[str], np.ndarray]] = None,
        on_ready: Optional[Callable[[str], None]] = None,
        tile_size: int = TILE_SIZE,
    ):
        self._tiles: dict = {}
        self._pending: dict = {}
        self._failed: set = set()
        self._executor = executor
        self._owns_executor = executor is None
        self._closed = False
        self._loader = loader or pil_io.load_pattern
        self._tile_size = tile_size
        self.on_ready = on_ready

    def get_tile(self, pattern_id: str, color: Optional[str] = None):
        """Return the tile for ``pattern_id``, or None if it is not ready."""
        self.poll()
        if is_procedural(pattern_id):
            rgba = parse_color(color or DEFAULT_BRUSH_COLOR)
            if rgba is None:
                logger.debug("Invalid pattern color: %r" % (color,))
                return None
            key = (pattern_id, rgba)
            tile = self._tiles.get(key)
            if tile is None:
                tile = GENERATORS[pattern_id](self._tile_size, rgba)
                self._tiles[key] = tile
            return tile

        tile = self._tiles.get(pattern_id)
        if tile is not None:
            return tile
        if self._closed:
            logger.debug("Cache closed, not loading pattern %s" % pattern_id)
        elif pattern_id not in self._failed and pattern_id not in self._pending:
            self._submit(pattern_id)
        return None

    def state(self, pattern_id: str, color: Optional[str] = None) -> TileState:
        if is_procedural(pattern_id):
            key = (pattern_id, parse_color(color or DEFAULT_BRUSH_COLOR))
            return TileState.READY if key in self._tiles else TileState.MISSING
        if pattern_id in self._tiles:
            return TileState.READY
        if pattern_id in self._pending:
            return TileState.PENDING
        if pattern_id in self._failed:
            return TileState.FAILED
        return TileState.MISSING

    def poll(self) -> None:
        """Collect finished image loads."""
        for pattern_id, future in list(self._pending.items()):
            if not future.done():
                continue
            del self._pending[pattern_id]
            try:
                tile = future.result()
            except (OSError, ValueError) as e:
                logger.warning("Failed to load pattern %s: %s" % (pattern_id, e))
                self._failed.add(pattern_id)
                continue
            logger.debug("Pattern loaded: %s %s" % (pattern_id, tile.shape))
            self._tiles[pattern_id] = tile
            if self.on_ready is not None:
                self.on_ready(pattern_id)

    def forget(self, pattern_id: str) -> None:
        """Drop any cached or failed state so the next request reloads."""
        self._failed.discard(pattern_id)
        self._tiles.pop(pattern_id, None)
        for key in [k for k in self._tiles if isinstance(k, tuple) and k[0] == pattern_id]:
            del self._tiles[key]

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop the loader; image patterns requested afterwards never load."""
        self._closed = True
        for future in self._pending.values():
            future.cancel()
        self._pending.clear()
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def _submit(self, pattern_id: str) -> Future:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="layerpaint-loader"
            )
        logger.debug("Loading pattern %s" % pattern_id)
        future = self._executor.submit(self._loader, pattern_id)
        self._pending[pattern_id] = future
        return future

    def __repr__(self) -> str:
        return "%s(tiles=%d pending=%d failed=%d)" % (
            self.__class__.__name__,
            len(self._tiles),
            len(self._pending),
            len(self._failed),
        )
