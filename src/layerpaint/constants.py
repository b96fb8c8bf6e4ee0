"""
Various constants for layerpaint
"""
from enum import Enum


class LayerName(str, Enum):
    """
    Layer names.

    Layers are stacked in declaration order except the mask, which is never
    drawn directly and only gates the foreground and drives border effects.
    """
    BACKGROUND = 'background'
    FOREGROUND = 'foreground'
    TOP = 'top'
    MASK = 'mask'


class BrushShape(str, Enum):
    """
    Brush footprint shapes.
    """
    CIRCLE = 'circle'
    ROUGH = 'rough'


class BrushAction(str, Enum):
    """
    What a stamp does to its target.
    """
    PAINT = 'paint'
    ERASE = 'erase'
    MASK_ADD = 'mask-add'
    MASK_SUBTRACT = 'mask-subtract'


class MaskAction(str, Enum):
    """
    Mask stroke actions.
    """
    ADD = 'add'
    SUBTRACT = 'subtract'


class Operation(str, Enum):
    """
    Porter-Duff operators used when merging a stamp into a layer.
    """
    SOURCE_OVER = 'source-over'
    DESTINATION_OUT = 'destination-out'


class Quality(str, Enum):
    """
    Compositing quality.

    FULL is used at rest, FAST while the user is actively dragging.
    """
    FULL = 'full'
    FAST = 'fast'


class TileState(str, Enum):
    """
    Pattern tile cache states.
    """
    MISSING = 'missing'
    PENDING = 'pending'
    READY = 'ready'
    FAILED = 'failed'


#: Side of procedurally generated pattern tiles in pixels.
TILE_SIZE = 24

#: Number of dots scattered over a ``noise`` tile.
NOISE_DOTS = 150

#: Rough polygons have ``ROUGH_SEGMENTS + 1`` vertices, the last one closing
#: the outline at angle 2π.
ROUGH_SEGMENTS = 20

#: Vertex radius jitter per unit of roughness, as a fraction of the radius.
ROUGHNESS_SCALE = 0.05

#: Opacity multiplier for the single collapsed effect pass in fast quality.
FAST_OPACITY = 0.5

#: Width of the fixed hard pass drawn after the configured stroke.
HARD_STROKE_WIDTH = 2

#: Default background fill used when no initial image is provided.
DEFAULT_BACKGROUND_PATTERN = 'paper'
DEFAULT_BACKGROUND_COLOR = '#d9cba3'

#: Default color for procedural brushes when none is supplied.
DEFAULT_BRUSH_COLOR = '#000000'

#: Generated pattern names; any other pattern id names an image.
PROCEDURAL_PATTERNS = ('solid', 'dots', 'stripes', 'noise', 'paper')
