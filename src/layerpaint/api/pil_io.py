"""
PIL IO module.

Conversions between layer buffers and encoded images. Layer buffers are
``uint8`` arrays of shape ``(height, width, 4)`` holding straight RGBA.
"""
import base64
import io
import logging
import os
from typing import Optional, Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def topil(pixels: np.ndarray) -> Image.Image:
    """Convert an RGBA buffer to PIL Image."""
    return Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8), "RGBA")


def frompil(image: Image.Image) -> np.ndarray:
    """Convert PIL Image of any mode to an RGBA buffer."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)


def encode(pixels: np.ndarray, format: str = "PNG") -> bytes:
    """Encode an RGBA buffer. PNG output is deterministic for equal input."""
    with io.BytesIO() as f:
        topil(pixels).save(f, format=format)
        return f.getvalue()


def decode(data: Union[bytes, str, os.PathLike]) -> Optional[np.ndarray]:
    """Decode an encoded image, file path or ``data:`` URI into a buffer.

    Returns None when the data cannot be decoded.
    """
    try:
        return frompil(open_image(data))
    except (OSError, ValueError) as e:
        logger.warning("Failed to decode image: %s" % e)
        return None


def open_image(ref: Union[bytes, str, os.PathLike]) -> Image.Image:
    """Open an image from raw bytes, a ``data:`` URI or a file path."""
    if isinstance(ref, (bytes, bytearray)):
        fp = io.BytesIO(ref)
    elif isinstance(ref, str) and ref.startswith("data:"):
        header, _, payload = ref.partition(",")
        if header.endswith(";base64"):
            fp = io.BytesIO(base64.b64decode(payload, validate=True))
        else:
            raise ValueError("Only base64 data URIs are supported: %s" % header)
    else:
        fp = ref
    image = Image.open(fp)
    image.load()
    return image


def load_pattern(ref: Union[str, os.PathLike]) -> np.ndarray:
    """Load a pattern image as a float32 RGBA tile in [0, 1]."""
    pixels = frompil(open_image(ref))
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise ValueError("Empty pattern image: %s" % (ref,))
    return pixels.astype(np.float32) / 255.0


def to_data_uri(pixels: np.ndarray) -> str:
    """Encode an RGBA buffer as a PNG ``data:`` URI."""
    return "data:image/png;base64," + base64.b64encode(encode(pixels)).decode("ascii")
