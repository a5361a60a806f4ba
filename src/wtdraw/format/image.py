"""Image decoding for the image-to-wave generator.

The generator itself only understands a row of ``FRAME_SIZE`` brightness
values in 0..255. This module produces that row from pixel data or from an
image file on disk.
"""

from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageOps

from wtdraw.types import FRAME_SIZE


def luminance_from_rgba(pixels: NDArray[np.integer] | NDArray[np.floating]) -> NDArray[np.float64]:
    """Grayscale average of the R, G and B channels of a pixel row.

    Args:
        pixels: Array of shape ``(width, 3)`` or ``(width, 4)``; any alpha
            channel is ignored. A flat RGBA byte row (``width * 4``) is
            accepted too.

    Returns:
        Brightness per pixel in 0..255
    """
    px = np.asarray(pixels, dtype=np.float64)
    if px.ndim == 1:
        if px.size % 4:
            raise ValueError(f"Flat pixel data must be RGBA, got {px.size} values")
        px = px.reshape(-1, 4)

    if px.ndim != 2 or px.shape[1] not in (3, 4):
        raise ValueError(f"Pixel data must have shape (width, 3|4), got {px.shape}")

    return px[:, :3].mean(axis=1)


def load_image_luminance(path: Path | str) -> NDArray[np.float64]:
    """Decode an image and collapse it to one brightness value per sample.

    The image is resampled to ``FRAME_SIZE x 1`` pixels, so each sample takes
    the brightness of one vertical slice of the picture.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(str(path))

    with Image.open(path) as im:
        im = ImageOps.exif_transpose(im)
        row = im.convert("RGB").resize((FRAME_SIZE, 1), Image.Resampling.BILINEAR)
        pixels = np.asarray(row, dtype=np.uint8).reshape(FRAME_SIZE, 3)

    return luminance_from_rgba(pixels)
