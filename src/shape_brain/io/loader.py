"""
Image loading: image files and arrays to RGBA pixel buffers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import matplotlib.image as mpimg
import numpy as np

from shape_brain.core.models import PixelBuffer


def _to_rgba_uint8(image: np.ndarray) -> np.ndarray:
    """Normalizes gray, RGB or RGBA arrays (uint8 or float in [0, 1])."""
    if image.ndim == 2:
        image = np.stack([image, image, image], axis=-1)
    elif image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Unsupported image shape {image.shape}")

    if np.issubdtype(image.dtype, np.floating):
        image = np.clip(np.rint(image * 255.0), 0, 255).astype(np.uint8)
    elif image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)

    if image.shape[2] == 3:
        alpha = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
        image = np.concatenate([image, alpha], axis=-1)

    return image


def pixel_buffer_from_array(image: np.ndarray) -> PixelBuffer:
    """Builds a PixelBuffer from a gray, RGB or RGBA array."""
    return PixelBuffer.from_array(_to_rgba_uint8(np.asarray(image)))


def load_image(path: Union[str, Path]) -> PixelBuffer:
    """
    Reads an image file into a PixelBuffer.

    Decoding goes through matplotlib (Pillow underneath); PNG floats and
    8-bit formats are both normalized to 0-255.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be decoded or has an unsupported layout
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")

    try:
        image = mpimg.imread(path)
    except (OSError, SyntaxError, ValueError) as e:
        # Pillow reports some corrupt headers as SyntaxError.
        raise ValueError(f"Could not decode image {path}: {e}") from e

    return pixel_buffer_from_array(image)


__all__ = ["load_image", "pixel_buffer_from_array"]
