"""
Binarization: RGBA pixels to a foreground/background grid.
"""

from __future__ import annotations

import numpy as np

from shape_brain.core.models import PixelBuffer


# Luminosity weights for R, G, B.
LUMINOSITY_WEIGHTS = (0.21, 0.72, 0.07)


class Binarizer:
    """Marks dark, opaque pixels as foreground."""

    def __init__(self, threshold: int = 128, alpha_cutoff: int = 128):
        self.threshold = threshold
        self.alpha_cutoff = alpha_cutoff

    @staticmethod
    def to_grayscale(rgba: np.ndarray) -> np.ndarray:
        """Luminosity of an ``(H, W, 4)`` array, as float64."""
        r = rgba[..., 0].astype(np.float64)
        g = rgba[..., 1].astype(np.float64)
        b = rgba[..., 2].astype(np.float64)
        wr, wg, wb = LUMINOSITY_WEIGHTS
        return wr * r + wg * g + wb * b

    def binarize(self, buffer: PixelBuffer) -> np.ndarray:
        """
        Returns a ``(height, width)`` boolean grid, True for foreground.

        A pixel is foreground when its gray level is strictly below the
        threshold and its alpha strictly above the cut-off.
        """
        rgba = buffer.to_array()
        gray = self.to_grayscale(rgba)
        return (gray < self.threshold) & (rgba[..., 3] > self.alpha_cutoff)


__all__ = ["Binarizer", "LUMINOSITY_WEIGHTS"]
