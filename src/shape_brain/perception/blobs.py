"""
Connected-component extraction.
"""

from __future__ import annotations

from typing import List

import numpy as np

from shape_brain.core.models import Blob
from shape_brain.perception.grid_utils import GridUtils


class BlobExtractor:
    """Groups touching foreground pixels (8-connectivity) into blobs."""

    def extract(self, grid: np.ndarray) -> List[Blob]:
        """One Blob per connected component, ordered by label."""
        _, components = GridUtils.label_components(grid)
        return [Blob.from_pixels(label, pixels) for label, pixels in enumerate(components, start=1)]

    def label(self, grid: np.ndarray) -> np.ndarray:
        """Label grid only (0 for background)."""
        labels, _ = GridUtils.label_components(grid)
        return labels


__all__ = ["BlobExtractor"]
