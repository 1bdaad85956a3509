"""
Grid helpers for the perception pipeline.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, List, Tuple

import numpy as np

from shape_brain.core.models import Point


# 8-neighborhood offsets in scan order: row above, same row, row below.
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)


class GridUtils:
    """Utility functions over ``(height, width)`` boolean grids."""

    @staticmethod
    def in_bounds(x: int, y: int, grid_shape: Tuple[int, int]) -> bool:
        height, width = grid_shape
        return 0 <= x < width and 0 <= y < height

    @staticmethod
    def is_foreground(grid: np.ndarray, point: Point) -> bool:
        """False outside the grid."""
        return GridUtils.in_bounds(point.x, point.y, grid.shape) and bool(grid[point.y, point.x])

    @staticmethod
    def label_components(grid: np.ndarray) -> Tuple[np.ndarray, List[List[Point]]]:
        """
        Labels the 8-connected foreground components of a grid.

        Raster scan; every unlabeled foreground pixel seeds a breadth-first
        traversal. Labels start at 1 in order of discovery, 0 is background.

        Returns:
            The ``(height, width)`` label grid and, per label, its pixels in
            traversal order (``components[label - 1]``).
        """
        height, width = grid.shape
        foreground = grid.ravel().tolist()
        labels = [0] * (height * width)
        components: List[List[Point]] = []

        # Seeds come in row-major order, i.e. top-to-bottom, left-to-right.
        for seed in np.flatnonzero(grid).tolist():
            if labels[seed]:
                continue

            current_label = len(components) + 1
            component: List[Point] = []
            labels[seed] = current_label
            queue = deque([seed])

            while queue:
                index = queue.popleft()
                y, x = divmod(index, width)
                component.append(Point(x, y))

                for dx, dy in NEIGHBOR_OFFSETS:
                    nx, ny = x + dx, y + dy
                    if 0 <= nx < width and 0 <= ny < height:
                        neighbor = ny * width + nx
                        if foreground[neighbor] and not labels[neighbor]:
                            labels[neighbor] = current_label
                            queue.append(neighbor)

            components.append(component)

        label_grid = np.array(labels, dtype=np.int32).reshape(height, width)
        return label_grid, components

    @staticmethod
    def pixels_to_grid(pixels: Iterable[Point], grid_shape: Tuple[int, int]) -> np.ndarray:
        """Boolean grid with the given pixels set."""
        grid = np.zeros(grid_shape, dtype=bool)
        for p in pixels:
            grid[p.y, p.x] = True
        return grid


__all__ = ["GridUtils", "NEIGHBOR_OFFSETS"]
