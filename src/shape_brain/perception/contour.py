"""
Boundary tracing (Moore-neighbor tracing).
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from shape_brain.core.models import Blob, Direction, Point
from shape_brain.perception.grid_utils import GridUtils


class ContourTracer:
    """
    Walks the outer boundary of a blob, clockwise, keeping the outside on
    the left.

    Each step scans the 8 directions clockwise, starting two steps
    counter-clockwise of the last move, and takes the first foreground
    neighbor.
    """

    DIRECTIONS = Direction.clockwise()

    def __init__(self, steps_per_pixel: int = 8):
        self.steps_per_pixel = steps_per_pixel

    def trace(self, blob: Blob, grid: np.ndarray) -> List[Point]:
        """
        Ordered boundary points of ``blob``, start point not repeated.

        The walk starts at the topmost, then leftmost pixel and stops when it
        comes back there. An isolated pixel yields a single point. The walk is
        capped at ``steps_per_pixel * area`` steps. A closed boundary never
        gets there, so the cap only cuts off a runaway walk.
        """
        start = min(blob.pixels, key=lambda p: (p.y, p.x))
        contour: List[Point] = []
        current = start
        direction = 0  # N
        max_steps = self.steps_per_pixel * blob.area

        while True:
            contour.append(current)
            if len(contour) > max_steps:
                break

            step = self._next_step(current, direction, grid)
            if step is None:
                break

            current, direction = step
            if current == start:
                break

        return contour

    def _next_step(self, current: Point, direction: int, grid: np.ndarray) -> Optional[tuple[Point, int]]:
        start_dir = (direction + 6) % 8
        for i in range(8):
            index = (start_dir + i) % 8
            candidate = current.step(self.DIRECTIONS[index])
            if GridUtils.is_foreground(grid, candidate):
                return candidate, index
        return None


__all__ = ["ContourTracer"]
