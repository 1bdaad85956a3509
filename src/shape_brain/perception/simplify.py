"""
Contour simplification (Ramer-Douglas-Peucker) and vertex counting.
"""

from __future__ import annotations

import math
from typing import List, Sequence

from shape_brain.core.models import Point


def perpendicular_distance(point: Point, start: Point, end: Point) -> float:
    """
    Distance from ``point`` to the segment ``[start, end]``.

    The projection is clamped to the segment; a degenerate segment falls back
    to the point-to-point distance.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    mag_sqr = dx * dx + dy * dy

    if mag_sqr == 0:
        return math.hypot(point.x - start.x, point.y - start.y)

    u = ((point.x - start.x) * dx + (point.y - start.y) * dy) / mag_sqr
    u = min(1.0, max(0.0, u))

    closest_x = start.x + u * dx
    closest_y = start.y + u * dy
    return math.hypot(point.x - closest_x, point.y - closest_y)


class ContourSimplifier:
    """Reduces a dense contour to its polygon vertices."""

    def __init__(self, epsilon: float = 2.0, closure_distance: float = 10.0):
        self.epsilon = epsilon
        self.closure_distance = closure_distance

    def simplify(self, points: Sequence[Point]) -> List[Point]:
        """
        Ramer-Douglas-Peucker simplification.

        A range is split at its interior point farthest from the chord when
        that distance exceeds epsilon (the first such point on ties), and
        collapsed to its endpoints otherwise. Ranges are processed from an
        explicit stack; kept points are returned in their original order.
        """
        if len(points) < 3:
            return list(points)

        keep = [False] * len(points)
        keep[0] = keep[-1] = True
        stack = [(0, len(points) - 1)]

        while stack:
            first, last = stack.pop()
            if last - first < 2:
                continue

            dmax = 0.0
            index = first
            for i in range(first + 1, last):
                d = perpendicular_distance(points[i], points[first], points[last])
                if d > dmax:
                    index = i
                    dmax = d

            if dmax > self.epsilon:
                keep[index] = True
                stack.append((index, last))
                stack.append((first, index))

        return [p for p, kept in zip(points, keep) if kept]

    def count_vertices(self, vertices: Sequence[Point]) -> int:
        """
        Polygon vertex count of a simplified closed contour.

        The loop closure often shows up as a last vertex next to the first;
        it is counted once.
        """
        count = len(vertices)
        if count > 2 and vertices[0].euclidean_distance(vertices[-1]) < self.closure_distance:
            count -= 1
        return count


__all__ = ["ContourSimplifier", "perpendicular_distance"]
