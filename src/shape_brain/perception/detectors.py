"""
Shape classification from a traced contour and its simplified polygon.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from shape_brain.core.config import DetectionConfig
from shape_brain.core.models import Blob, Centroid, DetectedShape, Point, ShapeType


class StarDetector:
    """Radial test separating a 5-point star from other 10-vertex outlines."""

    @staticmethod
    def radius_ratio(vertices: Sequence[Point], center: Centroid) -> float:
        """Mean distance of the 5 closest vertices over that of the 5 farthest."""
        distances = sorted(v.euclidean_distance(center) for v in vertices)
        inner = sum(distances[:5]) / 5
        outer = sum(distances[-5:]) / 5
        if outer == 0:
            return 1.0
        return inner / outer

    @staticmethod
    def is_star(vertices: Sequence[Point], center: Centroid, max_ratio: float = 0.7) -> bool:
        if len(vertices) < 10:
            return False
        return StarDetector.radius_ratio(vertices, center) < max_ratio


class ShapeClassifier:
    """
    Assigns a shape type and a confidence to a blob.

    Rules, first match wins:
        circularity above threshold -> circle (confidence = circularity)
        3 vertices                  -> triangle (0.9)
        4 vertices                  -> rectangle (0.9), squares included
        5 vertices                  -> pentagon (0.85)
        10 vertices and star test   -> star (0.9)
    """

    VERTEX_RULES = {
        3: (ShapeType.TRIANGLE, 0.9),
        4: (ShapeType.RECTANGLE, 0.9),
        5: (ShapeType.PENTAGON, 0.85),
    }
    STAR_VERTICES = 10
    STAR_CONFIDENCE = 0.9

    def __init__(self, config: Optional[DetectionConfig] = None):
        self.config = config or DetectionConfig()

    @staticmethod
    def perimeter(contour: Sequence[Point]) -> float:
        """Length of the closed polyline through the contour points."""
        total = 0.0
        n = len(contour)
        for i in range(n):
            a = contour[i]
            b = contour[(i + 1) % n]
            total += math.hypot(a.x - b.x, a.y - b.y)
        return total

    @staticmethod
    def circularity(area: float, perimeter: float) -> float:
        """Polsby-Popper score, 1.0 for a perfect circle."""
        if perimeter == 0:
            return 0.0
        return 4 * math.pi * area / (perimeter * perimeter)

    def match(
        self,
        circularity: float,
        vertex_count: int,
        vertices: Sequence[Point],
        center: Centroid,
    ) -> Optional[Tuple[ShapeType, float]]:
        """Decision rules only; returns the type and unclamped confidence."""
        if circularity > self.config.circularity_threshold:
            return ShapeType.CIRCLE, circularity

        if vertex_count in self.VERTEX_RULES:
            return self.VERTEX_RULES[vertex_count]

        if vertex_count == self.STAR_VERTICES and StarDetector.is_star(vertices, center, self.config.star_ratio):
            return ShapeType.STAR, self.STAR_CONFIDENCE

        return None

    def clamp_confidence(self, confidence: float) -> float:
        return min(self.config.max_confidence, max(self.config.min_confidence, confidence))

    def classify(
        self,
        contour: Sequence[Point],
        blob: Blob,
        vertices: Sequence[Point],
        vertex_count: int,
    ) -> Optional[DetectedShape]:
        """
        Classify a blob.

        Args:
            contour: Traced boundary, used for the perimeter
            blob: Source blob, for the pixel area and the centroid
            vertices: Simplified polygon, used by the star test
            vertex_count: Polygon vertex count after closed-loop correction

        Returns:
            The detection, or None when no rule matches
        """
        circularity = self.circularity(blob.area, self.perimeter(contour))
        matched = self.match(circularity, vertex_count, vertices, blob.center)
        if matched is None:
            return None

        shape_type, confidence = matched
        return DetectedShape(
            shape_type=shape_type,
            confidence=self.clamp_confidence(confidence),
            bounding_box=blob.bounding_box,
            center=blob.center,
            area=blob.area,
        )


__all__ = ["StarDetector", "ShapeClassifier"]
