"""
Core data structures for shape detection.

Shared types (pixel buffers, points, bounding boxes, blobs, detections) used by
the perception pipeline, the visualizer, the batch runner and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

import numpy as np


class Direction(Enum):
    """The 8 compass directions, in clockwise order starting at north."""

    NORTH = (0, -1)
    NORTHEAST = (1, -1)
    EAST = (1, 0)
    SOUTHEAST = (1, 1)
    SOUTH = (0, 1)
    SOUTHWEST = (-1, 1)
    WEST = (-1, 0)
    NORTHWEST = (-1, -1)

    @classmethod
    def clockwise(cls) -> list["Direction"]:
        """Directions indexed 0-7 (N, NE, E, SE, S, SW, W, NW)."""
        return list(cls)


@dataclass(frozen=True)
class Point:
    """2D point in pixel coordinates (y grows downward)."""

    x: int
    y: int

    def step(self, direction: Direction) -> "Point":
        dx, dy = direction.value
        return Point(self.x + dx, self.y + dy)

    def euclidean_distance(self, other: "Point | Centroid") -> float:
        return float(np.hypot(self.x - other.x, self.y - other.y))

    def is_adjacent(self, other: "Point") -> bool:
        """True for the 8 neighbors of this point (not the point itself)."""
        return self != other and abs(self.x - other.x) <= 1 and abs(self.y - other.y) <= 1


@dataclass(frozen=True)
class Centroid:
    """Sub-pixel position, the mean of a set of pixel coordinates."""

    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": float(self.x), "y": float(self.y)}


@dataclass(frozen=True)
class BoundingBox:
    """Inclusive axis-aligned bounding box."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    def translated(self, dx: int, dy: int) -> "BoundingBox":
        return BoundingBox(self.min_x + dx, self.min_y + dy, self.max_x + dx, self.max_y + dy)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.min_x, "y": self.min_y, "width": self.width, "height": self.height}


class ShapeType(str, Enum):
    """Shape tags reported by the classifier."""

    CIRCLE = "circle"
    TRIANGLE = "triangle"
    RECTANGLE = "rectangle"
    PENTAGON = "pentagon"
    STAR = "star"


@dataclass(frozen=True)
class PixelBuffer:
    """
    Immutable RGBA image, row-major, 4 bytes per pixel.

    This is the only input of the detection pipeline. Construction checks the
    width/height/byte-length contract so the pipeline never has to.
    """

    width: int
    height: int
    data: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel data has {len(self.data)} bytes, expected {expected} "
                f"for a {self.width}x{self.height} RGBA image"
            )

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an ``(height, width, 4)`` uint8 array."""
        if rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {rgba.shape}")
        height, width = rgba.shape[:2]
        data = np.ascontiguousarray(rgba, dtype=np.uint8).tobytes()
        return cls(width=width, height=height, data=data)

    def to_array(self) -> np.ndarray:
        """Read-only ``(height, width, 4)`` view of the pixel data."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4)


@dataclass(frozen=True)
class Blob:
    """
    Connected set of foreground pixels and its metrics.

    ``pixels`` keeps the traversal order of the extractor; ``area`` is always
    ``len(pixels)``.
    """

    label: int
    pixels: Tuple[Point, ...] = field(repr=False)
    area: int
    bounding_box: BoundingBox
    center: Centroid

    @classmethod
    def from_pixels(cls, label: int, pixels: List[Point]) -> "Blob":
        if not pixels:
            raise ValueError("A blob needs at least one pixel")

        xs = [p.x for p in pixels]
        ys = [p.y for p in pixels]
        area = len(pixels)

        return cls(
            label=label,
            pixels=tuple(pixels),
            area=area,
            bounding_box=BoundingBox(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys)),
            center=Centroid(sum(xs) / area, sum(ys) / area),
        )


@dataclass(frozen=True)
class DetectedShape:
    """A classified blob."""

    shape_type: ShapeType
    confidence: float
    bounding_box: BoundingBox
    center: Centroid
    area: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.shape_type.value,
            "confidence": float(self.confidence),
            "boundingBox": self.bounding_box.to_dict(),
            "center": self.center.to_dict(),
            "area": float(self.area),
        }


@dataclass(frozen=True)
class DetectionResult:
    """Shapes found in one image, with timing and the source dimensions."""

    shapes: Tuple[DetectedShape, ...]
    processing_time: float  # milliseconds
    image_width: int
    image_height: int

    def count_by_type(self) -> Dict[str, int]:
        counts = {shape_type.value: 0 for shape_type in ShapeType}
        for shape in self.shapes:
            counts[shape.shape_type.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shapes": [shape.to_dict() for shape in self.shapes],
            "processingTime": float(self.processing_time),
            "imageWidth": self.image_width,
            "imageHeight": self.image_height,
        }


__all__ = [
    "Direction",
    "Point",
    "Centroid",
    "BoundingBox",
    "ShapeType",
    "PixelBuffer",
    "Blob",
    "DetectedShape",
    "DetectionResult",
]
