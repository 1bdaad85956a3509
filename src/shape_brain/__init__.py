"""
shape-brain - Geometric shape detection in raster images
=========================================================

Pipeline Flow:
    Pixel buffer -> Binarization -> Blob extraction -> Contour tracing
    -> Simplification -> Classification

Usage:
    from shape_brain import ShapeDetectionEngine, load_image

    engine = ShapeDetectionEngine()
    result = engine.detect_shapes(load_image("shapes.png"))
    for shape in result.shapes:
        print(shape.shape_type.value, shape.confidence)
"""

from shape_brain.core.config import DetectionConfig
from shape_brain.core.models import (
    BoundingBox,
    Centroid,
    DetectedShape,
    DetectionResult,
    PixelBuffer,
    Point,
    ShapeType,
)
from shape_brain.io.loader import load_image, pixel_buffer_from_array
from shape_brain.perception.engine import ShapeDetectionEngine

__version__ = "0.1.0"

__all__ = [
    "DetectionConfig",
    "BoundingBox",
    "Centroid",
    "DetectedShape",
    "DetectionResult",
    "PixelBuffer",
    "Point",
    "ShapeType",
    "load_image",
    "pixel_buffer_from_array",
    "ShapeDetectionEngine",
]
