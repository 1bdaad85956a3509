import json

import numpy as np
import pytest

from shape_brain.core.models import (
    Blob,
    BoundingBox,
    Centroid,
    DetectedShape,
    DetectionResult,
    Direction,
    PixelBuffer,
    Point,
    ShapeType,
)


def test_directions_are_clockwise_from_north() -> None:
    offsets = [d.value for d in Direction.clockwise()]

    assert offsets == [(0, -1), (1, -1), (1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1)]


def test_point_step_and_distance() -> None:
    p = Point(1, 2)

    assert p.step(Direction.SOUTHEAST) == Point(2, 3)
    assert p.euclidean_distance(Point(4, 6)) == pytest.approx(5.0)
    assert p.euclidean_distance(Centroid(1.0, 2.5)) == pytest.approx(0.5)


def test_point_adjacency_is_8_connected() -> None:
    p = Point(5, 5)

    assert p.is_adjacent(Point(6, 6))
    assert p.is_adjacent(Point(5, 4))
    assert not p.is_adjacent(p)
    assert not p.is_adjacent(Point(7, 5))


def test_bounding_box_is_inclusive() -> None:
    bbox = BoundingBox(min_x=2, min_y=3, max_x=5, max_y=4)

    assert bbox.width == 4
    assert bbox.height == 2
    assert bbox.to_dict() == {"x": 2, "y": 3, "width": 4, "height": 2}
    assert bbox.translated(10, -1) == BoundingBox(12, 2, 15, 3)


def test_pixel_buffer_checks_byte_length() -> None:
    with pytest.raises(ValueError):
        PixelBuffer(width=2, height=2, data=bytes(15))

    with pytest.raises(ValueError):
        PixelBuffer(width=0, height=2, data=b"")

    buffer = PixelBuffer(width=2, height=3, data=bytes(24))
    assert buffer.to_array().shape == (3, 2, 4)


def test_pixel_buffer_from_array_keeps_layout() -> None:
    rgba = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
    buffer = PixelBuffer.from_array(rgba)

    assert (buffer.width, buffer.height) == (3, 2)
    assert buffer.data[:4] == bytes([0, 1, 2, 3])
    np.testing.assert_array_equal(buffer.to_array(), rgba)

    with pytest.raises(ValueError):
        PixelBuffer.from_array(np.zeros((2, 3, 3), dtype=np.uint8))


def test_blob_metrics_from_pixels() -> None:
    pixels = [Point(1, 1), Point(2, 1), Point(1, 2), Point(2, 2), Point(3, 3)]
    blob = Blob.from_pixels(1, pixels)

    assert blob.area == 5
    assert blob.bounding_box == BoundingBox(1, 1, 3, 3)
    assert blob.center.x == pytest.approx(1.8)
    assert blob.center.y == pytest.approx(1.8)

    with pytest.raises(ValueError):
        Blob.from_pixels(2, [])


def test_detection_result_serializes_with_camel_case_keys() -> None:
    shape = DetectedShape(
        shape_type=ShapeType.RECTANGLE,
        confidence=0.9,
        bounding_box=BoundingBox(10, 20, 69, 59),
        center=Centroid(39.5, 39.5),
        area=2400,
    )
    result = DetectionResult(shapes=(shape,), processing_time=1.5, image_width=100, image_height=80)

    data = json.loads(json.dumps(result.to_dict()))

    assert data["imageWidth"] == 100
    assert data["imageHeight"] == 80
    assert data["processingTime"] == 1.5
    assert data["shapes"] == [
        {
            "type": "rectangle",
            "confidence": 0.9,
            "boundingBox": {"x": 10, "y": 20, "width": 60, "height": 40},
            "center": {"x": 39.5, "y": 39.5},
            "area": 2400.0,
        }
    ]
    assert isinstance(data["shapes"][0]["area"], float)


def test_count_by_type_lists_every_type() -> None:
    result = DetectionResult(shapes=(), processing_time=0.0, image_width=1, image_height=1)

    assert result.count_by_type() == {"circle": 0, "triangle": 0, "rectangle": 0, "pentagon": 0, "star": 0}
