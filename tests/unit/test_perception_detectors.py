import math

import pytest

from shape_brain.core.config import DetectionConfig
from shape_brain.core.models import Centroid, Point, ShapeType
from shape_brain.perception.blobs import BlobExtractor
from shape_brain.perception.contour import ContourTracer
from shape_brain.perception.detectors import ShapeClassifier, StarDetector

from shape_images import rectangle_mask


def _polar_vertices(center, radii, count=10):
    points = []
    for i in range(count):
        angle = -math.pi / 2 + i * 2 * math.pi / count
        radius = radii[i % len(radii)]
        points.append(Point(round(center.x + radius * math.cos(angle)), round(center.y + radius * math.sin(angle))))
    return points


def _rectangle_blob():
    mask = rectangle_mask((60, 80), 10, 10, 60, 40)
    (blob,) = BlobExtractor().extract(mask)
    return blob, ContourTracer().trace(blob, mask)


def test_perimeter_wraps_around() -> None:
    square = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]

    assert ShapeClassifier.perimeter(square) == pytest.approx(4.0)
    assert ShapeClassifier.perimeter([Point(3, 3)]) == 0.0


def test_circularity_of_ideal_circle_is_one() -> None:
    radius = 10.0

    assert ShapeClassifier.circularity(math.pi * radius**2, 2 * math.pi * radius) == pytest.approx(1.0)
    assert ShapeClassifier.circularity(100, 0.0) == 0.0


def test_star_ratio() -> None:
    center = Centroid(100.0, 100.0)

    star = _polar_vertices(center, (60, 24))
    decagon = _polar_vertices(center, (60, 57))

    assert StarDetector.radius_ratio(star, center) == pytest.approx(0.4, abs=0.02)
    assert StarDetector.is_star(star, center)
    assert not StarDetector.is_star(decagon, center)
    assert not StarDetector.is_star(star[:9], center)


def test_rules_by_vertex_count() -> None:
    classifier = ShapeClassifier()
    center = Centroid(0.0, 0.0)

    assert classifier.match(0.6, 3, [], center) == (ShapeType.TRIANGLE, 0.9)
    assert classifier.match(0.6, 4, [], center) == (ShapeType.RECTANGLE, 0.9)
    assert classifier.match(0.6, 5, [], center) == (ShapeType.PENTAGON, 0.85)
    assert classifier.match(0.6, 6, [], center) is None
    assert classifier.match(0.6, 2, [], center) is None


def test_circle_rule_comes_first() -> None:
    classifier = ShapeClassifier()

    assert classifier.match(0.95, 4, [], Centroid(0.0, 0.0)) == (ShapeType.CIRCLE, 0.95)
    assert classifier.match(0.88, 4, [], Centroid(0.0, 0.0)) == (ShapeType.RECTANGLE, 0.9)


def test_confidence_is_clamped() -> None:
    classifier = ShapeClassifier()

    assert classifier.clamp_confidence(1.3) == 1.0
    assert classifier.clamp_confidence(0.2) == 0.5
    assert classifier.clamp_confidence(0.85) == 0.85


def test_classify_rectangle_blob() -> None:
    blob, contour = _rectangle_blob()

    detection = ShapeClassifier().classify(contour, blob, [], 4)

    assert detection is not None
    assert detection.shape_type == ShapeType.RECTANGLE
    assert detection.confidence == 0.9
    assert detection.bounding_box == blob.bounding_box
    assert detection.center == blob.center
    assert detection.area == 2400


def test_classify_ten_vertices() -> None:
    blob, contour = _rectangle_blob()
    classifier = ShapeClassifier()

    star = _polar_vertices(blob.center, (30, 12))
    decagon = _polar_vertices(blob.center, (30, 27))

    detection = classifier.classify(contour, blob, star, 10)
    assert detection is not None
    assert detection.shape_type == ShapeType.STAR
    assert detection.confidence == 0.9

    assert classifier.classify(contour, blob, decagon, 10) is None


def test_star_ratio_follows_config() -> None:
    blob, contour = _rectangle_blob()
    vertices = _polar_vertices(blob.center, (30, 24))

    assert ShapeClassifier().classify(contour, blob, vertices, 10) is None
    strict = ShapeClassifier(DetectionConfig(star_ratio=0.9))
    assert strict.classify(contour, blob, vertices, 10).shape_type == ShapeType.STAR
