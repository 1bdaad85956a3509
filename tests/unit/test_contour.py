import numpy as np

from shape_brain.core.models import Point
from shape_brain.perception.blobs import BlobExtractor
from shape_brain.perception.contour import ContourTracer

from shape_images import disk_mask, rectangle_mask, star_mask


def _trace_single(grid: np.ndarray):
    (blob,) = BlobExtractor().extract(grid)
    return blob, ContourTracer().trace(blob, grid)


def _assert_closed_boundary(contour, grid) -> None:
    for a, b in zip(contour, contour[1:] + contour[:1]):
        assert a.is_adjacent(b)
    for p in contour:
        assert grid[p.y, p.x]


def test_rectangle_boundary_is_traced_clockwise() -> None:
    grid = rectangle_mask((50, 80), 10, 5, 60, 40)

    blob, contour = _trace_single(grid)

    assert contour[0] == Point(10, 5)
    assert contour[1] == Point(11, 5)
    assert len(contour) == 2 * (60 + 40) - 4
    assert len(set(contour)) == len(contour)
    assert contour[-1] == Point(10, 6)
    _assert_closed_boundary(contour, grid)


def test_start_is_topmost_then_leftmost() -> None:
    grid = disk_mask((80, 80), 40, 40, 20)

    _, contour = _trace_single(grid)

    assert contour[0] == Point(40, 20)
    _assert_closed_boundary(contour, grid)


def test_shapes_touching_the_image_border() -> None:
    grid = rectangle_mask((20, 30), 0, 0, 30, 20)

    _, contour = _trace_single(grid)

    assert contour[0] == Point(0, 0)
    assert len(contour) == 2 * (30 + 20) - 4
    _assert_closed_boundary(contour, grid)


def test_contour_points_lie_on_the_blob_edge() -> None:
    grid = disk_mask((70, 70), 35, 35, 25)

    blob, contour = _trace_single(grid)
    padded = np.pad(grid, 1)

    for p in contour:
        window = padded[p.y : p.y + 3, p.x : p.x + 3]
        assert not window.all()
    assert len(contour) < blob.area


def test_isolated_pixel() -> None:
    grid = np.zeros((3, 3), dtype=bool)
    grid[1, 1] = True

    _, contour = _trace_single(grid)

    assert contour == [Point(1, 1)]


def test_two_pixel_blob() -> None:
    grid = np.zeros((3, 4), dtype=bool)
    grid[1, 1:3] = True

    _, contour = _trace_single(grid)

    assert contour == [Point(1, 1), Point(2, 1)]


def test_concave_star_boundary_is_closed() -> None:
    grid = star_mask((160, 160), 80, 80, 60, 24)
    blob = max(BlobExtractor().extract(grid), key=lambda b: b.area)

    contour = ContourTracer().trace(blob, grid)

    assert len(contour) < 8 * blob.area
    _assert_closed_boundary(contour, grid)
    xs = [p.x for p in contour]
    ys = [p.y for p in contour]
    bbox = blob.bounding_box
    assert (min(xs), min(ys), max(xs), max(ys)) == (bbox.min_x, bbox.min_y, bbox.max_x, bbox.max_y)


def test_clipped_corner_shortens_contour() -> None:
    grid = rectangle_mask((10, 10), 2, 2, 6, 6)
    assert len(_trace_single(grid)[1]) == 20

    grid[2, 7] = False
    _, contour = _trace_single(grid)

    assert len(contour) == 19
    assert Point(7, 2) not in contour
    _assert_closed_boundary(contour, grid)


def test_step_cap_stops_the_walk() -> None:
    grid = rectangle_mask((10, 420), 10, 5, 400, 1)
    (blob,) = BlobExtractor().extract(grid)

    full = ContourTracer().trace(blob, grid)
    capped = ContourTracer(steps_per_pixel=1).trace(blob, grid)

    assert len(full) == 798
    assert len(capped) == blob.area + 1
    assert capped == full[: len(capped)]
