"""Tests for polygon utilities."""

import pytest
import numpy as np
from py_voronoi_map.core.geometry import (
    bounding_box, normalize_clip, polygon_area, polygon_centroid,
    polygon_contains, polygon_hull
)
from py_voronoi_map.exceptions import ConfigurationError

SQUARE = np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=float)


class TestPolygonArea:
    """Test signed area computation."""

    def test_counter_clockwise_is_positive(self):
        assert polygon_area(SQUARE) == pytest.approx(100.0)

    def test_clockwise_is_negative(self):
        assert polygon_area(SQUARE[::-1]) == pytest.approx(-100.0)

    def test_degenerate_polygon(self):
        """Less than three points has no area."""
        assert polygon_area(np.array([[0, 0], [1, 1]])) == 0.0


class TestPolygonCentroid:
    """Test centroid computation."""

    def test_square_centroid(self):
        np.testing.assert_allclose(polygon_centroid(SQUARE), [5, 5])

    def test_triangle_centroid(self):
        triangle = np.array([[0, 0], [3, 0], [0, 3]])
        np.testing.assert_allclose(polygon_centroid(triangle), [1, 1])

    def test_orientation_does_not_matter(self):
        triangle = np.array([[0, 0], [0, 3], [3, 0]])
        np.testing.assert_allclose(polygon_centroid(triangle), [1, 1])

    def test_flat_polygon_falls_back_to_mean(self):
        flat = np.array([[0, 0], [2, 0], [4, 0]])
        np.testing.assert_allclose(polygon_centroid(flat), [2, 0])


class TestContainsAndHull:
    """Test containment, hull and bounds."""

    def test_contains(self):
        assert polygon_contains(SQUARE, (5, 5))
        assert not polygon_contains(SQUARE, (15, 5))

    def test_hull_drops_interior_points(self):
        points = np.vstack([SQUARE, [[5, 5], [2, 3]]])
        hull = polygon_hull(points)

        assert len(hull) == 4
        assert polygon_area(hull) == pytest.approx(100.0)

    def test_bounding_box(self):
        triangle = np.array([[1, 2], [5, -1], [3, 7]])
        assert bounding_box(triangle) == (1.0, -1.0, 5.0, 7.0)


class TestNormalizeClip:
    """Test clip region validation."""

    def test_clockwise_clip_is_reoriented(self):
        clip = normalize_clip(SQUARE[::-1].tolist())
        assert polygon_area(clip) == pytest.approx(100.0)

    def test_concave_clip_uses_hull(self):
        l_shape = [(0, 0), (10, 0), (10, 5), (5, 5), (5, 10), (0, 10)]
        clip = normalize_clip(l_shape)
        assert polygon_area(clip) == pytest.approx(87.5)

    @pytest.mark.parametrize("clip", [
        [(0, 0), (5, 0), (10, 0)],          # collinear, zero area
        [(0, 0), (10, 10), (0, 0)],         # two distinct vertices
        [(0, 0), (10, 10), (10, 0), (0, 10)],  # self-intersecting
        [(0, 0), (1, 0)],
    ])
    def test_invalid_clip_raises(self, clip):
        with pytest.raises(ConfigurationError):
            normalize_clip(clip)

    def test_malformed_points_raise(self):
        with pytest.raises(ConfigurationError):
            normalize_clip([1, 2, 3])
