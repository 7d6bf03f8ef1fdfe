"""Tests for placement and weight adaptation."""

import pytest
import numpy as np
from py_voronoi_map.core.adaptation import adapt_placements, adapt_weights
from py_voronoi_map.core.initializer import Site
from py_voronoi_map.core.power_diagram import Cell

SQUARE = np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=float)


def make_cell(x=2.0, y=2.0, weight=10.0, targeted_area=100.0):
    site = Site(index=0, x=x, y=y, weight=weight, targeted_area=targeted_area, item=None)
    return Cell(points=SQUARE, site=site)


class TestAdaptPlacements:
    """Test moves towards cell centroids."""

    def test_full_move_without_flickering(self):
        cell = make_cell()
        sites = adapt_placements([cell], 0.0)

        assert sites == [cell.site]
        assert cell.site.position == pytest.approx((5.0, 5.0))

    def test_half_move_with_full_flickering(self):
        cell = make_cell()
        adapt_placements([cell], 1.0)

        assert cell.site.position == pytest.approx((3.5, 3.5))

    def test_site_on_centroid_stays(self):
        cell = make_cell(x=5.0, y=5.0)
        adapt_placements([cell], 0.3)

        assert cell.site.position == pytest.approx((5.0, 5.0))


class TestAdaptWeights:
    """Test weight rescaling."""

    def test_growth_is_capped(self):
        cell = make_cell(targeted_area=200.0)
        adapt_weights([cell], 0.0, epsilon=1.0)

        assert cell.site.weight == pytest.approx(11.0)

    def test_shrink_is_capped(self):
        cell = make_cell(targeted_area=50.0)
        adapt_weights([cell], 0.0, epsilon=1.0)

        assert cell.site.weight == pytest.approx(9.0)

    def test_small_correction_is_exact(self):
        cell = make_cell(targeted_area=105.0)
        adapt_weights([cell], 0.0, epsilon=1.0)

        assert cell.site.weight == pytest.approx(10.5)

    def test_full_flickering_freezes_weights(self):
        cell = make_cell(targeted_area=200.0)
        adapt_weights([cell], 1.0, epsilon=1.0)

        assert cell.site.weight == pytest.approx(10.0)

    def test_partial_flickering_narrows_range(self):
        cell = make_cell(targeted_area=200.0)
        adapt_weights([cell], 0.5, epsilon=1.0)

        assert cell.site.weight == pytest.approx(10.5)

    def test_weight_floor(self):
        cell = make_cell(weight=1.0, targeted_area=1.0)
        adapt_weights([cell], 0.0, epsilon=1.0)

        assert cell.site.weight == 1.0
