"""Tests for overweight correction."""

import pytest
import numpy as np
from types import SimpleNamespace
from py_voronoi_map.core.overweight import (
    OverweightVariant, correct_overweighted, find_overweighted_pair, squared_distances
)
from py_voronoi_map.exceptions import InternalConsistencyError


def site(x, y, weight):
    return SimpleNamespace(x=x, y=y, weight=weight)


def assert_no_overweight(sites):
    for i, a in enumerate(sites):
        for b in sites[i + 1:]:
            sq_dist = (a.x - b.x) ** 2 + (a.y - b.y) ** 2
            assert sq_dist >= abs(a.weight - b.weight) - 1e-9


class TestFindPair:
    """Test violation lookup."""

    def test_first_pair_in_scan_order(self):
        xs = np.array([0.0, 1.0, 2.0])
        ys = np.zeros(3)
        weights = np.array([0.0, 5.0, 10.0])
        sq_dist = squared_distances(xs, ys)

        assert find_overweighted_pair(sq_dist, weights) == (0, 1)

    def test_no_violation(self):
        xs = np.array([0.0, 10.0])
        ys = np.zeros(2)
        sq_dist = squared_distances(xs, ys)

        assert find_overweighted_pair(sq_dist, np.array([1.0, 50.0])) is None


class TestCorrectOverweighted:
    """Test both correction heuristics."""

    def test_raise_light(self):
        sites = [site(0, 0, 10), site(1, 0, 2)]
        fixes = correct_overweighted(sites, OverweightVariant.RAISE_LIGHT, epsilon=1)

        assert fixes == 1
        assert sites[0].weight == 10
        assert sites[1].weight == pytest.approx(2 + (10 - 2 - 1) + 1)

    def test_lower_heavy(self):
        sites = [site(0, 0, 10), site(1, 0, 2)]
        fixes = correct_overweighted(sites, OverweightVariant.LOWER_HEAVY, epsilon=1)

        assert fixes == 1
        assert sites[0].weight == pytest.approx(1 + 2 / 2)
        assert sites[1].weight == 2

    def test_lower_heavy_respects_epsilon(self):
        sites = [site(0, 0, 10), site(0.5, 0, 0.9)]
        correct_overweighted(sites, OverweightVariant.LOWER_HEAVY, epsilon=1)

        assert sites[0].weight == pytest.approx(1.0)

    def test_valid_weights_untouched(self):
        sites = [site(0, 0, 10), site(5, 0, 2), site(0, 5, 7)]
        assert correct_overweighted(sites) == 0
        assert [s.weight for s in sites] == [10, 2, 7]

    def test_single_site(self):
        sites = [site(0, 0, 1000)]
        assert correct_overweighted(sites) == 0

    @pytest.mark.parametrize("variant", list(OverweightVariant))
    def test_random_sites_end_valid(self, variant):
        rng = np.random.default_rng(42)
        # jittered 4x5 grid, sites stay at least 10 apart
        sites = [
            site(20 * i + 10 + rng.uniform(-5, 5), 20 * j + 10 + rng.uniform(-5, 5),
                 rng.uniform(1, 5000))
            for i in range(4) for j in range(5)
        ]
        correct_overweighted(sites, variant, epsilon=1)

        assert_no_overweight(sites)
        assert all(s.weight >= 1 for s in sites)

    def test_coincident_sites_exceed_bound(self):
        """Raising the lighter of two coincident sites never settles."""
        sites = [site(5, 5, 10), site(5, 5, 1)]
        with pytest.raises(InternalConsistencyError):
            correct_overweighted(sites, OverweightVariant.RAISE_LIGHT, epsilon=1, max_passes=50)

    def test_variant_values(self):
        assert OverweightVariant("lower-heavy") is OverweightVariant.LOWER_HEAVY
        assert OverweightVariant("raise-light") is OverweightVariant.RAISE_LIGHT
