"""Tests for the Alea PRNG and per-run generators."""

from py_voronoi_map.core.alea_prng import AleaPRNG
from py_voronoi_map.utils.random import create_prng


class TestAleaPRNG:
    """Test reproducibility and range."""

    def test_same_seed_same_sequence(self):
        a = AleaPRNG("seed")
        b = AleaPRNG("seed")
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_different_seeds_differ(self):
        a = AleaPRNG("seed1")
        b = AleaPRNG("seed2")
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_range(self):
        prng = AleaPRNG(12345)
        for _ in range(1000):
            assert 0 <= prng.random() < 1

    def test_uniform_bounds(self):
        prng = AleaPRNG("uniform")
        for _ in range(200):
            assert -3 <= prng.uniform(-3, 8) < 8


class TestCreatePrng:
    """Test per-run generator creation."""

    def test_seeded(self):
        assert create_prng("x").random() == AleaPRNG("x").random()

    def test_unseeded_runs_differ(self):
        a = create_prng()
        b = create_prng()
        assert a.seed != b.seed
