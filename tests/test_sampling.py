"""Tests for per-distribution sampling rules."""

import numpy as np
import pytest

from stackup.errors import InvalidInputError
from stackup.models import Dimension, Distribution
from stackup.sampling import box_muller, normal_sigma, sample_chain, sample_dimension


def _dim(dist, tol_plus=1.0, tol_minus=1.0, **kwargs):
    return Dimension(name="D", nominal=10.0, tol_plus=tol_plus, tol_minus=tol_minus,
                     distribution=dist, **kwargs)


def _samples(dim, n=100_000, seed=42, cpk=1.0):
    return sample_dimension(np.random.default_rng(seed), dim, n, cpk)


class TestBoxMuller:
    def test_standard_normal(self):
        z = box_muller(np.random.default_rng(42), 200_000)
        assert np.mean(z) == pytest.approx(0.0, abs=0.01)
        assert np.std(z) == pytest.approx(1.0, rel=0.01)
        assert np.all(np.isfinite(z))


class TestSampleDimension:
    def test_normal(self):
        samples = _samples(_dim(Distribution.NORMAL), cpk=1.0)
        assert np.mean(samples) == pytest.approx(10.0, abs=0.01)
        assert np.std(samples) == pytest.approx(1.0 / 3.0, rel=0.02)

    def test_normal_cpk_scaling(self):
        d = _dim(Distribution.NORMAL)
        assert normal_sigma(d, 2.0) == pytest.approx(normal_sigma(d, 1.0) / 2.0)

    @pytest.mark.parametrize("cpk", [0.0, -1.0])
    def test_normal_rejects_non_positive_cpk(self, cpk):
        d = _dim(Distribution.NORMAL)
        with pytest.raises(InvalidInputError, match="cpk"):
            _samples(_dim(Distribution.NORMAL), n=10, cpk=cpk)
        samples = _samples(d, cpk=2.0)
        assert np.std(samples) == pytest.approx(1.0 / 6.0, rel=0.02)

    def test_normal_asymmetric_mean(self):
        samples = _samples(_dim(Distribution.NORMAL, tol_plus=0.6, tol_minus=0.2))
        assert np.mean(samples) == pytest.approx(10.2, abs=0.005)

    def test_uniform(self):
        samples = _samples(_dim(Distribution.UNIFORM, tol_plus=0.5, tol_minus=1.0))
        assert np.min(samples) >= 9.0
        assert np.max(samples) <= 10.5
        assert np.mean(samples) == pytest.approx(9.75, abs=0.01)
        assert np.std(samples) == pytest.approx(1.5 / np.sqrt(12), rel=0.02)

    def test_trapezoidal(self):
        samples = _samples(_dim(Distribution.TRAPEZOIDAL))
        assert np.min(samples) >= 9.0
        assert np.max(samples) <= 11.0
        assert np.mean(samples) == pytest.approx(10.0, abs=0.01)
        # Sum of two uniforms on [0, 1] scaled by band/2 = 1
        assert np.std(samples) == pytest.approx(np.sqrt(2.0 / 12.0), rel=0.02)

    def test_bernoulli_two_values(self):
        d = _dim(Distribution.BERNOULLI, tol_plus=0.25, tol_minus=0.5)
        samples = _samples(d, n=10_000)
        assert set(np.unique(samples)) == {10.25, 9.5}
        assert np.mean(samples == 10.25) == pytest.approx(0.5, abs=0.02)

    def test_zero_tolerance(self):
        for dist in Distribution:
            samples = _samples(_dim(dist, tol_plus=0.0, tol_minus=0.0), n=100)
            assert np.all(samples == 10.0)

    def test_unknown_distribution_returns_mean(self):
        d = _dim(Distribution.NORMAL, tol_plus=0.4, tol_minus=0.2)
        d.distribution = "custom"
        samples = _samples(d, n=50)
        np.testing.assert_allclose(samples, 10.1)


class TestSampleChain:
    def test_signed_sum(self):
        dims = [
            Dimension(name="A", nominal=10.0, tol_plus=0.0, tol_minus=0.0),
            Dimension(name="B", nominal=4.0, tol_plus=0.0, tol_minus=0.0, sign=-1),
        ]
        totals = sample_chain(np.random.default_rng(0), dims, [1.0, 1.0], 25)
        assert totals.shape == (25,)
        assert np.all(totals == 6.0)
