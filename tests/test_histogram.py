"""Tests for histogram binning."""

import numpy as np
import pytest

from stackup.errors import InvalidInputError
from stackup.histogram import build_histogram


class TestBuildHistogram:
    def test_last_bin_closed(self):
        samples = np.arange(11, dtype=float)  # 0..10
        hist = build_histogram(samples, bins=5)
        assert [b.count for b in hist] == [2, 2, 2, 2, 3]
        assert [b.bin for b in hist] == pytest.approx([1.0, 3.0, 5.0, 7.0, 9.0])

    def test_interior_boundary_goes_to_upper_bin(self):
        hist = build_histogram(np.array([0.0, 1.0, 2.0]), bins=2)
        assert [b.count for b in hist] == [1, 2]

    def test_counts_sum_to_samples(self):
        samples = np.random.default_rng(0).normal(size=9999)
        hist = build_histogram(samples, bins=40)
        assert len(hist) == 40
        assert sum(b.count for b in hist) == 9999

    def test_maximum_counted(self):
        samples = np.random.default_rng(1).uniform(size=1000)
        hist = build_histogram(samples)
        assert hist[-1].count >= 1

    def test_degenerate_width(self):
        hist = build_histogram(np.full(25, 3.5), bins=4)
        assert [b.count for b in hist] == [0, 0, 0, 25]
        assert all(b.bin == 3.5 for b in hist)

    def test_centres_span_range(self):
        hist = build_histogram(np.array([2.0, 6.0]), bins=4)
        assert hist[0].bin == pytest.approx(2.5)
        assert hist[-1].bin == pytest.approx(5.5)

    def test_centres_match_bin_edges(self):
        samples = np.random.default_rng(7).normal(0.3, 0.01, size=997)
        hist = build_histogram(samples, bins=40)
        counts, edges = np.histogram(samples, bins=40)
        np.testing.assert_array_equal([b.bin for b in hist], (edges[:-1] + edges[1:]) / 2.0)
        np.testing.assert_array_equal([b.count for b in hist], counts)

    def test_input_not_modified(self):
        samples = np.array([3.0, 1.0, 2.0])
        build_histogram(samples, bins=2)
        np.testing.assert_array_equal(samples, [3.0, 1.0, 2.0])

    def test_bad_bins(self):
        with pytest.raises(InvalidInputError, match="bins"):
            build_histogram(np.array([1.0, 2.0]), bins=0)

    def test_empty_samples(self):
        with pytest.raises(InvalidInputError, match="zero samples"):
            build_histogram(np.array([]))
