"""Equal-width histogram of Monte Carlo assembly samples."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from stackup.errors import InvalidInputError


@dataclass
class HistogramBin:
    """One histogram bar.

    Attributes:
        bin: Centre of the bin.
        count: Number of samples in the bin.
    """
    bin: float
    count: int

    def to_dict(self) -> dict:
        return {"bin": self.bin, "count": self.count}


def build_histogram(samples: np.ndarray, bins: int = 40) -> list[HistogramBin]:
    """Bin samples into ``bins`` equal-width bins spanning [min, max].

    Bins are half-open ``[start, end)`` except the last, which is closed so
    that the maximum sample is counted. If every sample has the same value
    the width is zero, all centres equal that value, and the last bin holds
    every sample.
    """
    if bins < 1:
        raise InvalidInputError(f"bins must be >= 1, got {bins}")
    samples = np.asarray(samples, dtype=float).ravel()
    if samples.size == 0:
        raise InvalidInputError("cannot build a histogram from zero samples")

    lo = float(np.min(samples))
    hi = float(np.max(samples))

    if hi == lo:
        counts = np.zeros(bins, dtype=int)
        counts[-1] = samples.size
        centres = np.full(bins, lo)
    else:
        # np.histogram uses exactly this boundary policy.
        counts, edges = np.histogram(samples, bins=bins, range=(lo, hi))
        centres = (edges[:-1] + edges[1:]) / 2.0

    return [
        HistogramBin(bin=float(centre), count=int(count))
        for centre, count in zip(centres, counts)
    ]
