"""Distribution sampling for Monte Carlo tolerance analysis.

Every sampling rule draws from an explicitly passed ``numpy.random.Generator``
so that seeded runs are reproducible and parallel chunks stay independent.
"""

from __future__ import annotations

import numpy as np

from stackup.errors import InvalidInputError
from stackup.models import Dimension, Distribution


def normal_sigma(dimension: Dimension, cpk: float) -> float:
    """Standard deviation implied by a tolerance band and capability index.

    The half band is treated as 3 * cpk standard deviations.
    """
    if not cpk > 0:
        raise InvalidInputError(f"cpk must be > 0, got {cpk}")
    return (dimension.tolerance_band / 2.0) / (3.0 * cpk)


def box_muller(rng: np.random.Generator, size: int) -> np.ndarray:
    """Standard normal variates from pairs of independent uniform draws.

    ``u`` is drawn on (0, 1] so that ``log(u)`` stays finite.
    """
    u = 1.0 - rng.random(size)
    v = rng.random(size)
    return np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * np.pi * v)


def sample_dimension(
    rng: np.random.Generator,
    dimension: Dimension,
    n_samples: int,
    cpk: float,
) -> np.ndarray:
    """Generate samples of a single dimension's actual value.

    Args:
        rng: NumPy random generator.
        dimension: The dimension to sample.
        n_samples: Number of samples to generate.
        cpk: Capability index to use for the normal rule (the dimension's
            own cpk, or the analysis default when unset).

    Returns:
        1D array of unsigned samples.
    """
    band = dimension.tolerance_band
    lower = dimension.lower
    mean = dimension.nominal + dimension.midpoint_shift

    if dimension.distribution == Distribution.NORMAL:
        return mean + box_muller(rng, n_samples) * normal_sigma(dimension, cpk)

    elif dimension.distribution == Distribution.UNIFORM:
        return lower + rng.random(n_samples) * band

    elif dimension.distribution == Distribution.TRAPEZOIDAL:
        # Sum of two uniforms: a triangle-shaped approximation of a trapezoid.
        r1 = rng.random(n_samples)
        r2 = rng.random(n_samples)
        return lower + (r1 + r2) * (band / 2.0)

    elif dimension.distribution == Distribution.BERNOULLI:
        high = rng.random(n_samples) > 0.5
        return np.where(high, dimension.upper, lower)

    return np.full(n_samples, mean, dtype=float)


def sample_chain(
    rng: np.random.Generator,
    dimensions: list[Dimension],
    cpks: list[float],
    n_samples: int,
) -> np.ndarray:
    """Sample the signed sum of a dimension chain ``n_samples`` times."""
    totals = np.zeros(n_samples)
    for dim, cpk in zip(dimensions, cpks):
        totals += dim.sign * sample_dimension(rng, dim, n_samples, cpk)
    return totals
