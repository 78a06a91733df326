"""Tolerance chain analysis engine supporting WC, RSS, and Monte Carlo."""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Optional, Union

import numpy as np

from stackup.config import AnalysisConfig, DEFAULT_BINS, DEFAULT_CPK, DEFAULT_ITERATIONS
from stackup.errors import EmptyChainError, InvalidInputError
from stackup.histogram import HistogramBin, build_histogram
from stackup.models import Dimension, StackupConfig, check_spec_limits
from stackup.sampling import sample_chain
from stackup.statistics import (
    Contribution, ProcessCapability, compute_process_capability,
    normal_yield, percent_contribution,
)

LOGGER = logging.getLogger(__name__)


@dataclass
class WorstCaseResult:
    """Assembly extremes with every dimension at a tolerance limit."""
    min: float
    max: float
    nominal: float

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "nominal": self.nominal}

    def summary(self) -> str:
        return "\n".join([
            "=== Worst-Case Analysis ===",
            f"  Nominal:          {self.nominal:+.6f}",
            f"  Range:            [{self.min:+.6f}, {self.max:+.6f}]",
        ])


@dataclass
class RSSResult:
    """Statistical bounds assuming independent dimension variation.

    Attributes:
        min: nominal - sigma_level * sigma.
        max: nominal + sigma_level * sigma.
        nominal: Signed sum of nominals.
        sigma: Assembly standard deviation.
        sigma_level: Multiplier used for the bounds.
        dimension_sigmas: Per-dimension sigma, in chain order.
        predicted_yield: Normal-theory yield against the spec limits, in
            percent, or None when no limit is given.
    """
    min: float
    max: float
    nominal: float
    sigma: float
    sigma_level: float = 3.0
    dimension_sigmas: list[float] = field(default_factory=list)
    predicted_yield: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "min": self.min,
            "max": self.max,
            "nominal": self.nominal,
            "sigma": self.sigma,
            "predictedYield": self.predicted_yield,
        }

    def summary(self) -> str:
        lines = [
            "=== RSS Analysis ===",
            f"  Nominal:          {self.nominal:+.6f}",
            f"  Range:            [{self.min:+.6f}, {self.max:+.6f}]",
            f"  Sigma:            {self.sigma:.6f} (bounds at {self.sigma_level:.1f} sigma)",
        ]
        if self.predicted_yield is not None:
            lines.append(f"  Predicted yield:  {self.predicted_yield:.4f}%")
        return "\n".join(lines)


@dataclass
class MonteCarloResult:
    """Simulated assembly distribution.

    Attributes:
        min: Smallest simulated assembly value.
        max: Largest simulated assembly value.
        mean: Sample mean.
        std_dev: Population standard deviation (divides by N).
        samples: Assembly samples in generation order.
        histogram: Equal-width histogram of the samples.
        yield_percent: Percent of samples within the spec limits.
        capability: Capability metrics, or None when no limit is given.
    """
    min: float
    max: float
    mean: float
    std_dev: float
    samples: np.ndarray
    histogram: list[HistogramBin]
    yield_percent: float
    capability: Optional[ProcessCapability] = None

    @property
    def iterations(self) -> int:
        return int(self.samples.size)

    def to_dict(self, include_samples: bool = True) -> dict:
        d = {
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "stdDev": self.std_dev,
            "histogram": [b.to_dict() for b in self.histogram],
            "yield": self.yield_percent,
            "capability": self.capability.to_dict() if self.capability else None,
        }
        if include_samples:
            d["samples"] = self.samples.tolist()
        return d

    def summary(self) -> str:
        lines = [
            "=== Monte Carlo Analysis ===",
            f"  Iterations:       {self.iterations}",
            f"  Range:            [{self.min:+.6f}, {self.max:+.6f}]",
            f"  Mean:             {self.mean:+.6f}",
            f"  Std dev:          {self.std_dev:.6f}",
            f"  Yield:            {self.yield_percent:.4f}%",
        ]
        if self.capability is not None:
            cpk = self.capability.cpk
            lines.append(f"  Cpk:              {'n/a' if cpk is None else f'{cpk:.4f}'}")
        return "\n".join(lines)


@dataclass
class SimulationResult:
    """Combined output of all four calculators for one chain."""
    worst_case: WorstCaseResult
    rss: RSSResult
    monte_carlo: MonteCarloResult
    contributions: list[Contribution]

    def to_dict(self, include_samples: bool = True) -> dict:
        return {
            "worstCase": self.worst_case.to_dict(),
            "rss": self.rss.to_dict(),
            "monteCarlo": self.monte_carlo.to_dict(include_samples=include_samples),
            "contributions": [c.to_dict() for c in self.contributions],
        }

    def summary(self) -> str:
        parts = [self.worst_case.summary(), self.rss.summary(), self.monte_carlo.summary()]
        lines = ["=== Variance Contribution ==="]
        for c in self.contributions:
            lines.append(f"  {c.name:30s}  {c.percent:6.2f}%")
        parts.append("\n".join(lines))
        return "\n\n".join(parts)


def _check_chain(dimensions: list[Dimension]) -> None:
    if not dimensions:
        raise EmptyChainError("dimension chain is empty")
    for d in dimensions:
        d.validate()


def _check_finite(label: str, *values: float) -> None:
    if not all(math.isfinite(v) for v in values):
        raise InvalidInputError(f"{label} produced a non-finite result")


def resolve_cpk(dimension: Dimension, default_cpk: float = DEFAULT_CPK) -> float:
    """Return the dimension's cpk, or the default when it is unset."""
    if dimension.cpk is None:
        LOGGER.debug("%s: no cpk set, using default %.3f", dimension.name, default_cpk)
        return default_cpk
    return dimension.cpk


# ---------------------------------------------------------------------------
# Worst-Case analysis
# ---------------------------------------------------------------------------

def worst_case(dimensions: list[Dimension]) -> WorstCaseResult:
    """Perform worst-case (min/max) tolerance chain analysis.

    Every dimension is assumed to be at its extreme limit simultaneously.
    A subtracted dimension maximises the chain at its smallest value.
    """
    _check_chain(dimensions)
    nominal = 0.0
    wc_max = 0.0
    wc_min = 0.0

    for d in dimensions:
        nominal += d.nominal * d.sign
        if d.sign == 1:
            wc_max += d.upper
            wc_min += d.lower
        else:
            wc_max -= d.lower
            wc_min -= d.upper

    _check_finite("worst-case analysis", wc_min, wc_max, nominal)
    return WorstCaseResult(min=wc_min, max=wc_max, nominal=nominal)


# ---------------------------------------------------------------------------
# RSS (Root Sum of Squares) analysis
# ---------------------------------------------------------------------------

def rss(
    dimensions: list[Dimension],
    default_cpk: float = DEFAULT_CPK,
    sigma_level: float = 3.0,
    upper_spec_limit: Optional[float] = None,
    lower_spec_limit: Optional[float] = None,
) -> RSSResult:
    """Perform RSS statistical tolerance chain analysis.

    Each dimension's average half tolerance is taken as 3 * cpk standard
    deviations. Bounds are centred on the nominal sum.
    """
    AnalysisConfig(default_cpk=default_cpk, sigma_level=sigma_level).validate()
    _check_chain(dimensions)
    nominal = 0.0
    sum_var = 0.0
    sigmas = []

    for d in dimensions:
        nominal += d.nominal * d.sign
        avg_tol = d.tolerance_band / 2.0
        sigma_i = avg_tol / (3.0 * resolve_cpk(d, default_cpk))
        sigmas.append(sigma_i)
        sum_var += sigma_i ** 2

    sigma_asm = math.sqrt(sum_var)
    rss_tol = sigma_level * sigma_asm
    _check_finite("RSS analysis", nominal, sigma_asm, rss_tol)

    return RSSResult(
        min=nominal - rss_tol,
        max=nominal + rss_tol,
        nominal=nominal,
        sigma=sigma_asm,
        sigma_level=sigma_level,
        dimension_sigmas=sigmas,
        predicted_yield=normal_yield(nominal, sigma_asm, upper_spec_limit, lower_spec_limit),
    )


# ---------------------------------------------------------------------------
# Monte Carlo analysis
# ---------------------------------------------------------------------------

def _make_rng(seed: Optional[int], rng: Optional[np.random.Generator]) -> np.random.Generator:
    if rng is not None and seed is not None:
        raise InvalidInputError("pass either seed or rng, not both")
    return rng if rng is not None else np.random.default_rng(seed)


def _chunk_sizes(iterations: int, workers: int) -> list[int]:
    base, extra = divmod(iterations, workers)
    sizes = [base + (1 if i < extra else 0) for i in range(workers)]
    return [s for s in sizes if s > 0]


def simulate_samples(
    rng: np.random.Generator,
    dimensions: list[Dimension],
    cpks: list[float],
    iterations: int,
    workers: int = 1,
) -> np.ndarray:
    """Draw ``iterations`` assembly samples, optionally across a thread pool.

    With ``workers > 1`` the iterations are split into contiguous chunks,
    each driven by its own child generator spawned from ``rng``. Chunks are
    joined in order, so the output depends only on the seed and the worker
    count.
    """
    if workers == 1:
        return sample_chain(rng, dimensions, cpks, iterations)

    sizes = _chunk_sizes(iterations, workers)
    children = rng.spawn(len(sizes))

    def run(args: tuple[np.random.Generator, int]) -> np.ndarray:
        child, size = args
        return sample_chain(child, dimensions, cpks, size)

    with ThreadPoolExecutor(max_workers=len(sizes), thread_name_prefix="stackup-mc") as pool:
        parts = list(pool.map(run, zip(children, sizes)))
    return np.concatenate(parts)


def monte_carlo(
    dimensions: list[Dimension],
    iterations: int = DEFAULT_ITERATIONS,
    upper_spec_limit: Optional[float] = None,
    lower_spec_limit: Optional[float] = None,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    default_cpk: float = DEFAULT_CPK,
    bins: int = DEFAULT_BINS,
    workers: int = 1,
) -> MonteCarloResult:
    """Perform Monte Carlo tolerance chain analysis.

    Each dimension is sampled according to its distribution, the signed
    samples are summed into assembly values, and each assembly is checked
    against the spec limits (a missing limit never fails).
    """
    _check_chain(dimensions)
    check_spec_limits(upper_spec_limit, lower_spec_limit)
    AnalysisConfig(
        iterations=iterations, bins=bins, default_cpk=default_cpk, workers=workers,
    ).validate()
    generator = _make_rng(seed, rng)

    cpks = [resolve_cpk(d, default_cpk) for d in dimensions]
    samples = simulate_samples(generator, dimensions, cpks, iterations, workers)
    if not np.all(np.isfinite(samples)):
        raise InvalidInputError("Monte Carlo analysis produced non-finite samples")

    passed = np.ones(iterations, dtype=bool)
    if upper_spec_limit is not None:
        passed &= samples <= upper_spec_limit
    if lower_spec_limit is not None:
        passed &= samples >= lower_spec_limit
    pass_count = int(np.count_nonzero(passed))

    ordered = np.sort(samples)
    mc_min = float(ordered[0])
    mc_max = float(ordered[-1])

    capability = None
    if upper_spec_limit is not None or lower_spec_limit is not None:
        capability = compute_process_capability(samples, upper_spec_limit, lower_spec_limit)

    result = MonteCarloResult(
        min=mc_min,
        max=mc_max,
        mean=float(np.mean(samples)),
        std_dev=float(np.std(samples, ddof=0)),
        samples=samples,
        histogram=build_histogram(ordered, bins=bins),
        yield_percent=100.0 * pass_count / iterations,
        capability=capability,
    )
    LOGGER.debug(
        "Monte Carlo: %d iterations, mean=%.6f std=%.6f yield=%.2f%%",
        iterations, result.mean, result.std_dev, result.yield_percent,
    )
    return result


# ---------------------------------------------------------------------------
# Convenience dispatcher
# ---------------------------------------------------------------------------

def analyze_stackup(
    chain: Union[StackupConfig, list[Dimension]],
    upper_spec_limit: Optional[float] = None,
    lower_spec_limit: Optional[float] = None,
    config: Optional[AnalysisConfig] = None,
    iterations: Optional[int] = None,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> SimulationResult:
    """Run worst-case, RSS, Monte Carlo and contribution analysis on a chain.

    Args:
        chain: A StackupConfig, or a plain list of dimensions.
        upper_spec_limit: USL; overrides the StackupConfig's value if given.
            None keeps the StackupConfig's limit; to analyse without it, pass
            a copy with the limit cleared, e.g.
            ``dataclasses.replace(chain, upper_spec_limit=None)``.
        lower_spec_limit: LSL; same override rules as ``upper_spec_limit``.
        config: Run settings. Defaults to AnalysisConfig().
        iterations: Overrides config.iterations.
        seed: Overrides config.seed.
        rng: Random generator to use instead of a seed.

    Returns:
        SimulationResult combining all four calculators.

    Raises:
        EmptyChainError: If the chain has no dimensions.
        InvalidInputError: If a dimension, limit, or setting is invalid.
    """
    if isinstance(chain, StackupConfig):
        dimensions = list(chain.dimensions)
        if upper_spec_limit is None:
            upper_spec_limit = chain.upper_spec_limit
        if lower_spec_limit is None:
            lower_spec_limit = chain.lower_spec_limit
    else:
        dimensions = list(chain)

    config = config or AnalysisConfig()
    if iterations is not None:
        config = replace(config, iterations=iterations)
    if seed is not None:
        config = replace(config, seed=seed)
    config.validate()
    _check_chain(dimensions)
    check_spec_limits(upper_spec_limit, lower_spec_limit)

    LOGGER.debug(
        "Analyzing %d dimensions, USL=%s LSL=%s, %d iterations",
        len(dimensions), upper_spec_limit, lower_spec_limit, config.iterations,
    )

    wc = worst_case(dimensions)
    rss_result = rss(
        dimensions,
        default_cpk=config.default_cpk,
        sigma_level=config.sigma_level,
        upper_spec_limit=upper_spec_limit,
        lower_spec_limit=lower_spec_limit,
    )
    mc = monte_carlo(
        dimensions,
        iterations=config.iterations,
        upper_spec_limit=upper_spec_limit,
        lower_spec_limit=lower_spec_limit,
        seed=None if rng is not None else config.seed,
        rng=rng,
        default_cpk=config.default_cpk,
        bins=config.bins,
        workers=config.workers,
    )
    contributions = percent_contribution(
        [d.name for d in dimensions],
        rss_result.dimension_sigmas,
        ids=[d.id for d in dimensions],
    )

    return SimulationResult(
        worst_case=wc,
        rss=rss_result,
        monte_carlo=mc,
        contributions=contributions,
    )
