"""Run settings for stackup analysis."""

from __future__ import annotations

import numbers
from dataclasses import asdict, dataclass
from typing import Optional

from stackup.errors import InvalidInputError

DEFAULT_ITERATIONS = 10_000
DEFAULT_BINS = 40
# Used by both RSS and Monte Carlo when a dimension has no cpk.
DEFAULT_CPK = 1.33
DEFAULT_SIGMA_LEVEL = 3.0


@dataclass
class AnalysisConfig:
    """Configuration bundle for one analysis run.

    Attributes:
        iterations: Number of Monte Carlo assemblies to simulate.
        bins: Number of histogram bins.
        default_cpk: Capability index for dimensions that leave cpk unset.
        sigma_level: Multiplier applied to the assembly sigma for RSS bounds.
        workers: Number of Monte Carlo chunks run on a thread pool.
        seed: Random seed; None draws fresh entropy on every run.
    """
    iterations: int = DEFAULT_ITERATIONS
    bins: int = DEFAULT_BINS
    default_cpk: float = DEFAULT_CPK
    sigma_level: float = DEFAULT_SIGMA_LEVEL
    workers: int = 1
    seed: Optional[int] = None

    def validate(self) -> None:
        """Raise InvalidInputError for settings that cannot produce a result."""
        _check_positive_int("iterations", self.iterations)
        _check_positive_int("bins", self.bins)
        _check_positive_int("workers", self.workers)
        if not self.default_cpk > 0:
            raise InvalidInputError(f"default_cpk must be > 0, got {self.default_cpk}")
        if not self.sigma_level > 0:
            raise InvalidInputError(f"sigma_level must be > 0, got {self.sigma_level}")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> AnalysisConfig:
        return cls(
            iterations=int(d.get("iterations", DEFAULT_ITERATIONS)),
            bins=int(d.get("bins", DEFAULT_BINS)),
            default_cpk=float(d.get("default_cpk", DEFAULT_CPK)),
            sigma_level=float(d.get("sigma_level", DEFAULT_SIGMA_LEVEL)),
            workers=int(d.get("workers", 1)),
            seed=d.get("seed"),
        )


def _check_positive_int(name: str, value) -> None:
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 1:
        raise InvalidInputError(f"{name} must be a positive integer, got {value!r}")
