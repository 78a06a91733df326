"""Variance contribution and process capability metrics.

Provides the percent-of-variance breakdown of a dimension chain, the
normal-theory yield estimate used for RSS, and Cp/Cpk/PPM figures computed
from Monte Carlo samples against one- or two-sided specification limits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.stats import norm

from stackup.errors import InvalidInputError


@dataclass
class Contribution:
    """A dimension's share of total assembly variance.

    Attributes:
        name: Display label of the dimension.
        percent: Share of total variance, 0-100.
        id: Identifier of the dimension.
        sigma: Standard deviation estimated for the dimension.
    """
    name: str
    percent: float
    id: Optional[str] = None
    sigma: float = 0.0

    def to_dict(self) -> dict:
        return {"name": self.name, "percent": self.percent, "id": self.id, "sigma": self.sigma}


def percent_contribution(
    names: list[str],
    sigmas: list[float],
    ids: Optional[list[str]] = None,
) -> list[Contribution]:
    """Compute percent contribution of each dimension to total variance.

    contribution_i = sigma_i^2 / sum(sigma_j^2) * 100. When the total
    variance is zero every contribution is 0.

    Args:
        names: Dimension names, in chain order.
        sigmas: Per-dimension standard deviations (same order).
        ids: Optional dimension identifiers (same order).

    Returns:
        List of Contribution sorted by percent descending. Ties keep chain order.
    """
    if len(names) != len(sigmas):
        raise ValueError("names and sigmas must have same length")
    if ids is None:
        ids = [None] * len(names)
    elif len(ids) != len(names):
        raise ValueError("ids and names must have same length")

    variances = [s * s for s in sigmas]
    total_var = sum(variances)

    contributions = [
        Contribution(
            name=name,
            percent=(v / total_var) * 100.0 if total_var > 0 else 0.0,
            id=dim_id,
            sigma=s,
        )
        for name, dim_id, s, v in zip(names, ids, sigmas, variances)
    ]
    return sorted(contributions, key=lambda c: c.percent, reverse=True)


def normal_yield(
    mean: float,
    std: float,
    usl: Optional[float] = None,
    lsl: Optional[float] = None,
) -> Optional[float]:
    """Percent of a normal population falling within the spec limits.

    Returns None when neither limit is given.
    """
    if usl is None and lsl is None:
        return None
    if std <= 0:
        inside = (usl is None or mean <= usl) and (lsl is None or mean >= lsl)
        return 100.0 if inside else 0.0
    upper = norm.cdf(usl, loc=mean, scale=std) if usl is not None else 1.0
    lower = norm.cdf(lsl, loc=mean, scale=std) if lsl is not None else 0.0
    return float(max(upper - lower, 0.0) * 100.0)


@dataclass
class ProcessCapability:
    """Capability of the simulated assembly against its spec limits.

    One-sided limits leave the indices for the missing side as None.
    Indices are also None when the samples have no spread.

    Attributes:
        usl: Upper specification limit.
        lsl: Lower specification limit.
        cp: Spec width over six sigma (two-sided only).
        cpu: Upper one-sided capability.
        cpl: Lower one-sided capability.
        cpk: Smaller of the available one-sided indices.
        ppm_out_of_spec: Simulated parts per million outside the limits.
        sigma_level: 3 * cpk.
        mean: Sample mean.
        std: Sample standard deviation (population).
        n_samples: Number of samples used.
    """
    usl: Optional[float]
    lsl: Optional[float]
    cp: Optional[float] = None
    cpu: Optional[float] = None
    cpl: Optional[float] = None
    cpk: Optional[float] = None
    ppm_out_of_spec: float = 0.0
    sigma_level: Optional[float] = None
    mean: float = 0.0
    std: float = 0.0
    n_samples: int = 0

    def to_dict(self) -> dict:
        return {
            "usl": self.usl,
            "lsl": self.lsl,
            "cp": self.cp,
            "cpu": self.cpu,
            "cpl": self.cpl,
            "cpk": self.cpk,
            "ppmOutOfSpec": self.ppm_out_of_spec,
            "sigmaLevel": self.sigma_level,
            "mean": self.mean,
            "std": self.std,
            "nSamples": self.n_samples,
        }

    def summary(self) -> str:
        def fmt(v: Optional[float]) -> str:
            return "n/a" if v is None else f"{v:.4f}"

        lines = [
            "=== Process Capability ===",
            f"  Specification:  LSL={self.lsl}  USL={self.usl}",
            f"  Cp:             {fmt(self.cp)}",
            f"  Cpk:            {fmt(self.cpk)}",
            f"  Sigma level:    {fmt(self.sigma_level)}",
            f"  PPM out:        {self.ppm_out_of_spec:.1f}",
        ]
        return "\n".join(lines)


def compute_process_capability(
    samples: np.ndarray,
    usl: Optional[float] = None,
    lsl: Optional[float] = None,
) -> ProcessCapability:
    """Compute capability metrics from simulated assembly samples.

    Args:
        samples: 1D array of assembly values.
        usl: Upper specification limit, or None.
        lsl: Lower specification limit, or None.

    Returns:
        ProcessCapability with every index that the limits allow.
    """
    if usl is None and lsl is None:
        raise InvalidInputError("capability needs at least one spec limit")
    samples = np.asarray(samples, dtype=float).ravel()
    n = samples.size
    if n == 0:
        raise InvalidInputError("capability needs at least one sample")

    mean = float(np.mean(samples))
    std = float(np.std(samples))

    n_out = 0
    if usl is not None:
        n_out += int(np.sum(samples > usl))
    if lsl is not None:
        n_out += int(np.sum(samples < lsl))

    pc = ProcessCapability(
        usl=usl,
        lsl=lsl,
        ppm_out_of_spec=(n_out / n) * 1_000_000,
        mean=mean,
        std=std,
        n_samples=n,
    )
    if std <= 0:
        return pc

    if usl is not None:
        pc.cpu = (usl - mean) / (3.0 * std)
    if lsl is not None:
        pc.cpl = (mean - lsl) / (3.0 * std)
    if usl is not None and lsl is not None:
        pc.cp = (usl - lsl) / (6.0 * std)
    pc.cpk = min(v for v in (pc.cpu, pc.cpl) if v is not None)
    pc.sigma_level = 3.0 * pc.cpk
    return pc
