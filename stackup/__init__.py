"""1D Tolerance Stackup Analysis.

Propagates manufacturing tolerances on a chain of signed dimensions into
the variation of an assembly gap using:
- Worst-case interval bounds
- RSS (root-sum-square) statistical bounds
- Monte Carlo simulation (Normal, Uniform, Trapezoidal, Bernoulli) with
  histogram, yield, and process capability
- Per-dimension variance contribution

Additional capabilities:
- JSON round-trip of stackup definitions
- Manufacturing process / IT grade reference table
- Seeded, optionally parallel Monte Carlo
"""

from stackup.errors import StackupError, InvalidInputError, EmptyChainError
from stackup.models import Dimension, DimensionType, Distribution, StackupConfig
from stackup.config import AnalysisConfig, DEFAULT_CPK
from stackup.analysis import (
    analyze_stackup, worst_case, rss, monte_carlo,
    WorstCaseResult, RSSResult, MonteCarloResult, SimulationResult,
)
from stackup.sampling import sample_dimension
from stackup.histogram import HistogramBin, build_histogram
from stackup.statistics import (
    Contribution, percent_contribution,
    ProcessCapability, compute_process_capability,
)
from stackup.processes import (
    ManufacturingProcess, MANUFACTURING_PROCESSES, IT_GRADES,
    get_process, apply_process, list_processes,
)

__all__ = [
    # Errors
    "StackupError", "InvalidInputError", "EmptyChainError",
    # Core models
    "Dimension", "DimensionType", "Distribution", "StackupConfig",
    "AnalysisConfig", "DEFAULT_CPK",
    # Analysis
    "analyze_stackup", "worst_case", "rss", "monte_carlo",
    "WorstCaseResult", "RSSResult", "MonteCarloResult", "SimulationResult",
    "sample_dimension", "HistogramBin", "build_histogram",
    # Statistics
    "Contribution", "percent_contribution",
    "ProcessCapability", "compute_process_capability",
    # Process table
    "ManufacturingProcess", "MANUFACTURING_PROCESSES", "IT_GRADES",
    "get_process", "apply_process", "list_processes",
]
__version__ = "0.1.0"
