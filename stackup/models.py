"""Data models for one-dimensional tolerance chain analysis."""

from __future__ import annotations

import json
import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from stackup.errors import InvalidInputError


class Distribution(Enum):
    """Statistical distribution assumed for a dimension in Monte Carlo."""
    NORMAL = "Normal"
    UNIFORM = "Uniform"
    TRAPEZOIDAL = "Trapezoidal"
    BERNOULLI = "Bernoulli"


class DimensionType(Enum):
    """Classification tag for a dimension. Not used by the numeric core."""
    LINEAR = "Linear"
    HOLE = "Hole"
    SHAFT = "Shaft"
    RADIAL = "Radial"


def _parse_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if isinstance(value, str) and value.lower() in (member.value.lower(), member.name.lower()):
            return member
    raise InvalidInputError(f"unknown {field_name}: {value!r}")


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value}")


@dataclass
class Dimension:
    """A single link in a tolerance chain.

    Attributes:
        name: Display label.
        nominal: Design value.
        tol_plus: Allowed positive deviation (non-negative).
        tol_minus: Allowed negative deviation (non-negative, subtracted).
        sign: +1 if the dimension adds to the gap, -1 if it subtracts.
        distribution: Distribution sampled in Monte Carlo.
        cpk: Process capability index, or None for the analysis default.
        type: Classification tag carried through to the caller.
        process: Optional name of a process-table entry.
        id: Caller-owned identifier.
    """
    name: str
    nominal: float
    tol_plus: float
    tol_minus: float
    sign: int = 1
    distribution: Distribution = Distribution.NORMAL
    cpk: Optional[float] = None
    type: DimensionType = DimensionType.LINEAR
    process: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    def __post_init__(self) -> None:
        self.distribution = _parse_enum(Distribution, self.distribution, "distribution")
        self.type = _parse_enum(DimensionType, self.type, "dimension type")
        self.validate()

    def validate(self) -> None:
        """Raise InvalidInputError if any field breaks the chain invariants."""
        if self.sign not in (1, -1):
            raise InvalidInputError(f"{self.name}: sign must be +1 or -1, got {self.sign}")
        _check_finite(f"{self.name}: nominal", self.nominal)
        _check_finite(f"{self.name}: tol_plus", self.tol_plus)
        _check_finite(f"{self.name}: tol_minus", self.tol_minus)
        if self.tol_plus < 0:
            raise InvalidInputError(f"{self.name}: tol_plus must be >= 0, got {self.tol_plus}")
        if self.tol_minus < 0:
            raise InvalidInputError(f"{self.name}: tol_minus must be >= 0, got {self.tol_minus}")
        if self.cpk is not None:
            _check_finite(f"{self.name}: cpk", self.cpk)
            if self.cpk <= 0:
                raise InvalidInputError(f"{self.name}: cpk must be > 0, got {self.cpk}")

    @property
    def tolerance_band(self) -> float:
        """Total tolerance band."""
        return self.tol_plus + self.tol_minus

    @property
    def midpoint_shift(self) -> float:
        """Shift of the band centre from nominal due to asymmetric tolerances."""
        return (self.tol_plus - self.tol_minus) / 2.0

    @property
    def upper(self) -> float:
        return self.nominal + self.tol_plus

    @property
    def lower(self) -> float:
        return self.nominal - self.tol_minus

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "nominal": self.nominal,
            "tolPlus": self.tol_plus,
            "tolMinus": self.tol_minus,
            "sign": self.sign,
            "distribution": self.distribution.value,
            "cpk": self.cpk,
            "type": self.type.value,
            "process": self.process,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Dimension:
        if d.get("nominal") is None:
            raise InvalidInputError(f"dimension {d.get('name', '')!r} has no nominal")
        kwargs = dict(
            name=d.get("name", ""),
            nominal=float(d["nominal"]),
            tol_plus=float(d.get("tolPlus", d.get("tol_plus", 0.0))),
            tol_minus=float(d.get("tolMinus", d.get("tol_minus", 0.0))),
            sign=int(d.get("sign", 1)),
            distribution=d.get("distribution", Distribution.NORMAL.value),
            cpk=None if d.get("cpk") is None else float(d["cpk"]),
            type=d.get("type", DimensionType.LINEAR.value),
            process=d.get("process"),
        )
        if d.get("id") is not None:
            kwargs["id"] = str(d["id"])
        return cls(**kwargs)


@dataclass
class StackupConfig:
    """A dimension chain plus its optional specification limits.

    Attributes:
        name: Descriptive name for the stack.
        dimensions: Ordered list of Dimension objects in the chain.
        upper_spec_limit: USL on the assembly value, or None for no limit.
        lower_spec_limit: LSL on the assembly value, or None for no limit.
        description: Optional longer description.
        target_gap_nominal: Design target, carried for the caller.
        id: Caller-owned identifier.
    """
    name: str
    dimensions: list[Dimension] = field(default_factory=list)
    upper_spec_limit: Optional[float] = None
    lower_spec_limit: Optional[float] = None
    description: str = ""
    target_gap_nominal: Optional[float] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    def __post_init__(self) -> None:
        check_spec_limits(self.upper_spec_limit, self.lower_spec_limit)

    def add(self, dimension: Dimension) -> None:
        """Append a dimension to the chain."""
        self.dimensions.append(dimension)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "targetGapNominal": self.target_gap_nominal,
            "upperSpecLimit": self.upper_spec_limit,
            "lowerSpecLimit": self.lower_spec_limit,
            "dimensions": [d.to_dict() for d in self.dimensions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> StackupConfig:
        kwargs = dict(
            name=data.get("name", ""),
            description=data.get("description", ""),
            target_gap_nominal=data.get("targetGapNominal"),
            upper_spec_limit=data.get("upperSpecLimit"),
            lower_spec_limit=data.get("lowerSpecLimit"),
            dimensions=[Dimension.from_dict(d) for d in data.get("dimensions", [])],
        )
        if data.get("id") is not None:
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)

    def save(self, path: str) -> None:
        """Save the configuration to a JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> StackupConfig:
        """Load a configuration from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)


def check_spec_limits(upper: Optional[float], lower: Optional[float]) -> None:
    """Validate a pair of independently optional spec limits."""
    for label, value in (("upper_spec_limit", upper), ("lower_spec_limit", lower)):
        if value is not None:
            _check_finite(label, value)
    if upper is not None and lower is not None and lower > upper:
        raise InvalidInputError(
            f"lower_spec_limit ({lower}) must not exceed upper_spec_limit ({upper})"
        )
