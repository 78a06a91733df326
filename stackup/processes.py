"""Reference table of manufacturing processes and IT tolerance grades.

Typical tolerances are symmetric (+/-) values in millimetres. The table is
static data for callers that want to pre-fill a dimension's tolerance and
capability from a process; the analysis engine never reads it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from stackup.models import Dimension


@dataclass(frozen=True)
class ManufacturingProcess:
    """Typical capability of a manufacturing process.

    Attributes:
        name: Process name, used as the lookup key.
        typical_tol: Typical symmetric tolerance (+/-).
        min_cpk: Capability index the process reliably achieves.
        cost_factor: Relative cost, 1 (low) to 5 (high).
    """
    name: str
    typical_tol: float
    min_cpk: float
    cost_factor: int


@dataclass(frozen=True)
class ITGrade:
    grade: str
    description: str
    value: float


MANUFACTURING_PROCESSES: tuple[ManufacturingProcess, ...] = (
    ManufacturingProcess("CNC Milling (Standard)", 0.05, 1.33, 2),
    ManufacturingProcess("CNC Milling (Precision)", 0.01, 1.33, 4),
    ManufacturingProcess("Turning (Standard)", 0.05, 1.33, 2),
    ManufacturingProcess("Grinding", 0.005, 1.67, 5),
    ManufacturingProcess("Injection Molding (General)", 0.2, 1.33, 1),
    ManufacturingProcess("Injection Molding (Technical)", 0.05, 1.33, 3),
    ManufacturingProcess("3D Printing (FDM)", 0.3, 1.0, 1),
    ManufacturingProcess("3D Printing (SLA)", 0.1, 1.0, 2),
    ManufacturingProcess("Sheet Metal Bending", 0.5, 1.0, 1),
)

# Simplified relative values, not the size-dependent ISO 286 tables.
IT_GRADES: tuple[ITGrade, ...] = (
    ITGrade("IT5", "Precision Engineering (Grinding)", 0.01),
    ITGrade("IT7", "High Quality Machining (Milling/Turning)", 0.03),
    ITGrade("IT9", "General Machining", 0.1),
    ITGrade("IT11", "Punching / Coarse Machining", 0.3),
    ITGrade("IT13", "Casting / Forging", 1.0),
)


def list_processes() -> list[ManufacturingProcess]:
    return list(MANUFACTURING_PROCESSES)


def get_process(name: str) -> ManufacturingProcess:
    """Look up a process by name (case-insensitive)."""
    for p in MANUFACTURING_PROCESSES:
        if p.name.lower() == name.strip().lower():
            return p
    known = ", ".join(p.name for p in MANUFACTURING_PROCESSES)
    raise KeyError(f"unknown process {name!r}; known processes: {known}")


def apply_process(dimension: Dimension, name: str) -> Dimension:
    """Return a copy of ``dimension`` with the process's tolerance and cpk."""
    p = get_process(name)
    return replace(
        dimension,
        tol_plus=p.typical_tol,
        tol_minus=p.typical_tol,
        cpk=p.min_cpk,
        process=p.name,
    )
