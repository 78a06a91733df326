"""Built-in example tolerance chains for demonstration."""

from stackup.models import Dimension, DimensionType, Distribution, StackupConfig


def create_shaft_housing_example() -> StackupConfig:
    """Classic shaft-in-housing gap.

    Dimension loop:
        +Housing bore depth
        -Shaft length
        -Washer thickness
        -Retaining ring width
        -Snap ring groove depth
        = Gap
    """
    stack = StackupConfig(
        name="Shaft-Housing Assembly",
        description="Gap between shaft end and housing inner wall",
        target_gap_nominal=0.7,
        upper_spec_limit=1.0,
        lower_spec_limit=0.4,
    )

    stack.add(Dimension(
        name="Housing bore depth",
        nominal=50.000,
        tol_plus=0.100,
        tol_minus=0.100,
        sign=+1,
        cpk=1.33,
        type=DimensionType.HOLE,
        process="CNC Milling (Standard)",
    ))

    stack.add(Dimension(
        name="Shaft length",
        nominal=45.000,
        tol_plus=0.050,
        tol_minus=0.050,
        sign=-1,
        cpk=1.33,
        type=DimensionType.SHAFT,
        process="Turning (Standard)",
    ))

    stack.add(Dimension(
        name="Washer thickness",
        nominal=2.000,
        tol_plus=0.025,
        tol_minus=0.025,
        sign=-1,
        distribution=Distribution.UNIFORM,
    ))

    stack.add(Dimension(
        name="Retaining ring width",
        nominal=1.500,
        tol_plus=0.030,
        tol_minus=0.030,
        sign=-1,
        distribution=Distribution.TRAPEZOIDAL,
    ))

    stack.add(Dimension(
        name="Snap ring groove depth",
        nominal=0.800,
        tol_plus=0.020,
        tol_minus=0.020,
        sign=-1,
        cpk=1.0,
    ))

    return stack


def create_two_part_gap_example() -> StackupConfig:
    """Two-part gap: a 10 mm block minus a 5 mm insert."""
    stack = StackupConfig(
        name="Two-Part Gap",
        description="Clearance left by an insert seated in a block",
        target_gap_nominal=5.0,
        upper_spec_limit=5.1,
        lower_spec_limit=4.9,
    )
    stack.add(Dimension(name="Block", nominal=10.0, tol_plus=0.1, tol_minus=0.1,
                        sign=+1, cpk=1.33))
    stack.add(Dimension(name="Insert", nominal=5.0, tol_plus=0.05, tol_minus=0.05,
                        sign=-1, cpk=1.33))
    return stack
