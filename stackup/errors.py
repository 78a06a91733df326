"""Exceptions raised by the stackup engine."""


class StackupError(ValueError):
    """Base class for all stackup analysis errors."""


class InvalidInputError(StackupError):
    """A dimension, spec limit, or run setting is out of range."""


class EmptyChainError(StackupError):
    """The dimension chain contains no dimensions."""
