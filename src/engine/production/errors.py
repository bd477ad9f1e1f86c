"""Failure modes of the production core.

All errors derive from ValueError so callers that already guard engine
calls with ``except ValueError`` keep working. Nothing here is recovered
internally; the simulation driver decides whether to halt or substitute.
"""


class ProductionError(ValueError):
    """Base class for production-core input errors."""


class DimensionMismatchError(ProductionError):
    """Operands of an elementwise division or row-stack do not conform."""


class MaskIndexOutOfRangeError(ProductionError, IndexError):
    """A baseline-mask coordinate falls outside the stock-ratio matrix."""


class InvalidEfficiencyError(ProductionError, ZeroDivisionError):
    """A divisor is zero and the division policy is RAISE."""
