"""Dense-matrix helpers shared by the production operations.

Shape checks are explicit: nothing here relies on numpy broadcasting to
line up operands, so a wrong row count fails loudly instead of silently
replicating data.
"""

import logging

import numpy as np

from src.engine.production.errors import DimensionMismatchError, InvalidEfficiencyError
from src.models.common import DivisionPolicy

logger = logging.getLogger(__name__)


def as_matrix(values: np.ndarray, name: str) -> np.ndarray:
    """Coerce to a float64 2-D array. A 1-D vector becomes a single row."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim == 1:
        return arr[np.newaxis, :]
    if arr.ndim != 2:
        msg = f"dimension mismatch: {name} must be 1-D or 2-D, got {arr.ndim}-D."
        raise DimensionMismatchError(msg)
    return arr


def require_same_shape(
    a: np.ndarray,
    b: np.ndarray,
    names: tuple[str, str],
) -> None:
    """Raise unless a and b have identical shapes."""
    if a.shape != b.shape:
        msg = (
            f"dimension mismatch: {names[0]} is {a.shape[0]}×{a.shape[1]} "
            f"but {names[1]} is {b.shape[0]}×{b.shape[1]}."
        )
        raise DimensionMismatchError(msg)


def require_columns(matrix: np.ndarray, n_columns: int, name: str) -> None:
    """Raise unless the matrix has exactly n_columns columns."""
    if matrix.shape[1] != n_columns:
        msg = (
            f"dimension mismatch: {name} has {matrix.shape[1]} columns, "
            f"expected {n_columns} sector-regions."
        )
        raise DimensionMismatchError(msg)


def require_rows(matrix: np.ndarray, n_rows: int, name: str) -> None:
    """Raise unless the matrix has exactly n_rows rows."""
    if matrix.shape[0] != n_rows:
        msg = (
            f"dimension mismatch: {name} has {matrix.shape[0]} rows, "
            f"expected {n_rows}."
        )
        raise DimensionMismatchError(msg)


def broadcast_row(row: np.ndarray, n_rows: int, name: str) -> np.ndarray:
    """Replicate a single-row matrix to n_rows rows.

    Raises:
        DimensionMismatchError: If ``row`` does not have exactly one row.
    """
    row = as_matrix(row, name)
    if row.shape[0] != 1:
        msg = (
            f"dimension mismatch: broadcast_row needs a single row but "
            f"{name} has {row.shape[0]} rows."
        )
        raise DimensionMismatchError(msg)
    return np.repeat(row, n_rows, axis=0)


def stack_rows(*blocks: tuple[str, np.ndarray]) -> np.ndarray:
    """Row-stack named blocks after checking they share a column count."""
    if not blocks:
        msg = "stack_rows needs at least one block."
        raise ValueError(msg)
    first_name, first = blocks[0]
    for name, block in blocks[1:]:
        if block.shape[1] != first.shape[1]:
            msg = (
                f"dimension mismatch: cannot stack {name} "
                f"({block.shape[1]} columns) under {first_name} "
                f"({first.shape[1]} columns)."
            )
            raise DimensionMismatchError(msg)
    return np.vstack([block for _, block in blocks])


def column_totals(matrix: np.ndarray) -> np.ndarray:
    """Column-wise sum, returned as a 1×n row."""
    return matrix.sum(axis=0, keepdims=True)


def divide(
    numerator: np.ndarray,
    divisor: np.ndarray,
    *,
    policy: DivisionPolicy,
    name: str,
    skip: np.ndarray | None = None,
) -> np.ndarray:
    """Elementwise numerator ÷ divisor under the given zero-divisor policy.

    Shapes must already match; callers check them with require_same_shape.
    ``skip`` is an optional boolean matrix of cells the caller overwrites
    afterwards. Zero divisors there are neither raised nor reported.
    """
    any_zero = divisor == 0
    if not any_zero.any():
        return numerator / divisor

    zero = any_zero if skip is None else any_zero & ~skip

    if policy == DivisionPolicy.RAISE and zero.any():
        rows, cols = np.nonzero(zero)
        msg = (
            f"{name} has {int(zero.sum())} zero divisor(s), "
            f"first at ({int(rows[0])}, {int(cols[0])})."
        )
        raise InvalidEfficiencyError(msg)

    if policy == DivisionPolicy.CLAMP_ZERO:
        out = np.zeros_like(numerator)
        np.divide(numerator, divisor, out=out, where=~any_zero)
        return out

    with np.errstate(divide="ignore", invalid="ignore"):
        result = numerator / divisor
    if zero.any():
        logger.warning(
            "%s: %d zero divisor(s) propagated as non-finite values",
            name, int(zero.sum()),
        )
    return result
