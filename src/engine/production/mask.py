"""Baseline-substitution mask.

Coordinates in the NN × (RR·NN) stock-ratio matrix whose value is taken
from the scaled baseline row instead of stock ÷ efficiency. The mask is
precomputed outside this package, built once at setup, and shared
read-only by every production call.
"""

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from src.engine.production.errors import DimensionMismatchError, MaskIndexOutOfRangeError


@dataclass(frozen=True)
class BaselineMask:
    """Immutable set of (row, col) coordinates."""

    coordinates: frozenset[tuple[int, int]] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for row, col in self.coordinates:
            if row < 0 or col < 0:
                msg = f"mask coordinate ({row}, {col}) must be non-negative."
                raise MaskIndexOutOfRangeError(msg)

    # -- constructors -------------------------------------------------------

    @classmethod
    def empty(cls) -> "BaselineMask":
        return cls()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[int, int]]) -> "BaselineMask":
        """Build from (row, col) pairs, e.g. a two-column index matrix."""
        coords = set()
        for pair in pairs:
            row, col = pair
            coords.add((int(row), int(col)))
        return cls(coordinates=frozenset(coords))

    @classmethod
    def from_linear_indices(
        cls,
        indices: Iterable[int],
        shape: tuple[int, int],
    ) -> "BaselineMask":
        """Build from 0-based column-major linear indices into ``shape``.

        Column-major is how linear indices into a matrix are laid out when
        the key was exported from R or Fortran tooling.
        """
        n_rows, n_cols = shape
        size = n_rows * n_cols
        flat = np.asarray(list(indices), dtype=np.int64)
        if flat.size and (flat.min() < 0 or flat.max() >= size):
            bad = int(flat[(flat < 0) | (flat >= size)][0])
            msg = f"linear mask index {bad} is outside a {n_rows}×{n_cols} matrix."
            raise MaskIndexOutOfRangeError(msg)
        rows, cols = np.unravel_index(flat, shape, order="F")
        return cls.from_pairs(zip(rows.tolist(), cols.tolist()))

    @classmethod
    def from_boolean(cls, matrix: np.ndarray) -> "BaselineMask":
        """Build from a logical matrix: every True cell is masked."""
        arr = np.asarray(matrix, dtype=bool)
        if arr.ndim != 2:
            msg = f"dimension mismatch: boolean mask must be 2-D, got {arr.ndim}-D."
            raise DimensionMismatchError(msg)
        rows, cols = np.nonzero(arr)
        return cls.from_pairs(zip(rows.tolist(), cols.tolist()))

    # -- queries ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.coordinates)

    def __contains__(self, item: object) -> bool:
        return item in self.coordinates

    @property
    def is_empty(self) -> bool:
        return not self.coordinates

    def validate_within(self, shape: tuple[int, int]) -> None:
        """Raise MaskIndexOutOfRangeError if any coordinate is outside shape."""
        n_rows, n_cols = shape
        for row, col in sorted(self.coordinates):
            if row >= n_rows or col >= n_cols:
                msg = (
                    f"mask coordinate ({row}, {col}) is outside the "
                    f"{n_rows}×{n_cols} stock-ratio matrix."
                )
                raise MaskIndexOutOfRangeError(msg)

    def index_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """(rows, cols) arrays for numpy fancy indexing, in sorted order."""
        ordered = sorted(self.coordinates)
        rows = np.array([r for r, _ in ordered], dtype=np.intp)
        cols = np.array([c for _, c in ordered], dtype=np.intp)
        return rows, cols

    def to_boolean(self, shape: tuple[int, int]) -> np.ndarray:
        """Boolean matrix of ``shape`` with True on every masked cell."""
        self.validate_within(shape)
        out = np.zeros(shape, dtype=bool)
        if self.coordinates:
            out[self.index_arrays()] = True
        return out

    @property
    def checksum(self) -> str:
        """SHA-256 over the sorted coordinates, for run reproducibility."""
        hasher = hashlib.sha256()
        for row, col in sorted(self.coordinates):
            hasher.update(f"{row},{col};".encode())
        return f"sha256:{hasher.hexdigest()}"
