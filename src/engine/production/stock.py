"""Stock constraint — effective producible quantity from material stock.

ZX = stock ÷ efficiency, with masked cells replaced by a scaled copy of
the baseline row. Masked cells are sector-regions where a stock ratio has
no meaning (self-consumption, undefined production paths) and production
is instead anchored to baseline throughput.
"""

import numpy as np

from src.engine.production.config import DEFAULT_OVERRIDE_SCALE
from src.engine.production.mask import BaselineMask
from src.engine.production.matrix_ops import (
    as_matrix,
    broadcast_row,
    divide,
    require_columns,
    require_same_shape,
)
from src.models.common import DivisionPolicy


class StockConstraint:
    """Computes the stock-ratio matrix ZX (NN × RR·NN)."""

    def __init__(
        self,
        *,
        override_scale: float = DEFAULT_OVERRIDE_SCALE,
        division_policy: DivisionPolicy = DivisionPolicy.PROPAGATE,
    ) -> None:
        self._override_scale = override_scale
        self._division_policy = division_policy

    @property
    def override_scale(self) -> float:
        return self._override_scale

    def raw_ratio(
        self,
        *,
        stock: np.ndarray,
        stock_efficiency: np.ndarray,
        skip: np.ndarray | None = None,
    ) -> np.ndarray:
        """Stock ÷ efficiency elementwise, no baseline override.

        ``skip`` marks cells the caller overwrites; zero efficiencies there
        are not treated as errors.

        Raises:
            DimensionMismatchError: If stock and efficiency shapes differ.
            InvalidEfficiencyError: On a zero efficiency under RAISE policy.
        """
        stock = as_matrix(stock, "stock")
        stock_efficiency = as_matrix(stock_efficiency, "stock_efficiency")
        require_same_shape(stock, stock_efficiency, ("stock", "stock_efficiency"))
        return divide(
            stock, stock_efficiency,
            policy=self._division_policy, name="stock_efficiency", skip=skip,
        )

    def override_values(
        self,
        *,
        baseline: np.ndarray,
        n_rows: int,
    ) -> np.ndarray:
        """Baseline row 0 replicated to n_rows rows and scaled."""
        baseline = as_matrix(baseline, "baseline")
        return self._override_scale * broadcast_row(
            baseline[:1, :], n_rows, "baseline row 0",
        )

    def effective_stock(
        self,
        *,
        stock: np.ndarray,
        stock_efficiency: np.ndarray,
        baseline: np.ndarray,
        mask: BaselineMask,
    ) -> np.ndarray:
        """Stock ratio with masked cells replaced by the scaled baseline.

        Masked cells never depend on stock or efficiency, so a zero
        efficiency there is not an error under any policy.
        Returns a new array; inputs are not modified.

        Raises:
            DimensionMismatchError: If the baseline width differs from ZX.
            MaskIndexOutOfRangeError: If a mask coordinate is outside ZX.
        """
        if mask.is_empty:
            return self.raw_ratio(stock=stock, stock_efficiency=stock_efficiency)

        stock = as_matrix(stock, "stock")
        baseline = as_matrix(baseline, "baseline")
        require_columns(baseline, stock.shape[1], "baseline")
        masked = mask.to_boolean(stock.shape)

        zx = self.raw_ratio(stock=stock, stock_efficiency=stock_efficiency, skip=masked)
        temp = self.override_values(baseline=baseline, n_rows=zx.shape[0])
        zx[masked] = temp[masked]
        return zx
