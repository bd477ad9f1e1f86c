"""Overproduction signal — signed pressure per sector-region.

Compares the first inflow category (VX row 0) against every stock-ratio
row and the order total:

    +1  VX row 0 strictly below every entry of the column
    -1  VX row 0 strictly above at least one entry
     0  otherwise (ties, and columns holding a NaN, are left at zero)

The sign scales |OX - VX row 0| ÷ baseline row 0. Unlike the capacity
evaluators, the stock ratio here is raw: no baseline-mask override.
Only inflow row 0 takes part in the comparison; the other categories are
read for shape checks and ignored.
"""

import logging
from dataclasses import dataclass

import numpy as np

from src.engine.production.capacity import inflow_ratio, order_totals
from src.engine.production.config import ProductionConfig
from src.engine.production.matrix_ops import (
    as_matrix,
    broadcast_row,
    divide,
    stack_rows,
)
from src.engine.production.stock import StockConstraint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverproductionResult:
    """Signed overproduction signal and its parts, all length RR·NN."""

    signal: np.ndarray      # sign ⊙ magnitude
    sign: np.ndarray        # -1.0, 0.0, or +1.0
    magnitude: np.ndarray   # |OX - VX row 0| ÷ baseline row 0
    inflow_row: np.ndarray  # VX row 0
    order_total: np.ndarray

    def to_category_matrix(self, n_inflow_categories: int) -> np.ndarray:
        """UU × RR·NN layout: signal in row 0, zeros in the other categories."""
        if n_inflow_categories < 1:
            msg = "n_inflow_categories must be at least 1."
            raise ValueError(msg)
        out = np.zeros((n_inflow_categories, self.signal.shape[0]))
        out[0, :] = self.signal
        return out


class OverproductionSignal:
    """Computes the overproduction pressure signal for one period."""

    def __init__(self, config: ProductionConfig) -> None:
        self._config = config
        self._stock = StockConstraint(
            override_scale=config.override_scale,
            division_policy=config.division_policy,
        )

    @property
    def config(self) -> ProductionConfig:
        return self._config

    def compute(
        self,
        *,
        stock: np.ndarray,
        stock_efficiency: np.ndarray,
        inflow: np.ndarray,
        inflow_efficiency: np.ndarray,
        orders: np.ndarray,
        baseline: np.ndarray,
    ) -> OverproductionResult:
        """Compute sign, magnitude, and signed signal.

        Raises:
            DimensionMismatchError: If any operand does not conform.
            InvalidEfficiencyError: On a zero divisor (efficiency or
                baseline row 0) under RAISE policy.
        """
        self._config.validate_inputs(
            stock=stock,
            stock_efficiency=stock_efficiency,
            inflow=inflow,
            inflow_efficiency=inflow_efficiency,
            orders=orders,
            baseline=baseline,
        )
        n_columns = self._config.dimensions.n_columns

        zx = self._stock.raw_ratio(stock=stock, stock_efficiency=stock_efficiency)
        vx = inflow_ratio(
            inflow=inflow,
            inflow_efficiency=inflow_efficiency,
            config=self._config,
        )
        ox = order_totals(orders=orders)
        baseline = as_matrix(baseline, "baseline")

        zox = stack_rows(("stock_ratio", zx), ("order_total", ox))
        v_row = vx[:1, :]
        v_rep = broadcast_row(v_row, zox.shape[0], "inflow row 0")

        sign = np.zeros(n_columns)
        sign[np.all(v_rep < zox, axis=0)] = 1.0
        sign[np.any(v_rep > zox, axis=0)] = -1.0
        # a NaN comparison leaves the column undecided
        undefined = np.any(np.isnan(zox), axis=0) | np.isnan(v_row[0])
        sign[undefined] = 0.0

        magnitude = divide(
            np.abs(ox - v_row), baseline[:1, :],
            policy=self._config.division_policy, name="baseline row 0",
        )[0]

        signal = sign * magnitude
        logger.debug(
            "overproduction signal: %d positive, %d negative, %d neutral",
            int(np.sum(sign > 0)), int(np.sum(sign < 0)), int(np.sum(sign == 0)),
        )
        return OverproductionResult(
            signal=signal,
            sign=sign,
            magnitude=magnitude,
            inflow_row=v_row[0],
            order_total=ox[0],
        )


def compute_overproduction_signal(
    stock: np.ndarray,
    stock_efficiency: np.ndarray,
    inflow: np.ndarray,
    inflow_efficiency: np.ndarray,
    orders: np.ndarray,
    baseline: np.ndarray,
    *,
    config: ProductionConfig,
) -> np.ndarray:
    """Signed overproduction vector of length RR·NN."""
    return OverproductionSignal(config).compute(
        stock=stock,
        stock_efficiency=stock_efficiency,
        inflow=inflow,
        inflow_efficiency=inflow_efficiency,
        orders=orders,
        baseline=baseline,
    ).signal
