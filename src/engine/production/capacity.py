"""Capacity evaluators — constrained production and its ceiling.

Production of each sector-region is the column-wise minimum over a stack
of constraint rows:

    ZX  stock ratio (NN rows, baseline override applied)
    VX  inflow ratio (UU rows)
    OX  total orders (1 row; constrained production only)

Dropping OX can only raise or hold each column minimum, so the ceiling
from MaxCapacityEvaluator is always >= CapacityEvaluator's output.

This module is DETERMINISTIC: given the same inputs, it ALWAYS produces
the same outputs.
"""

import logging
from collections import Counter
from dataclasses import dataclass

import numpy as np

from src.engine.production.config import ProductionConfig
from src.engine.production.matrix_ops import (
    as_matrix,
    column_totals,
    divide,
    stack_rows,
)
from src.engine.production.stock import StockConstraint
from src.models.common import BindingSource

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProductionResult:
    """Production per sector-region plus the constraint rows behind it."""

    output: np.ndarray                 # length RR·NN
    stock_ratio: np.ndarray            # ZX after override, NN × RR·NN
    inflow_ratio: np.ndarray           # VX, UU × RR·NN
    order_total: np.ndarray | None     # OX, length RR·NN; None for the ceiling
    binding_row: np.ndarray            # row of the stacked matrix holding the minimum
    binding_source: tuple[BindingSource, ...]

    def binding_counts(self) -> dict[BindingSource, int]:
        """How many sector-regions each constraint block binds."""
        counts = Counter(self.binding_source)
        return {source: counts.get(source, 0) for source in BindingSource}

    def gap_to(self, ceiling: "ProductionResult") -> np.ndarray:
        """ceiling - output per sector-region (>= 0 when ceiling is the max)."""
        if ceiling.output.shape != self.output.shape:
            msg = (
                f"dimension mismatch: ceiling has {ceiling.output.shape[0]} "
                f"sector-regions, result has {self.output.shape[0]}."
            )
            raise ValueError(msg)
        return ceiling.output - self.output


# ---------------------------------------------------------------------------
# Shared steps
# ---------------------------------------------------------------------------


def inflow_ratio(
    *,
    inflow: np.ndarray,
    inflow_efficiency: np.ndarray,
    config: ProductionConfig,
) -> np.ndarray:
    """VX = inflow ÷ efficiency, UU × RR·NN. Operands are pre-validated."""
    return divide(
        as_matrix(inflow, "inflow"),
        as_matrix(inflow_efficiency, "inflow_efficiency"),
        policy=config.division_policy, name="inflow_efficiency",
    )


def order_totals(*, orders: np.ndarray) -> np.ndarray:
    """OX = orders summed over sources, as a 1 × RR·NN row."""
    return column_totals(as_matrix(orders, "orders"))


def stock_ratio(
    *,
    stock: np.ndarray,
    stock_efficiency: np.ndarray,
    baseline: np.ndarray,
    config: ProductionConfig,
    stock_constraint: StockConstraint,
) -> np.ndarray:
    """ZX with baseline override applied from the run mask."""
    return stock_constraint.effective_stock(
        stock=stock,
        stock_efficiency=stock_efficiency,
        baseline=baseline,
        mask=config.mask,
    )


def _binding_sources(
    binding_row: np.ndarray,
    n_stock_rows: int,
    n_inflow_rows: int,
) -> tuple[BindingSource, ...]:
    sources: list[BindingSource] = []
    for row in binding_row.tolist():
        if row < n_stock_rows:
            sources.append(BindingSource.STOCK)
        elif row < n_stock_rows + n_inflow_rows:
            sources.append(BindingSource.INFLOW)
        else:
            sources.append(BindingSource.ORDER)
    return tuple(sources)


def _column_minimum(stacked: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    # argmin takes the first row on ties, so STOCK wins over INFLOW over ORDER
    return stacked.min(axis=0), stacked.argmin(axis=0)


def _stock_constraint_for(config: ProductionConfig) -> StockConstraint:
    return StockConstraint(
        override_scale=config.override_scale,
        division_policy=config.division_policy,
    )


# ---------------------------------------------------------------------------
# Evaluators
# ---------------------------------------------------------------------------


class CapacityEvaluator:
    """Realized production: min over stock, inflow, and order rows."""

    def __init__(
        self,
        config: ProductionConfig,
        stock_constraint: StockConstraint | None = None,
    ) -> None:
        self._config = config
        self._stock = stock_constraint or _stock_constraint_for(config)

    @property
    def config(self) -> ProductionConfig:
        return self._config

    def evaluate(
        self,
        *,
        stock: np.ndarray,
        stock_efficiency: np.ndarray,
        inflow: np.ndarray,
        inflow_efficiency: np.ndarray,
        orders: np.ndarray,
        baseline: np.ndarray,
    ) -> ProductionResult:
        """Compute constrained production for one period.

        Args:
            stock: Available stock, NN × RR·NN.
            stock_efficiency: Stock conversion divisors, same shape as stock.
            inflow: Inflow/outflow quantities, UU × RR·NN.
            inflow_efficiency: Inflow conversion divisors, same shape as inflow.
            orders: Pending orders, one row per order source × RR·NN.
            baseline: Baseline IO matrix; row 0 anchors masked stock cells.

        Returns:
            ProductionResult whose ``output`` has length RR·NN.

        Raises:
            DimensionMismatchError: If any operand does not conform.
            MaskIndexOutOfRangeError: If the mask is outside the stock ratio.
            InvalidEfficiencyError: On a zero divisor under RAISE policy.
        """
        self._config.validate_inputs(
            stock=stock,
            stock_efficiency=stock_efficiency,
            inflow=inflow,
            inflow_efficiency=inflow_efficiency,
            orders=orders,
            baseline=baseline,
        )
        zx = stock_ratio(
            stock=stock,
            stock_efficiency=stock_efficiency,
            baseline=baseline,
            config=self._config,
            stock_constraint=self._stock,
        )
        vx = inflow_ratio(
            inflow=inflow,
            inflow_efficiency=inflow_efficiency,
            config=self._config,
        )
        ox = order_totals(orders=orders)

        stacked = stack_rows(("stock_ratio", zx), ("inflow_ratio", vx), ("order_total", ox))
        output, binding_row = _column_minimum(stacked)
        sources = _binding_sources(binding_row, zx.shape[0], vx.shape[0])

        result = ProductionResult(
            output=output,
            stock_ratio=zx,
            inflow_ratio=vx,
            order_total=ox[0],
            binding_row=binding_row,
            binding_source=sources,
        )
        logger.debug(
            "production evaluated for %d sector-regions: %s",
            output.shape[0], result.binding_counts(),
        )
        return result


class MaxCapacityEvaluator:
    """Theoretical ceiling: min over stock and inflow rows, orders ignored."""

    def __init__(
        self,
        config: ProductionConfig,
        stock_constraint: StockConstraint | None = None,
    ) -> None:
        self._config = config
        self._stock = stock_constraint or _stock_constraint_for(config)

    @property
    def config(self) -> ProductionConfig:
        return self._config

    def evaluate(
        self,
        *,
        stock: np.ndarray,
        stock_efficiency: np.ndarray,
        inflow: np.ndarray,
        inflow_efficiency: np.ndarray,
        baseline: np.ndarray,
    ) -> ProductionResult:
        """Compute maximum producible output for one period.

        Same operands as CapacityEvaluator.evaluate without ``orders``.
        The result's ``order_total`` is None.
        """
        self._config.validate_inputs(
            stock=stock,
            stock_efficiency=stock_efficiency,
            inflow=inflow,
            inflow_efficiency=inflow_efficiency,
            baseline=baseline,
        )
        zx = stock_ratio(
            stock=stock,
            stock_efficiency=stock_efficiency,
            baseline=baseline,
            config=self._config,
            stock_constraint=self._stock,
        )
        vx = inflow_ratio(
            inflow=inflow,
            inflow_efficiency=inflow_efficiency,
            config=self._config,
        )

        stacked = stack_rows(("stock_ratio", zx), ("inflow_ratio", vx))
        output, binding_row = _column_minimum(stacked)
        sources = _binding_sources(binding_row, zx.shape[0], vx.shape[0])

        logger.debug("max capacity evaluated for %d sector-regions", output.shape[0])
        return ProductionResult(
            output=output,
            stock_ratio=zx,
            inflow_ratio=vx,
            order_total=None,
            binding_row=binding_row,
            binding_source=sources,
        )


# ---------------------------------------------------------------------------
# Functional interface
# ---------------------------------------------------------------------------


def compute_production(
    stock: np.ndarray,
    stock_efficiency: np.ndarray,
    inflow: np.ndarray,
    inflow_efficiency: np.ndarray,
    orders: np.ndarray,
    baseline: np.ndarray,
    *,
    config: ProductionConfig,
) -> np.ndarray:
    """Constrained production vector of length RR·NN."""
    return CapacityEvaluator(config).evaluate(
        stock=stock,
        stock_efficiency=stock_efficiency,
        inflow=inflow,
        inflow_efficiency=inflow_efficiency,
        orders=orders,
        baseline=baseline,
    ).output


def compute_max_production(
    stock: np.ndarray,
    stock_efficiency: np.ndarray,
    inflow: np.ndarray,
    inflow_efficiency: np.ndarray,
    baseline: np.ndarray,
    *,
    config: ProductionConfig,
) -> np.ndarray:
    """Maximum producible vector of length RR·NN (orders ignored)."""
    return MaxCapacityEvaluator(config).evaluate(
        stock=stock,
        stock_efficiency=stock_efficiency,
        inflow=inflow,
        inflow_efficiency=inflow_efficiency,
        baseline=baseline,
    ).output
