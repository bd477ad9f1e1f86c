"""Run configuration for the production core.

Replaces the ambient NN/RR/UU constants and the global ``mat.key`` with
one immutable object built at simulation setup and passed to every call.
"""

import numpy as np
from pydantic import Field, InstanceOf, model_validator

from src.config.settings import Settings
from src.engine.production.mask import BaselineMask
from src.engine.production.matrix_ops import (
    as_matrix,
    require_columns,
    require_rows,
    require_same_shape,
)
from src.models.common import (
    DivisionPolicy,
    ProductionBase,
    UTCTimestamp,
    UUIDv7,
    new_uuid7,
    utc_now,
)

DEFAULT_OVERRIDE_SCALE = 1.25


class ModelDimensions(ProductionBase, frozen=True):
    """Fixed dimension constants for a whole run."""

    n_sectors: int = Field(..., gt=0, description="NN: number of sectors.")
    n_regions: int = Field(..., gt=0, description="RR: number of regions.")
    n_inflow_categories: int = Field(
        ..., gt=0, description="UU: number of inflow/outflow categories.",
    )

    @property
    def n_columns(self) -> int:
        """RR·NN sector-region columns."""
        return self.n_regions * self.n_sectors

    @property
    def stock_shape(self) -> tuple[int, int]:
        return (self.n_sectors, self.n_columns)

    @property
    def inflow_shape(self) -> tuple[int, int]:
        return (self.n_inflow_categories, self.n_columns)


class ProductionConfig(ProductionBase, frozen=True):
    """Immutable per-run configuration shared by all production operations."""

    config_id: UUIDv7 = Field(default_factory=new_uuid7)
    dimensions: ModelDimensions
    mask: InstanceOf[BaselineMask] = Field(default_factory=BaselineMask.empty)
    division_policy: DivisionPolicy = DivisionPolicy.PROPAGATE
    override_scale: float = Field(default=DEFAULT_OVERRIDE_SCALE, gt=0)
    created_at: UTCTimestamp = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _validate_mask(self) -> "ProductionConfig":
        self.mask.validate_within(self.dimensions.stock_shape)
        return self

    @classmethod
    def from_settings(
        cls,
        *,
        dimensions: ModelDimensions,
        mask: BaselineMask | None = None,
        settings: Settings,
    ) -> "ProductionConfig":
        """Build a config taking policy and scale defaults from settings."""
        return cls(
            dimensions=dimensions,
            mask=mask if mask is not None else BaselineMask.empty(),
            division_policy=settings.DIVISION_POLICY,
            override_scale=settings.BASELINE_OVERRIDE_SCALE,
        )

    def validate_inputs(
        self,
        *,
        stock: np.ndarray,
        stock_efficiency: np.ndarray,
        inflow: np.ndarray,
        inflow_efficiency: np.ndarray,
        orders: np.ndarray | None = None,
        baseline: np.ndarray,
    ) -> None:
        """Check every operand against the run dimensions.

        Stock and its efficiency must be NN × RR·NN, inflow and its
        efficiency UU × RR·NN. Orders (when given) and baseline need
        RR·NN columns and any number of rows.

        Raises:
            DimensionMismatchError: Naming the first operand that does not
                conform.
        """
        dims = self.dimensions

        stock = as_matrix(stock, "stock")
        stock_efficiency = as_matrix(stock_efficiency, "stock_efficiency")
        require_rows(stock, dims.n_sectors, "stock")
        require_columns(stock, dims.n_columns, "stock")
        require_same_shape(stock, stock_efficiency, ("stock", "stock_efficiency"))

        inflow = as_matrix(inflow, "inflow")
        inflow_efficiency = as_matrix(inflow_efficiency, "inflow_efficiency")
        require_rows(inflow, dims.n_inflow_categories, "inflow")
        require_columns(inflow, dims.n_columns, "inflow")
        require_same_shape(inflow, inflow_efficiency, ("inflow", "inflow_efficiency"))

        if orders is not None:
            require_columns(as_matrix(orders, "orders"), dims.n_columns, "orders")
        require_columns(as_matrix(baseline, "baseline"), dims.n_columns, "baseline")
