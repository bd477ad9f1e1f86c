"""Shared fixtures for production-core tests.

The two-sector, two-region model (NN=2, RR=2, UU=2, 4 sector-regions):

    stock ratio ZX = [[5, 4, 2, 4],
                      [5, 2, 3, 6]]
    inflow ratio VX = [[3, 6, 2, 6],
                       [6, 5, 4, 5]]
    order total OX  =  [7, 1, 5, 5]
    baseline row 0  =  [4, 2, 8, 1]   → override row [5, 2.5, 10, 1.25]
"""

import numpy as np
import pytest

from src.engine.production.config import ModelDimensions, ProductionConfig
from src.engine.production.mask import BaselineMask


@pytest.fixture()
def two_region_dimensions() -> ModelDimensions:
    return ModelDimensions(n_sectors=2, n_regions=2, n_inflow_categories=2)


@pytest.fixture()
def two_region_inputs() -> dict[str, np.ndarray]:
    """Operands for the two-sector, two-region model (keyword form)."""
    return {
        "stock": np.array([[10.0, 8.0, 6.0, 4.0],
                           [20.0, 2.0, 9.0, 12.0]]),
        "stock_efficiency": np.array([[2.0, 2.0, 3.0, 1.0],
                                      [4.0, 1.0, 3.0, 2.0]]),
        "inflow": np.array([[9.0, 12.0, 4.0, 30.0],
                            [6.0, 10.0, 8.0, 20.0]]),
        "inflow_efficiency": np.array([[3.0, 2.0, 2.0, 5.0],
                                       [1.0, 2.0, 2.0, 4.0]]),
        "orders": np.array([[4.0, 1.0, 3.0, 3.0],
                            [3.0, 0.0, 2.0, 2.0]]),
        "baseline": np.array([[4.0, 2.0, 8.0, 1.0],
                              [100.0, 100.0, 100.0, 100.0]]),
    }


@pytest.fixture()
def two_region_config(two_region_dimensions) -> ProductionConfig:
    """No baseline override."""
    return ProductionConfig(dimensions=two_region_dimensions)


@pytest.fixture()
def two_region_mask() -> BaselineMask:
    """Overrides ZX[0, 2] → 10.0 and ZX[1, 3] → 1.25."""
    return BaselineMask.from_pairs([(0, 2), (1, 3)])


@pytest.fixture()
def two_region_masked_config(two_region_dimensions, two_region_mask) -> ProductionConfig:
    return ProductionConfig(dimensions=two_region_dimensions, mask=two_region_mask)


@pytest.fixture()
def scalar_dimensions() -> ModelDimensions:
    """NN=1, RR=1, UU=1: a single sector-region."""
    return ModelDimensions(n_sectors=1, n_regions=1, n_inflow_categories=1)


@pytest.fixture()
def scalar_inputs() -> dict[str, np.ndarray]:
    """ZX=[5], VX=[2], OX=[3], baseline row 0 = [4]."""
    return {
        "stock": np.array([[10.0]]),
        "stock_efficiency": np.array([[2.0]]),
        "inflow": np.array([[8.0]]),
        "inflow_efficiency": np.array([[4.0]]),
        "orders": np.array([[3.0]]),
        "baseline": np.array([[4.0]]),
    }


@pytest.fixture()
def make_random_inputs():
    """Factory for strictly positive random operands conforming to dims."""

    def _make(
        rng: np.random.Generator,
        dims: ModelDimensions,
        n_order_sources: int = 3,
    ) -> dict[str, np.ndarray]:
        n_cols = dims.n_columns
        return {
            "stock": rng.uniform(0.0, 100.0, size=dims.stock_shape),
            "stock_efficiency": rng.uniform(0.5, 5.0, size=dims.stock_shape),
            "inflow": rng.uniform(0.0, 100.0, size=dims.inflow_shape),
            "inflow_efficiency": rng.uniform(0.5, 5.0, size=dims.inflow_shape),
            "orders": rng.uniform(0.0, 40.0, size=(n_order_sources, n_cols)),
            "baseline": rng.uniform(1.0, 50.0, size=(dims.n_sectors, n_cols)),
        }

    return _make
