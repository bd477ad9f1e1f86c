"""Tests for StockConstraint — stock ratio and baseline override."""

import logging

import numpy as np
import pytest

from src.engine.production.errors import (
    DimensionMismatchError,
    InvalidEfficiencyError,
    MaskIndexOutOfRangeError,
)
from src.engine.production.mask import BaselineMask
from src.engine.production.stock import StockConstraint
from src.models.common import DivisionPolicy


class TestRawRatio:

    def test_elementwise_division(self, two_region_inputs) -> None:
        zx = StockConstraint().raw_ratio(
            stock=two_region_inputs["stock"],
            stock_efficiency=two_region_inputs["stock_efficiency"],
        )
        np.testing.assert_array_almost_equal(zx, [[5.0, 4.0, 2.0, 4.0], [5.0, 2.0, 3.0, 6.0]])

    def test_shape_mismatch(self) -> None:
        with pytest.raises(DimensionMismatchError):
            StockConstraint().raw_ratio(stock=np.ones((2, 4)), stock_efficiency=np.ones((4, 2)))


class TestEffectiveStock:

    def test_empty_mask_equals_raw(self, two_region_inputs) -> None:
        constraint = StockConstraint()
        raw = constraint.raw_ratio(
            stock=two_region_inputs["stock"],
            stock_efficiency=two_region_inputs["stock_efficiency"],
        )
        effective = constraint.effective_stock(
            stock=two_region_inputs["stock"],
            stock_efficiency=two_region_inputs["stock_efficiency"],
            baseline=two_region_inputs["baseline"],
            mask=BaselineMask.empty(),
        )
        np.testing.assert_array_equal(raw, effective)

    def test_masked_cells_take_scaled_baseline(self, two_region_inputs, two_region_mask) -> None:
        zx = StockConstraint().effective_stock(
            stock=two_region_inputs["stock"],
            stock_efficiency=two_region_inputs["stock_efficiency"],
            baseline=two_region_inputs["baseline"],
            mask=two_region_mask,
        )
        baseline_row = two_region_inputs["baseline"][0]
        for row, col in two_region_mask.coordinates:
            assert zx[row, col] == pytest.approx(1.25 * baseline_row[col])
        # untouched cells keep the ratio
        assert zx[0, 0] == pytest.approx(5.0)
        assert zx[1, 2] == pytest.approx(3.0)

    def test_custom_scale(self, two_region_inputs, two_region_mask) -> None:
        zx = StockConstraint(override_scale=2.0).effective_stock(
            stock=two_region_inputs["stock"],
            stock_efficiency=two_region_inputs["stock_efficiency"],
            baseline=two_region_inputs["baseline"],
            mask=two_region_mask,
        )
        assert zx[0, 2] == pytest.approx(16.0)
        assert zx[1, 3] == pytest.approx(2.0)

    def test_override_values_replicate_row_zero(self, two_region_inputs) -> None:
        temp = StockConstraint().override_values(
            baseline=two_region_inputs["baseline"], n_rows=3,
        )
        assert temp.shape == (3, 4)
        np.testing.assert_array_almost_equal(temp[2], [5.0, 2.5, 10.0, 1.25])

    def test_mask_out_of_range(self, two_region_inputs) -> None:
        with pytest.raises(MaskIndexOutOfRangeError):
            StockConstraint().effective_stock(
                stock=two_region_inputs["stock"],
                stock_efficiency=two_region_inputs["stock_efficiency"],
                baseline=two_region_inputs["baseline"],
                mask=BaselineMask.from_pairs([(2, 0)]),
            )

    def test_baseline_width_mismatch(self, two_region_inputs, two_region_mask) -> None:
        with pytest.raises(DimensionMismatchError, match="baseline"):
            StockConstraint().effective_stock(
                stock=two_region_inputs["stock"],
                stock_efficiency=two_region_inputs["stock_efficiency"],
                baseline=np.ones((1, 3)),
                mask=two_region_mask,
            )

    def test_inputs_untouched(self, two_region_inputs, two_region_mask) -> None:
        stock = two_region_inputs["stock"].copy()
        StockConstraint().effective_stock(
            stock=two_region_inputs["stock"],
            stock_efficiency=two_region_inputs["stock_efficiency"],
            baseline=two_region_inputs["baseline"],
            mask=two_region_mask,
        )
        np.testing.assert_array_equal(two_region_inputs["stock"], stock)


class TestZeroEfficiencyInMaskedCell:
    """A masked cell takes the baseline whatever its stock and efficiency."""

    stock = np.array([[10.0, 6.0]])
    efficiency = np.array([[0.0, 3.0]])
    baseline = np.array([[4.0, 1.0]])
    mask = BaselineMask.from_pairs([(0, 0)])

    def _effective(self, policy: DivisionPolicy) -> np.ndarray:
        return StockConstraint(division_policy=policy).effective_stock(
            stock=self.stock,
            stock_efficiency=self.efficiency,
            baseline=self.baseline,
            mask=self.mask,
        )

    @pytest.mark.parametrize("policy", list(DivisionPolicy))
    def test_override_under_every_policy(self, policy) -> None:
        np.testing.assert_array_almost_equal(self._effective(policy), [[5.0, 2.0]])

    def test_propagate_does_not_warn(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            self._effective(DivisionPolicy.PROPAGATE)
        assert "propagated" not in caplog.text

    def test_unmasked_zero_still_raises(self) -> None:
        with pytest.raises(InvalidEfficiencyError, match=r"first at \(0, 1\)"):
            StockConstraint(division_policy=DivisionPolicy.RAISE).effective_stock(
                stock=self.stock,
                stock_efficiency=np.array([[0.0, 0.0]]),
                baseline=self.baseline,
                mask=self.mask,
            )

    def test_raw_ratio_ignores_mask(self) -> None:
        with pytest.raises(InvalidEfficiencyError):
            StockConstraint(division_policy=DivisionPolicy.RAISE).raw_ratio(
                stock=self.stock, stock_efficiency=self.efficiency,
            )
