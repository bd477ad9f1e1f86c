"""Evaluate one period snapshot and print a per-sector-region report.

Usage:
    python -m scripts.evaluate_production data/snapshots/period_03.json
    python -m scripts.evaluate_production --policy RAISE snapshot.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

from src.config.settings import configure_logging, get_settings
from src.data.production_loader import ProductionSnapshot, load_snapshot
from src.engine.production.capacity import (
    CapacityEvaluator,
    MaxCapacityEvaluator,
    ProductionResult,
)
from src.engine.production.config import ProductionConfig
from src.engine.production.overproduction import OverproductionResult, OverproductionSignal
from src.models.common import DivisionPolicy


def _print_header(snapshot: ProductionSnapshot, config: ProductionConfig) -> None:
    """Print snapshot header."""
    w = 72
    dims = snapshot.dimensions
    print("=" * w)
    print("  Constrained Production Report")
    if snapshot.period is not None:
        print(f"  Period: {snapshot.period}")
    print("=" * w)
    print(f"  Sectors: {dims.n_sectors}   Regions: {dims.n_regions}   "
          f"Inflow categories: {dims.n_inflow_categories}")
    print(f"  Masked stock cells: {len(config.mask)}   Mask: {config.mask.checksum}")
    print(f"  Division policy: {config.division_policy.value}   "
          f"Override scale: {config.override_scale}")
    print(f"  Config: {config.config_id}   Created: {config.created_at.isoformat()}")


def _print_table(
    labels: list[str],
    production: ProductionResult,
    ceiling: ProductionResult,
    signal: OverproductionResult,
) -> None:
    """Print the per-sector-region table."""
    print()
    print(
        f"  {'Sector-region':<16} {'Production':>12} {'Max capacity':>13}"
        f" {'Binding':>8} {'Signal':>10}"
    )
    print(
        f"  {'----------------':<16} {'------------':>12} {'-------------':>13}"
        f" {'--------':>8} {'----------':>10}"
    )
    for j, label in enumerate(labels):
        print(
            f"  {label:<16} {production.output[j]:>12,.3f}"
            f" {ceiling.output[j]:>13,.3f}"
            f" {production.binding_source[j].value:>8}"
            f" {signal.signal[j]:>+10.4f}"
        )


def _print_summary(production: ProductionResult, ceiling: ProductionResult) -> None:
    """Print binding counts and total capacity gap."""
    print()
    counts = production.binding_counts()
    print("  Binding constraints: " + ", ".join(
        f"{source.value}={count}" for source, count in counts.items()
    ))
    gap = production.gap_to(ceiling)
    print(f"  Total demand-limited gap: {float(np.nansum(gap)):,.3f}")


def main() -> None:
    """Run the production report."""
    parser = argparse.ArgumentParser(
        description="Evaluate constrained production for a period snapshot",
    )
    parser.add_argument("snapshot_path", type=Path, help="Path to snapshot JSON")
    parser.add_argument(
        "--policy", type=DivisionPolicy, choices=list(DivisionPolicy), default=None,
        help="Override DIVISION_POLICY from settings",
    )
    args = parser.parse_args()

    settings = get_settings()
    if args.policy is not None:
        settings = settings.model_copy(update={"DIVISION_POLICY": args.policy})
    configure_logging(settings)

    snapshot = load_snapshot(args.snapshot_path)
    config = snapshot.build_config(settings)

    production = CapacityEvaluator(config).evaluate(
        stock=snapshot.stock,
        stock_efficiency=snapshot.stock_efficiency,
        inflow=snapshot.inflow,
        inflow_efficiency=snapshot.inflow_efficiency,
        orders=snapshot.orders,
        baseline=snapshot.baseline,
    )
    ceiling = MaxCapacityEvaluator(config).evaluate(
        stock=snapshot.stock,
        stock_efficiency=snapshot.stock_efficiency,
        inflow=snapshot.inflow,
        inflow_efficiency=snapshot.inflow_efficiency,
        baseline=snapshot.baseline,
    )
    signal = OverproductionSignal(config).compute(
        stock=snapshot.stock,
        stock_efficiency=snapshot.stock_efficiency,
        inflow=snapshot.inflow,
        inflow_efficiency=snapshot.inflow_efficiency,
        orders=snapshot.orders,
        baseline=snapshot.baseline,
    )

    _print_header(snapshot, config)
    _print_table(snapshot.column_labels(), production, ceiling, signal)
    _print_summary(production, ceiling)

    finite = (
        np.all(np.isfinite(production.output))
        and np.all(np.isfinite(ceiling.output))
        and np.all(np.isfinite(signal.signal))
    )
    print()
    print("=" * 72)
    if finite:
        print("  RESULT: OK")
        print("=" * 72)
        sys.exit(0)
    else:
        print("  RESULT: NON-FINITE VALUES (check zero efficiencies / baseline)")
        print("=" * 72)
        sys.exit(1)


if __name__ == "__main__":
    main()
