"""Period snapshot loader — curated JSON into production-core inputs.

Provides:
  load_snapshot(path) -> ProductionSnapshot
  parse_snapshot(data, name) -> ProductionSnapshot

A snapshot holds one period's operands plus the run dimensions and the
baseline mask. Spreadsheet sources are converted to this JSON upstream.

Expected keys::

    {
      "dimensions": {"n_sectors": 2, "n_regions": 2, "n_inflow_categories": 1},
      "stock": [[...], ...],              NN × RR·NN
      "stock_efficiency": [[...], ...],
      "inflow": [[...], ...],             UU × RR·NN
      "inflow_efficiency": [[...], ...],
      "orders": [[...], ...],             sources × RR·NN
      "baseline": [[...], ...],           row 0 is the baseline row
      "mask": [[row, col], ...],          or "mask_linear": [i, ...] (column-major)
      "sector_codes": [...], "region_codes": [...], "period": 3
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from src.config.settings import Settings
from src.engine.production.config import ModelDimensions, ProductionConfig
from src.engine.production.mask import BaselineMask
from src.engine.production.matrix_ops import as_matrix, require_columns, require_rows

logger = logging.getLogger(__name__)

_MATRIX_KEYS = (
    "stock",
    "stock_efficiency",
    "inflow",
    "inflow_efficiency",
    "orders",
    "baseline",
)


@dataclass(frozen=True)
class ProductionSnapshot:
    """One period of production-core inputs, ready to evaluate."""

    dimensions: ModelDimensions
    stock: np.ndarray
    stock_efficiency: np.ndarray
    inflow: np.ndarray
    inflow_efficiency: np.ndarray
    orders: np.ndarray
    baseline: np.ndarray
    mask: BaselineMask
    sector_codes: list[str]
    region_codes: list[str]
    period: int | None = None
    metadata: dict[str, object] = field(default_factory=dict)

    def build_config(self, settings: Settings) -> ProductionConfig:
        """ProductionConfig for this snapshot with policy defaults from settings."""
        return ProductionConfig.from_settings(
            dimensions=self.dimensions,
            mask=self.mask,
            settings=settings,
        )

    def column_labels(self) -> list[str]:
        """Sector-region labels, region-major: R1/S1, R1/S2, ..., R2/S1, ..."""
        return [
            f"{region}/{sector}"
            for region in self.region_codes
            for sector in self.sector_codes
        ]


def load_snapshot(path: str | Path) -> ProductionSnapshot:
    """Load a period snapshot from JSON.

    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If required fields are missing or shapes do not conform.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    snapshot = parse_snapshot(data, name=path.name)
    logger.info(
        "loaded snapshot %s: %d sectors × %d regions, %d masked cells",
        path.name,
        snapshot.dimensions.n_sectors,
        snapshot.dimensions.n_regions,
        len(snapshot.mask),
    )
    return snapshot


def parse_snapshot(data: dict, name: str = "<snapshot>") -> ProductionSnapshot:
    """Build a ProductionSnapshot from an already-decoded JSON document."""
    if "dimensions" not in data:
        msg = f"Missing 'dimensions' in {name}"
        raise ValueError(msg)
    missing = [key for key in _MATRIX_KEYS if key not in data]
    if missing:
        msg = f"Missing {', '.join(repr(k) for k in missing)} in {name}"
        raise ValueError(msg)

    dims = ModelDimensions(**data["dimensions"])
    matrices = {key: as_matrix(data[key], key) for key in _MATRIX_KEYS}

    for key in _MATRIX_KEYS:
        require_columns(matrices[key], dims.n_columns, key)
    for key in ("stock", "stock_efficiency"):
        require_rows(matrices[key], dims.n_sectors, key)
    for key in ("inflow", "inflow_efficiency"):
        require_rows(matrices[key], dims.n_inflow_categories, key)

    if "mask" in data and "mask_linear" in data:
        msg = f"{name}: give either 'mask' or 'mask_linear', not both"
        raise ValueError(msg)
    if "mask_linear" in data:
        mask = BaselineMask.from_linear_indices(data["mask_linear"], dims.stock_shape)
    else:
        mask = BaselineMask.from_pairs(data.get("mask", []))
    mask.validate_within(dims.stock_shape)

    sector_codes = list(data.get("sector_codes", []))
    if not sector_codes:
        sector_codes = [f"S{i + 1}" for i in range(dims.n_sectors)]
    region_codes = list(data.get("region_codes", []))
    if not region_codes:
        region_codes = [f"R{i + 1}" for i in range(dims.n_regions)]
    if len(sector_codes) != dims.n_sectors:
        msg = f"sector_codes length ({len(sector_codes)}) != n_sectors ({dims.n_sectors})"
        raise ValueError(msg)
    if len(region_codes) != dims.n_regions:
        msg = f"region_codes length ({len(region_codes)}) != n_regions ({dims.n_regions})"
        raise ValueError(msg)

    known = {*_MATRIX_KEYS, "dimensions", "mask", "mask_linear", "sector_codes", "region_codes", "period"}
    metadata = {k: v for k, v in data.items() if k not in known}

    return ProductionSnapshot(
        dimensions=dims,
        mask=mask,
        sector_codes=sector_codes,
        region_codes=region_codes,
        period=data.get("period"),
        metadata=metadata,
        **matrices,
    )
