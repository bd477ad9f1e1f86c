"""Tests for the evaluate_production report script."""

import json
import sys

import pytest

from scripts.evaluate_production import main
from src.engine.production.mask import BaselineMask


def _write_snapshot(tmp_path, stock_efficiency, baseline=None) -> str:
    data = {
        "dimensions": {"n_sectors": 1, "n_regions": 2, "n_inflow_categories": 1},
        "stock": [[10.0, 6.0]],
        "stock_efficiency": stock_efficiency,
        "inflow": [[8.0, 3.0]],
        "inflow_efficiency": [[4.0, 1.0]],
        "orders": [[3.0, 1.0]],
        "baseline": baseline or [[2.0, 2.0]],
        "sector_codes": ["MFG"],
        "region_codes": ["North", "South"],
        "period": 1,
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestEvaluateProductionScript:

    def test_report_ok(self, tmp_path, monkeypatch, capsys) -> None:
        path = _write_snapshot(tmp_path, [[2.0, 2.0]])
        monkeypatch.setattr(sys, "argv", ["evaluate_production", path])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 0
        out = capsys.readouterr().out
        assert "North/MFG" in out
        assert "South/MFG" in out
        assert "RESULT: OK" in out

    def test_header_shows_run_provenance(self, tmp_path, monkeypatch, capsys) -> None:
        path = _write_snapshot(tmp_path, [[2.0, 2.0]])
        monkeypatch.setattr(sys, "argv", ["evaluate_production", path])
        with pytest.raises(SystemExit):
            main()
        out = capsys.readouterr().out
        assert f"Mask: {BaselineMask.empty().checksum}" in out
        assert "Override scale: 1.25" in out
        assert "Config: " in out

    def test_non_finite_signal_fails(self, tmp_path, monkeypatch, capsys) -> None:
        path = _write_snapshot(tmp_path, [[2.0, 2.0]], baseline=[[0.0, 2.0]])
        monkeypatch.setattr(sys, "argv", ["evaluate_production", "--policy", "PROPAGATE", path])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert "Division policy: PROPAGATE" in out
        assert "NON-FINITE" in out

    def test_raise_policy_surfaces_error(self, tmp_path, monkeypatch) -> None:
        path = _write_snapshot(tmp_path, [[0.0, 2.0]])
        monkeypatch.setattr(sys, "argv", ["evaluate_production", "--policy", "RAISE", path])
        with pytest.raises(ZeroDivisionError):
            main()
