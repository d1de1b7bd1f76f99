"""Tests for cycle_config.yaml loading, validation and reload."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.cycles import config_loader
from src.cycles.config_loader import (
    ConfigValidationError,
    CycleConfig,
    _validate_and_build,
    load_cycle_config,
    reload_cycle_config,
)
from src.cycles.models import SymptomCategory


class TestDefaultConfig:
    def test_bundled_thresholds(self, cycle_config: CycleConfig) -> None:
        reg = cycle_config.regularity
        assert (reg.min_cycle_days, reg.max_cycle_days) == (21, 35)
        assert reg.max_variation_days == 7
        assert reg.min_cycles_for_assessment == 3

    def test_category_priority(self, cycle_config: CycleConfig) -> None:
        sc = cycle_config.symptoms
        assert sc.priority_of(SymptomCategory.mood) == 0
        assert sc.priority_of(SymptomCategory.hair_growth) == 4

    def test_request_bounds(self, cycle_config: CycleConfig) -> None:
        assert cycle_config.insight_request.max_cycle_observations == 24
        assert cycle_config.insight_request.max_symptom_logs == 90

    def test_empty_document_uses_defaults(self) -> None:
        config = _validate_and_build({})
        assert config.regularity.max_cycle_days == 35
        assert config.symptoms.categories == list(SymptomCategory)


class TestValidation:
    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(ConfigValidationError, match="exceeds"):
            _validate_and_build({"regularity": {"min_cycle_days": 40, "max_cycle_days": 35}})

    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(ConfigValidationError, match="unknown category"):
            _validate_and_build({"symptoms": {"categories": ["mood", "acne"]}})

    def test_all_errors_reported_together(self) -> None:
        raw = {
            "regularity": {"max_variation_days": "wide"},
            "symptoms": {"cluster_min_share": 1.5},
            "insight_request": {"max_symptom_logs": 0},
        }
        with pytest.raises(ConfigValidationError) as exc_info:
            _validate_and_build(raw)
        message = str(exc_info.value)
        assert "3 validation error(s)" in message
        assert "max_variation_days" in message
        assert "cluster_min_share" in message
        assert "max_symptom_logs" in message

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_cycle_config(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("regularity: [unclosed\n")
        with pytest.raises(ConfigValidationError, match="YAML parse error"):
            load_cycle_config(path)


class TestReload:
    def test_reload_replaces_singleton(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config_loader, "_config", None)
        path = tmp_path / "cycle_config.yaml"
        path.write_text('version: "2.0"\nregularity:\n  max_variation_days: 9\n')

        config = reload_cycle_config(path)
        assert config.version == "2.0"
        assert config_loader.get_cycle_config() is config
        assert config.regularity.max_variation_days == 9

    def test_failed_reload_keeps_previous(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        previous = load_cycle_config()
        monkeypatch.setattr(config_loader, "_config", previous)
        path = tmp_path / "cycle_config.yaml"
        path.write_text("regularity:\n  min_cycle_days: 0\n")

        with pytest.raises(ConfigValidationError):
            reload_cycle_config(path)
        assert config_loader.get_cycle_config() is previous
