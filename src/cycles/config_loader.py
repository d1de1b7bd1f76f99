"""Load, validate, and hot-reload the Mitra cycle analytics configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_cycle_config()`` to re-read from
disk after editing thresholds; no restart required.

Usage::

    from src.cycles.config_loader import get_cycle_config

    config = get_cycle_config()
    config.regularity.max_variation_days     # 7
    config.symptoms.priority_of(SymptomCategory.skin)  # 1
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from src.cycles.models import SymptomCategory

logger = logging.getLogger("mitra.cycles.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class RegularityConfig:
    """Thresholds used by the regularity classifier."""

    min_cycle_days: int = 21
    max_cycle_days: int = 35
    max_variation_days: int = 7
    min_cycles_for_assessment: int = 3
    medium_confidence_max_variation_days: int = 14


@dataclass
class SymptomConfig:
    """Symptom aggregation settings."""

    categories: list[SymptomCategory] = field(
        default_factory=lambda: list(SymptomCategory)
    )
    premenstrual_window_days: int = 7
    cluster_min_share: float = 0.5
    cluster_min_days: int = 2

    def priority_of(self, category: SymptomCategory) -> int:
        """Return the tie-break rank of a category (0 = highest priority)."""
        return self.categories.index(category)


@dataclass
class InsightRequestConfig:
    """Array bounds enforced on outgoing insight requests."""

    max_cycle_observations: int = 24
    max_symptom_logs: int = 90


@dataclass
class CycleConfig:
    """Complete, validated cycle analytics configuration.

    Attributes:
        version:         Config schema version string.
        regularity:      Regularity classifier thresholds.
        symptoms:        Symptom aggregation settings.
        insight_request: Insight request schema bounds.
    """

    version: str
    regularity: RegularityConfig
    symptoms: SymptomConfig
    insight_request: InsightRequestConfig
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> CycleConfig:
    """Validate the raw YAML dict and construct a CycleConfig.

    Every problem is collected before raising so a bad file reports all of
    its errors at once.  Missing optional keys fall back to defaults.

    Raises:
        ConfigValidationError: If any value is missing, mistyped or out of range.
    """
    errors: list[str] = []

    def _int(section: dict, key: str, default: int, name: str, minimum: int = 0) -> int:
        value = section.get(key, default)
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{name}.{key} must be an integer, got {value!r}")
            return default
        if number < minimum:
            errors.append(f"{name}.{key} = {number} must be >= {minimum}")
        return number

    version = str(raw.get("version", "1.0"))

    # ── Regularity ──
    reg_raw = raw.get("regularity") or {}
    regularity = RegularityConfig(
        min_cycle_days=_int(reg_raw, "min_cycle_days", 21, "regularity", 1),
        max_cycle_days=_int(reg_raw, "max_cycle_days", 35, "regularity", 1),
        max_variation_days=_int(reg_raw, "max_variation_days", 7, "regularity"),
        min_cycles_for_assessment=_int(
            reg_raw, "min_cycles_for_assessment", 3, "regularity", 1
        ),
        medium_confidence_max_variation_days=_int(
            reg_raw, "medium_confidence_max_variation_days", 14, "regularity"
        ),
    )
    if regularity.min_cycle_days > regularity.max_cycle_days:
        errors.append(
            f"regularity.min_cycle_days ({regularity.min_cycle_days}) exceeds "
            f"max_cycle_days ({regularity.max_cycle_days})"
        )
    if regularity.medium_confidence_max_variation_days < regularity.max_variation_days:
        errors.append(
            "regularity.medium_confidence_max_variation_days must be >= max_variation_days"
        )

    # ── Symptoms ──
    sym_raw = raw.get("symptoms") or {}
    categories: list[SymptomCategory] = []
    for name in sym_raw.get("categories", [c.value for c in SymptomCategory]):
        try:
            category = SymptomCategory(name)
        except ValueError:
            errors.append(
                f"symptoms.categories: unknown category {name!r} "
                f"(expected one of {[c.value for c in SymptomCategory]})"
            )
            continue
        if category in categories:
            errors.append(f"symptoms.categories: duplicate category {name!r}")
            continue
        categories.append(category)
    if not categories:
        errors.append("symptoms.categories must list at least one category")

    share = sym_raw.get("cluster_min_share", 0.5)
    try:
        share = float(share)
    except (TypeError, ValueError):
        errors.append(f"symptoms.cluster_min_share must be a number, got {share!r}")
        share = 0.5
    if not (0.0 < share <= 1.0):
        errors.append(f"symptoms.cluster_min_share = {share} is out of range (0.0, 1.0]")

    symptoms = SymptomConfig(
        categories=categories,
        premenstrual_window_days=_int(sym_raw, "premenstrual_window_days", 7, "symptoms", 1),
        cluster_min_share=share,
        cluster_min_days=_int(sym_raw, "cluster_min_days", 2, "symptoms", 1),
    )

    # ── Insight request ──
    ir_raw = raw.get("insight_request") or {}
    insight_request = InsightRequestConfig(
        max_cycle_observations=_int(
            ir_raw, "max_cycle_observations", 24, "insight_request", 1
        ),
        max_symptom_logs=_int(ir_raw, "max_symptom_logs", 90, "insight_request", 1),
    )

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CycleConfig(
        version=version,
        regularity=regularity,
        symptoms=symptoms,
        insight_request=insight_request,
        _raw=raw,
    )


def load_cycle_config(path: Path | None = None) -> CycleConfig:
    """Load and validate the cycle config from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded cycle config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: CycleConfig | None = None
_config_lock = threading.Lock()


def get_cycle_config() -> CycleConfig:
    """Return the global CycleConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_cycle_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_cycle_config()
    return _config


def reload_cycle_config(path: Path | None = None) -> CycleConfig:
    """Reload the cycle config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_cycle_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded cycle config: %s → %s", old_version, new_config.version)
    return new_config
