from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional

from roi_wizard.currency import Currency
from roi_wizard.errors import ConfigError


class TrainingCostMode(Enum):
    FLAT = "flat"
    PER_HEAD = "perHead"


_MODE_ALIASES = {
    "flat": TrainingCostMode.FLAT,
    "perhead": TrainingCostMode.PER_HEAD,
    "per_head": TrainingCostMode.PER_HEAD,
    "per-head": TrainingCostMode.PER_HEAD,
}

DEFAULT_TRAINING_COST_PER_HEAD = 850.0
STANDARD_ANNUAL_HOURS = 2080.0  # 52 weeks x 40 hours
REPLACEMENT_COST_RATIO = 0.5  # conservative share of salary to replace a leaver


@dataclass(frozen=True)
class EngineConfig:
    """Engine inputs fixed for the whole session (not editable in the wizard)."""

    training_cost_mode: TrainingCostMode = TrainingCostMode.PER_HEAD
    training_cost_value: float = DEFAULT_TRAINING_COST_PER_HEAD
    annual_working_hours: float = STANDARD_ANNUAL_HOURS
    replacement_cost_ratio: float = REPLACEMENT_COST_RATIO
    base_currency: Currency = Currency.EUR
    exchange_rates: Optional[Dict[Currency, float]] = None

    def __post_init__(self):
        if not isinstance(self.training_cost_mode, TrainingCostMode):
            raise ConfigError(f"training_cost_mode must be a TrainingCostMode, got {self.training_cost_mode!r}")
        if self.training_cost_value < 0:
            raise ConfigError("training_cost_value must be >= 0")
        if self.annual_working_hours <= 0:
            raise ConfigError("annual_working_hours must be > 0")
        if self.replacement_cost_ratio < 0:
            raise ConfigError("replacement_cost_ratio must be >= 0")
        if self.exchange_rates is not None:
            if self.base_currency not in self.exchange_rates:
                raise ConfigError(f"exchange_rates must include the base currency {self.base_currency.value}")
            bad = [c.value for c, r in self.exchange_rates.items() if r <= 0]
            if bad:
                raise ConfigError(f"exchange rates must be > 0: {', '.join(bad)}")

    @property
    def converts_currency(self) -> bool:
        return self.exchange_rates is not None


def parse_training_cost_mode(value: str) -> TrainingCostMode:
    try:
        return _MODE_ALIASES[value.strip().lower()]
    except KeyError:
        raise ConfigError(f"Unknown training cost mode: {value!r} (expected 'flat' or 'perHead')") from None


def _float_env(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None


def load_config(environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """Build the engine config for the app shell from ``ROI_*`` environment variables."""
    environ = os.environ if environ is None else environ
    mode = parse_training_cost_mode(environ.get("ROI_TRAINING_COST_MODE", "perHead"))
    return EngineConfig(
        training_cost_mode=mode,
        training_cost_value=_float_env(environ, "ROI_TRAINING_COST_VALUE", DEFAULT_TRAINING_COST_PER_HEAD),
        annual_working_hours=_float_env(environ, "ROI_ANNUAL_WORKING_HOURS", STANDARD_ANNUAL_HOURS),
    )
