"""ROI calculation engine.

Every function here is a pure projection of an ``InputAggregate`` plus the
session's ``EngineConfig``: same inputs, same outputs, no side effects.
Inputs are expected to have passed ``validate_all``; the only guarded
quantity is the payback period, which is ``None`` ("not applicable") when
there are no savings to recover the training cost from.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from roi_wizard.config import EngineConfig, TrainingCostMode
from roi_wizard.currency import Currency, convert
from roi_wizard.inputs import InputAggregate
from roi_wizard.priorities import PRIORITIES, Priority, normalized_weight

logger = logging.getLogger(__name__)

WEEKS_PER_YEAR = 52


@dataclass(frozen=True)
class KPIResult:
    hours_saved_per_year: float
    annual_savings_amount: float
    payback_months: Optional[float]
    retention_impact_score: float
    training_cost: float
    currency: Currency

    @property
    def payback_applicable(self) -> bool:
        return self.payback_months is not None


@dataclass(frozen=True)
class RoiSummary:
    total_value: float
    total_hours: float
    training_cost: float
    roi_multiple: Optional[float]


# --------------------------------------------------------------------------------------
# Building blocks
# --------------------------------------------------------------------------------------
def hourly_rate(aggregate: InputAggregate, config: EngineConfig) -> float:
    return float(aggregate.avg_salary) / config.annual_working_hours


def training_cost(aggregate: InputAggregate, config: EngineConfig) -> float:
    cost = float(config.training_cost_value)
    if config.training_cost_mode is TrainingCostMode.PER_HEAD:
        cost *= int(aggregate.team_size)
    if config.converts_currency:
        cost = convert(cost, config.base_currency, aggregate.currency, config.exchange_rates)
    return cost


def payback_months(cost: float, annual_savings: float) -> Optional[float]:
    if annual_savings <= 0:
        return None
    return cost / (annual_savings / 12.0)


def retention_impact_score(aggregate: InputAggregate) -> float:
    if not aggregate.selected_priorities:
        return 0.0
    weight = normalized_weight(aggregate.selected_priorities, Priority.RETENTION)
    raw = float(aggregate.confidence_discount) * weight * float(aggregate.adoption_rate)
    return float(np.clip(raw, 0.0, 1.0))


# --------------------------------------------------------------------------------------
# Headline KPIs
# --------------------------------------------------------------------------------------
def compute(aggregate: InputAggregate, config: EngineConfig) -> KPIResult:
    hours = int(aggregate.team_size) * float(aggregate.hours_per_week) * float(aggregate.adoption_rate) * WEEKS_PER_YEAR
    savings = hours * hourly_rate(aggregate, config)
    cost = training_cost(aggregate, config)
    result = KPIResult(
        hours_saved_per_year=hours,
        annual_savings_amount=savings,
        payback_months=payback_months(cost, savings),
        retention_impact_score=retention_impact_score(aggregate),
        training_cost=cost,
        currency=aggregate.currency,
    )
    if not result.payback_applicable:
        logger.debug("payback not applicable: annual savings %.2f <= 0", savings)
    return result


# --------------------------------------------------------------------------------------
# Per-priority breakdown
# --------------------------------------------------------------------------------------
def _throughput_row(aggregate, config, kpis: KPIResult) -> dict:
    return {
        "hours": kpis.hours_saved_per_year,
        "value": kpis.annual_savings_amount,
        "note": f"~{float(aggregate.hours_per_week):g} h/week per employee at "
                f"{float(aggregate.adoption_rate)*100:.0f}% adoption",
    }


def _retention_row(aggregate, config, kpis: KPIResult) -> dict:
    avoided = int(aggregate.team_size) * float(aggregate.annual_turnover_rate) * float(aggregate.retention_improvement)
    replacement = config.replacement_cost_ratio * float(aggregate.avg_salary)
    return {
        "hours": None,
        "value": avoided * replacement,
        "note": f"Avoided replacement costs for ~{avoided:.1f} leavers/year",
    }


def _upskilling_row(aggregate, config, kpis: KPIResult) -> dict:
    upskilled = float(aggregate.upskilling_coverage) * int(aggregate.team_size)
    hours = upskilled * float(aggregate.upskilling_hours_per_week) * WEEKS_PER_YEAR
    return {
        "hours": hours,
        "value": hours * hourly_rate(aggregate, config),
        "note": f"{float(aggregate.upskilling_coverage)*100:.0f}% competency coverage, "
                f"~{float(aggregate.upskilling_hours_per_week):g} h/week per competent employee",
    }


_ROW_BUILDERS = {
    Priority.THROUGHPUT: _throughput_row,
    Priority.RETENTION: _retention_row,
    Priority.UPSKILLING: _upskilling_row,
}


def value_breakdown(aggregate: InputAggregate, config: EngineConfig) -> pd.DataFrame:
    """One row per selected priority plus a ``Total`` row.

    Columns: ``priority``, ``title``, ``note``, ``hours`` (NaN where a benefit
    saves no time), ``value``.
    """
    kpis = compute(aggregate, config)
    rows: List[dict] = []
    for p in Priority:
        if p not in aggregate.selected_priorities:
            continue
        row = _ROW_BUILDERS[p](aggregate, config, kpis)
        rows.append({"priority": p.value, "title": PRIORITIES[p]["label"], **row})
    df = pd.DataFrame(rows, columns=["priority", "title", "note", "hours", "value"])
    df["hours"] = pd.to_numeric(df["hours"], errors="coerce")
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    total = {
        "priority": "total",
        "title": "Total",
        "note": "",
        "hours": df["hours"].sum(),
        "value": df["value"].sum(),
    }
    return pd.concat([df, pd.DataFrame([total])], ignore_index=True)


def roi_summary(aggregate: InputAggregate, config: EngineConfig) -> RoiSummary:
    df = value_breakdown(aggregate, config)
    total = df.loc[df["priority"] == "total"].iloc[0]
    cost = training_cost(aggregate, config)
    total_value = float(total["value"])
    return RoiSummary(
        total_value=total_value,
        total_hours=float(total["hours"]),
        training_cost=cost,
        roi_multiple=(total_value / cost) if cost > 0 else None,
    )


def adoption_sensitivity(aggregate: InputAggregate, config: EngineConfig, points: int = 5) -> pd.DataFrame:
    """Annual savings and payback across evenly spaced adoption rates from 0% to 100%."""
    if points < 2:
        raise ValueError("points must be >= 2")
    rows = []
    for rate in np.linspace(0.0, 1.0, points):
        trial = aggregate.copy()
        trial.adoption_rate = float(rate)
        k = compute(trial, config)
        rows.append({
            "adoption_rate": float(rate),
            "hours_saved_per_year": k.hours_saved_per_year,
            "annual_savings": k.annual_savings_amount,
            "payback_months": k.payback_months,
        })
    return pd.DataFrame(rows)
