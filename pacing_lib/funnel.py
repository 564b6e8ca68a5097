"""Income goal to activity funnel, and back.

The backward cascade divides by each forward conversion rate and rounds up at
every stage, so required effort is never under-stated. ``forward_income`` is
its inverse: it multiplies through the same rates from calls to income.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from .models import STAGES, Assumptions, FunnelTargets
from .ratios import ceil_units, safe_ratio
from .validation import validate_amount, validate_assumptions, validate_working_days


def _raw_cascade(income_goal: float, assumptions: Assumptions) -> dict[str, float]:
    """Unrounded stage requirements, downstream first."""

    out = {"closings": income_goal / assumptions.avg_commission}
    for upstream, downstream, rate in reversed(assumptions.conversion_rates.chain()):
        out[upstream] = out[downstream] / rate
    return out


def _rounded_cascade(income_goal: float, assumptions: Assumptions) -> dict[str, int]:
    out = {"closings": ceil_units(income_goal / assumptions.avg_commission)}
    for upstream, downstream, rate in reversed(assumptions.conversion_rates.chain()):
        out[upstream] = ceil_units(out[downstream] / rate)
    return out


def required_funnel(income_goal: float, assumptions: Assumptions) -> FunnelTargets:
    validate_assumptions(assumptions)
    goal = validate_amount("income_goal", income_goal)
    if goal == 0:
        return FunnelTargets(**{s: 0 for s in STAGES})
    return FunnelTargets(**_rounded_cascade(goal, assumptions))


def daily_targets(annual: FunnelTargets, working_days_per_month: int) -> FunnelTargets:
    """Annual targets to per-workday targets, rounding up at month and day."""

    days = validate_working_days(working_days_per_month)
    out = {}
    for stage in STAGES:
        monthly = ceil_units(validate_amount(f"annual.{stage}", annual[stage]) / 12)
        out[stage] = ceil_units(monthly / days)
    return FunnelTargets(**out)


def forward_income(calls: float, assumptions: Assumptions) -> float:
    closings = float(calls)
    for _, _, rate in assumptions.conversion_rates.chain():
        closings *= rate
    return closings * assumptions.avg_commission


def plan_breakdown(income_goal: float, assumptions: Assumptions) -> pd.DataFrame:
    """Yearly, monthly, weekly and daily targets per stage for a plan worksheet.

    Weekly and daily figures come from the unrounded yearly requirement spread
    over working weeks/days net of ``weeks_off``; anything under one unit is
    reported as 0.
    """

    validate_assumptions(assumptions)
    goal = validate_amount("income_goal", income_goal)
    working_weeks = 52 - assumptions.weeks_off
    working_days = assumptions.working_days_per_month * 12 - assumptions.weeks_off * 5

    raw = _raw_cascade(goal, assumptions) if goal > 0 else {s: 0.0 for s in STAGES}
    rows: list[dict] = []
    for stage in STAGES:
        yearly = raw[stage]
        weekly = safe_ratio(yearly, working_weeks)
        daily = safe_ratio(yearly, working_days)
        rows.append(
            {
                "stage": stage,
                "yearly": ceil_units(yearly),
                "monthly": ceil_units(yearly / 12),
                "weekly": 0.0 if weekly < 1 else round(weekly, 2),
                "daily": 0.0 if daily < 1 else round(daily, 2),
            }
        )
    out = pd.DataFrame(rows)
    out["yearly"] = out["yearly"].astype(np.int64)
    out["monthly"] = out["monthly"].astype(np.int64)
    out.attrs["monthly_net_income"] = goal / 12
    return out
