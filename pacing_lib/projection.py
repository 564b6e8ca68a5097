from __future__ import annotations

from typing import Optional

import pandas as pd

from .funnel import forward_income, required_funnel
from .models import (
    STAGES,
    Assumptions,
    CatchUpPlan,
    FunnelTargets,
    Money,
    PaceProjection,
    StageCatchUp,
    YtdActuals,
)
from .ratios import ceil_units, safe_ratio
from .validation import validate_amount, validate_assumptions, validate_ytd


def project_at_current_pace(
    ytd: YtdActuals, elapsed: int, total: int, assumptions: Assumptions
) -> Optional[PaceProjection]:
    """Linear year-end extrapolation of YTD actuals; None before the first workday."""

    validate_ytd(ytd)
    validate_assumptions(assumptions)
    validate_amount("elapsed", elapsed)
    validate_amount("total", total)
    if elapsed == 0:
        return None

    scale = total / elapsed
    projected = FunnelTargets(**{s: ytd[s] * scale for s in STAGES})
    return PaceProjection(
        targets=projected,
        income=Money(forward_income(projected.calls, assumptions)),
        closings_income=Money(projected.closings * assumptions.avg_commission),
    )


def _stage_catch_up(
    remaining: int, workdays_remaining: float, weeks_remaining: float, months_remaining: float
) -> StageCatchUp:
    return StageCatchUp(
        remaining=remaining,
        per_day=safe_ratio(remaining, workdays_remaining),
        per_week=safe_ratio(remaining, weeks_remaining),
        per_month=safe_ratio(remaining, months_remaining),
    )


def catch_up_plan(
    goal: float,
    ytd: YtdActuals,
    workdays_remaining: float,
    weeks_remaining: float,
    months_remaining: float,
    assumptions: Assumptions,
) -> CatchUpPlan:
    """Activity still needed from today to reach ``goal``, spread over the time left.

    Stages already at or past their annual requirement owe nothing further.
    """

    validate_ytd(ytd)
    for name, value in (
        ("workdays_remaining", workdays_remaining),
        ("weeks_remaining", weeks_remaining),
        ("months_remaining", months_remaining),
    ):
        validate_amount(name, value)
    required = required_funnel(goal, assumptions)

    metrics: dict[str, StageCatchUp] = {}
    for stage in STAGES:
        remaining = ceil_units(max(required[stage] - ytd[stage], 0))
        metrics[stage] = _stage_catch_up(
            remaining, workdays_remaining, weeks_remaining, months_remaining
        )

    return CatchUpPlan(
        income_left_to_go=Money(max(goal - ytd.net_earned, 0.0)),
        remaining_closings_needed=metrics["closings"].remaining,
        metrics=metrics,
    )


def ytd_performance(required: FunnelTargets, ytd: YtdActuals, progress: float) -> pd.DataFrame:
    """Actuals against the plan pro-rated to ``progress`` of the working year."""

    rows: list[dict] = []
    for stage in STAGES:
        expected = required[stage] * progress
        rows.append(
            {
                "stage": stage,
                "target": required[stage],
                "expected_to_date": expected,
                "actual": ytd[stage],
                "performance": 100.0 * safe_ratio(ytd[stage], expected),
            }
        )
    return pd.DataFrame(rows)
