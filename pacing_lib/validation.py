from __future__ import annotations

import math
import numbers
from dataclasses import fields

from .errors import ValidationError
from .models import STAGES, Assumptions, YtdActuals


def validate_amount(field: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(field, "must be a number", value)
    if not math.isfinite(value):
        raise ValidationError(field, "must be finite", value)
    if value < 0:
        raise ValidationError(field, "must be non-negative", value)
    return float(value)


def validate_rate(field: str, value: float) -> float:
    validate_amount(field, value)
    if not 0 < value <= 1:
        raise ValidationError(field, "must be a decimal rate in (0, 1]", value)
    return float(value)


def validate_working_days(days: int) -> int:
    if isinstance(days, bool) or not isinstance(days, numbers.Integral) or not 1 <= days <= 31:
        raise ValidationError("working_days_per_month", "must be an integer in [1, 31]", days)
    return int(days)


def validate_assumptions(assumptions: Assumptions) -> Assumptions:
    commission = validate_amount("avg_commission", assumptions.avg_commission)
    if commission <= 0:
        raise ValidationError("avg_commission", "must be positive", assumptions.avg_commission)

    validate_working_days(assumptions.working_days_per_month)

    weeks_off = assumptions.weeks_off
    if (
        isinstance(weeks_off, bool)
        or not isinstance(weeks_off, numbers.Integral)
        or not 0 <= weeks_off <= 52
    ):
        raise ValidationError("weeks_off", "must be an integer in [0, 52]", weeks_off)

    rates = assumptions.conversion_rates
    for f in fields(rates):
        validate_rate(f"conversion_rates.{f.name}", getattr(rates, f.name))
    return assumptions


def validate_ytd(ytd: YtdActuals) -> YtdActuals:
    for stage in STAGES:
        validate_amount(f"ytd.{stage}", ytd[stage])
    validate_amount("ytd.net_earned", ytd.net_earned)
    return ytd
