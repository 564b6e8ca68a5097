"""Value types shared by the calendar, funnel and projection calculators."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Iterable, NewType

import pandas as pd

from .errors import ValidationError
from .ratios import safe_ratio

Money = NewType("Money", float)
Rate = NewType("Rate", float)

# Upstream first: calls feed engagements, ..., contracts feed closings.
STAGES: tuple[str, ...] = (
    "calls",
    "engagements",
    "appointments_set",
    "appointments_held",
    "contracts_written",
    "closings",
)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class HolidaySet:
    dates: frozenset[str] = frozenset()

    @classmethod
    def from_iterable(cls, values: Iterable[str | date]) -> HolidaySet:
        out: set[str] = set()
        for v in values:
            if isinstance(v, (date, datetime)):
                out.add(pd.Timestamp(v).strftime("%Y-%m-%d"))
                continue
            s = str(v).strip()
            if not _ISO_DATE.match(s):
                raise ValidationError("holidays", "must be YYYY-MM-DD strings", v)
            try:
                date.fromisoformat(s)
            except ValueError as exc:
                raise ValidationError("holidays", "must be valid calendar dates", v) from exc
            out.add(s)
        return cls(frozenset(out))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, (date, datetime)):
            item = item.strftime("%Y-%m-%d")
        return item in self.dates

    def __len__(self) -> int:
        return len(self.dates)

    def __iter__(self):
        return iter(sorted(self.dates))


@dataclass(frozen=True)
class ConversionRates:
    """Forward probabilities: the share of one stage that reaches the next."""

    call_to_engagement: Rate
    engagement_to_appointment: Rate
    appointment_to_contract: Rate
    contract_to_closing: Rate
    # 1.0 folds appointments set and held into a single stage.
    appointment_set_to_held: Rate = Rate(1.0)

    def chain(self) -> tuple[tuple[str, str, float], ...]:
        """(upstream, downstream, rate) links, upstream first."""

        return (
            ("calls", "engagements", self.call_to_engagement),
            ("engagements", "appointments_set", self.engagement_to_appointment),
            ("appointments_set", "appointments_held", self.appointment_set_to_held),
            ("appointments_held", "contracts_written", self.appointment_to_contract),
            ("contracts_written", "closings", self.contract_to_closing),
        )


@dataclass(frozen=True)
class Assumptions:
    avg_commission: Money
    working_days_per_month: int
    conversion_rates: ConversionRates
    weeks_off: int = 0


@dataclass(frozen=True)
class FunnelTargets:
    calls: float = 0
    engagements: float = 0
    appointments_set: float = 0
    appointments_held: float = 0
    contracts_written: float = 0
    closings: float = 0

    def __getitem__(self, stage: str) -> float:
        if stage not in STAGES:
            raise KeyError(stage)
        return getattr(self, stage)

    def as_dict(self) -> dict[str, float]:
        return {s: getattr(self, s) for s in STAGES}


@dataclass(frozen=True)
class YtdActuals:
    calls: float = 0
    engagements: float = 0
    appointments_set: float = 0
    appointments_held: float = 0
    contracts_written: float = 0
    closings: float = 0
    net_earned: Money = Money(0.0)

    def __getitem__(self, stage: str) -> float:
        if stage not in STAGES:
            raise KeyError(stage)
        return getattr(self, stage)

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class WorkdayWindow:
    elapsed: int
    total: int

    @property
    def remaining(self) -> int:
        return max(self.total - self.elapsed, 0)

    @property
    def progress(self) -> float:
        return safe_ratio(self.elapsed, self.total)


@dataclass(frozen=True)
class StageCatchUp:
    remaining: int
    per_day: float
    per_week: float
    per_month: float


@dataclass(frozen=True)
class CatchUpPlan:
    income_left_to_go: Money
    remaining_closings_needed: int
    metrics: dict[str, StageCatchUp] = field(default_factory=dict)

    def to_frame(self) -> pd.DataFrame:
        rows = [{"stage": s, **asdict(self.metrics[s])} for s in STAGES if s in self.metrics]
        return pd.DataFrame(rows, columns=["stage", "remaining", "per_day", "per_week", "per_month"])


@dataclass(frozen=True)
class PaceProjection:
    targets: FunnelTargets
    income: Money
    closings_income: Money
