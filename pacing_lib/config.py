from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import Assumptions, ConversionRates, Money, Rate


@dataclass
class Config:
    year: int = 2026
    today: str = "2026-10-18"
    baseline_date: str = "2026-01-05"
    agents_file: str = "agents.csv"
    logs_file: str = "daily_logs.csv"
    transactions_file: str = "transactions.csv"
    holidays_file: Optional[str] = None
    avg_commission: float = 3000.0
    working_days_per_month: int = 21
    weeks_off: int = 0
    call_to_engagement: float = 0.25
    engagement_to_appointment: float = 0.10
    appointment_set_to_held: float = 1.0
    appointment_to_contract: float = 0.20
    contract_to_closing: float = 0.80
    leaderboard_primary: str = "appointments_held"
    leaderboard_secondary: Optional[str] = "engagements"
    leaderboard_top_n: int = 10
    output_dir: str = "outputs"

    def assumptions(self) -> Assumptions:
        return Assumptions(
            avg_commission=Money(self.avg_commission),
            working_days_per_month=self.working_days_per_month,
            weeks_off=self.weeks_off,
            conversion_rates=ConversionRates(
                call_to_engagement=Rate(self.call_to_engagement),
                engagement_to_appointment=Rate(self.engagement_to_appointment),
                appointment_set_to_held=Rate(self.appointment_set_to_held),
                appointment_to_contract=Rate(self.appointment_to_contract),
                contract_to_closing=Rate(self.contract_to_closing),
            ),
        )
