#!/usr/bin/env python3
"""
Workday-paced goal report for a brokerage roster:
- required activity funnel per agent from the income goal
- year-end projection at current pace
- catch-up activity per day / week / month
- leaderboard
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from pacing_lib import Config, run_pacing


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Workday pacing and catch-up report")
    p.add_argument("--year", type=int, default=None, help="Plan year (defaults to the year of --today)")
    p.add_argument("--today", default=None, help="As-of date (YYYY-MM-DD), defaults to the current date")
    p.add_argument("--baseline-date", default=Config.baseline_date)
    p.add_argument("--agents", default=Config.agents_file)
    p.add_argument("--logs", default=Config.logs_file)
    p.add_argument("--transactions", default=Config.transactions_file)
    p.add_argument("--holidays", default=None, help="CSV with a 'date' column")
    p.add_argument("--avg-commission", type=float, default=Config.avg_commission)
    p.add_argument("--working-days-per-month", type=int, default=Config.working_days_per_month)
    p.add_argument("--weeks-off", type=int, default=Config.weeks_off)
    p.add_argument("--call-to-engagement", type=float, default=Config.call_to_engagement)
    p.add_argument("--engagement-to-appointment", type=float, default=Config.engagement_to_appointment)
    p.add_argument("--appointment-set-to-held", type=float, default=Config.appointment_set_to_held)
    p.add_argument("--appointment-to-contract", type=float, default=Config.appointment_to_contract)
    p.add_argument("--contract-to-closing", type=float, default=Config.contract_to_closing)
    p.add_argument("--leaderboard-primary", default=Config.leaderboard_primary)
    p.add_argument("--leaderboard-secondary", default=Config.leaderboard_secondary)
    p.add_argument("--top-n", type=int, default=Config.leaderboard_top_n)
    p.add_argument("--output-dir", default=Config.output_dir)
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    today = args.today or date.today().isoformat()
    cfg = Config(
        year=args.year if args.year is not None else int(today[:4]),
        today=today,
        baseline_date=args.baseline_date,
        agents_file=args.agents,
        logs_file=args.logs,
        transactions_file=args.transactions,
        holidays_file=args.holidays,
        avg_commission=args.avg_commission,
        working_days_per_month=args.working_days_per_month,
        weeks_off=args.weeks_off,
        call_to_engagement=args.call_to_engagement,
        engagement_to_appointment=args.engagement_to_appointment,
        appointment_set_to_held=args.appointment_set_to_held,
        appointment_to_contract=args.appointment_to_contract,
        contract_to_closing=args.contract_to_closing,
        leaderboard_primary=args.leaderboard_primary,
        leaderboard_secondary=args.leaderboard_secondary or None,
        leaderboard_top_n=args.top_n,
        output_dir=args.output_dir,
    )

    try:
        res = run_pacing(cfg)
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print("=== Workday Pacing Report Complete ===")
    print(f"Year: {cfg.year}  As-of: {cfg.today}")
    print(f"Agents: paced={len(res['agent_pacing'])}, rejected={len(res['rejected'])}")
    print("Output CSVs:")
    for p in res["out_paths"].values():
        print(f"  - {p}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
