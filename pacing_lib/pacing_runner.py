from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import pandas as pd

from .calendar import (
    as_date,
    effective_start_date,
    remaining_time,
    us_holidays_2025_2026,
    workday_window,
)
from .config import Config
from .data_io import (
    load_agents,
    load_daily_logs,
    load_holidays,
    load_transactions,
    write_pacing_outputs,
)
from .errors import ValidationError
from .funnel import daily_targets, required_funnel
from .leaderboard import LeaderboardConfig, rank_agents
from .models import STAGES, Assumptions, HolidaySet
from .projection import catch_up_plan, project_at_current_pace, ytd_performance
from .rollups import ytd_actuals_by_agent, ytd_actuals_from_row
from .validation import validate_assumptions

logger = logging.getLogger(__name__)


def _agent_rows(
    agent: pd.Series,
    ytd_row: pd.Series | None,
    cfg: Config,
    assumptions: Assumptions,
    holidays: HolidaySet,
    today: date,
) -> tuple[dict, pd.DataFrame, pd.DataFrame]:
    if pd.isna(agent["start_date"]):
        raise ValidationError("start_date", "is required", None)
    try:
        start = as_date(agent["start_date"])
    except ValueError:
        raise ValidationError("start_date", "must be a YYYY-MM-DD date", agent["start_date"]) from None
    goal = float(pd.to_numeric(agent["income_goal"], errors="coerce"))

    window = workday_window(start, cfg.year, holidays, today, cfg.baseline_date)
    workdays_left, weeks_left, months_left = remaining_time(window, cfg.year, today)
    ytd = ytd_actuals_from_row(ytd_row)

    required = required_funnel(goal, assumptions)
    daily = daily_targets(required, assumptions.working_days_per_month)
    pace = project_at_current_pace(ytd, window.elapsed, window.total, assumptions)
    plan = catch_up_plan(goal, ytd, workdays_left, weeks_left, months_left, assumptions)

    row: dict[str, object] = {
        "agent_id": agent["agent_id"],
        "name": agent["name"],
        "effective_start_date": effective_start_date(start, cfg.baseline_date),
        "workdays_elapsed": window.elapsed,
        "workdays_total": window.total,
        "workdays_remaining": window.remaining,
        "workday_progress": window.progress,
        "income_goal": goal,
        "net_earned": ytd.net_earned,
        "income_left_to_go": plan.income_left_to_go,
        "remaining_closings_needed": plan.remaining_closings_needed,
        "pace_income": pace.income if pace else None,
        "pace_closings_income": pace.closings_income if pace else None,
    }
    for stage in STAGES:
        row[stage] = ytd[stage]
        row[f"pace_{stage}"] = pace.targets[stage] if pace else None
        row[f"daily_target_{stage}"] = daily[stage]

    catch_up = plan.to_frame()
    catch_up.insert(0, "agent_id", agent["agent_id"])

    perf = ytd_performance(required, ytd, window.progress)
    perf["daily_target"] = [daily[s] for s in perf["stage"]]
    perf.insert(0, "agent_id", agent["agent_id"])
    return row, catch_up, perf


def run_pacing(cfg: Config) -> dict[str, object]:
    today = as_date(cfg.today)
    assumptions = validate_assumptions(cfg.assumptions())
    holidays = (
        load_holidays(Path(cfg.holidays_file)) if cfg.holidays_file else us_holidays_2025_2026()
    )
    if not any(d.startswith(f"{cfg.year}-") for d in holidays.dates):
        logger.warning("Holiday list has no dates in %d; only weekends are excluded", cfg.year)
    agents = load_agents(Path(cfg.agents_file))
    logs = load_daily_logs(Path(cfg.logs_file))
    transactions = load_transactions(Path(cfg.transactions_file))

    ytd_end = min(today, date(cfg.year, 12, 31))
    rollups = ytd_actuals_by_agent(logs, transactions, date(cfg.year, 1, 1), ytd_end)
    rollups = rollups.set_index("agent_id")
    logger.info("Rolled up YTD actuals for %d agents through %s", len(rollups), ytd_end)

    rows: list[dict] = []
    catch_up_frames: list[pd.DataFrame] = []
    perf_frames: list[pd.DataFrame] = []
    rejected: list[dict] = []
    for _, agent in agents.iterrows():
        agent_id = agent["agent_id"]
        ytd_row = rollups.loc[agent_id] if agent_id in rollups.index else None
        try:
            row, catch_up, perf = _agent_rows(agent, ytd_row, cfg, assumptions, holidays, today)
        except ValidationError as exc:
            logger.warning("Skipping agent %s: %s", agent_id, exc)
            rejected.append({"agent_id": agent_id, "field": exc.field, "error": str(exc)})
            continue
        rows.append(row)
        catch_up_frames.append(catch_up)
        perf_frames.append(perf)

    unknown = sorted(set(rollups.index) - set(agents["agent_id"]))
    if unknown:
        logger.warning("Activity found for agents not in roster: %s", ", ".join(unknown))

    agent_pacing = pd.DataFrame(rows)
    catch_up_by_stage = (
        pd.concat(catch_up_frames, ignore_index=True) if catch_up_frames else pd.DataFrame()
    )
    plan_targets = pd.concat(perf_frames, ignore_index=True) if perf_frames else pd.DataFrame()
    leaderboard = (
        rank_agents(
            agent_pacing,
            LeaderboardConfig(
                primary_metric=cfg.leaderboard_primary,
                secondary_metric=cfg.leaderboard_secondary,
                show_top_n=cfg.leaderboard_top_n,
            ),
        )
        if not agent_pacing.empty
        else pd.DataFrame()
    )

    out_paths = write_pacing_outputs(
        Path(cfg.output_dir),
        {
            "agent_pacing": agent_pacing,
            "catch_up_by_stage": catch_up_by_stage,
            "plan_targets_by_agent": plan_targets,
            "leaderboard": leaderboard,
        },
    )
    return {
        "holidays": holidays,
        "rollups": rollups.reset_index(),
        "agent_pacing": agent_pacing,
        "catch_up_by_stage": catch_up_by_stage,
        "plan_targets": plan_targets,
        "leaderboard": leaderboard,
        "rejected": rejected,
        "out_paths": out_paths,
        "out_dir": Path(cfg.output_dir),
    }
