from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .models import HolidaySet
from .rollups import LOG_COLUMNS, TRANSACTION_COLUMNS

logger = logging.getLogger(__name__)

AGENT_COLUMNS = ["agent_id", "name", "start_date", "income_goal"]


def _read_csv(path: Path, required: list[str]) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Missing required CSV: {path}")
    df = pd.read_csv(path, dtype={"agent_id": str})
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing columns: {', '.join(missing)}")
    logger.debug("Loaded %d rows from %s", len(df), path)
    return df


def load_agents(path: Path) -> pd.DataFrame:
    agents = _read_csv(path, AGENT_COLUMNS)
    if agents["agent_id"].isna().any():
        raise ValueError(f"{path} has rows without an agent_id")
    dupes = agents["agent_id"][agents["agent_id"].duplicated()].unique().tolist()
    if dupes:
        raise ValueError(f"{path} has duplicate agent_id values: {', '.join(dupes)}")
    return agents


def load_daily_logs(path: Path) -> pd.DataFrame:
    logs = _read_csv(path, LOG_COLUMNS)
    counts = LOG_COLUMNS[2:]
    logs[counts] = logs[counts].fillna(0)
    return logs


def load_transactions(path: Path) -> pd.DataFrame:
    return _read_csv(path, TRANSACTION_COLUMNS)


def load_holidays(path: Path) -> HolidaySet:
    df = _read_csv(path, ["date"])
    return HolidaySet.from_iterable(df["date"].dropna().astype(str).tolist())


def write_pacing_outputs(out_dir: Path, frames: dict[str, pd.DataFrame]) -> dict[str, Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    paths: dict[str, Path] = {}
    for name, frame in frames.items():
        path = out_dir / f"{name}.csv"
        frame.to_csv(path, index=False)
        paths[name] = path
        logger.info("Wrote %s (%d rows)", path, len(frame))
    return paths
