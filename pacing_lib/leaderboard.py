from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from .errors import ValidationError
from .ratios import safe_ratio


@dataclass
class LeaderboardConfig:
    primary_metric: str = "appointments_held"
    secondary_metric: Optional[str] = "engagements"
    show_top_n: int = 10


def rank_agents(frame: pd.DataFrame, cfg: LeaderboardConfig) -> pd.DataFrame:
    """Rank agents by primary then secondary metric, highest first.

    Ties keep input order. Missing metric values count as 0.
    """

    for name in (cfg.primary_metric, cfg.secondary_metric):
        if name is not None and name not in frame.columns:
            raise ValidationError("leaderboard metric", "must be a column of the agent frame", name)
    if cfg.show_top_n < 1:
        raise ValidationError("show_top_n", "must be at least 1", cfg.show_top_n)

    keys = [cfg.primary_metric] + ([cfg.secondary_metric] if cfg.secondary_metric else [])
    board = frame.copy()
    board[keys] = board[keys].fillna(0)
    board = board.sort_values(keys, ascending=False, kind="mergesort").head(cfg.show_top_n)
    board = board.reset_index(drop=True)

    board.insert(0, "rank", np.arange(1, len(board) + 1, dtype=int))
    leader = float(board[cfg.primary_metric].iloc[0]) if len(board) else 0.0
    board["progress_to_leader"] = [
        100.0 * safe_ratio(v, leader) for v in board[cfg.primary_metric].to_numpy(dtype=float)
    ]
    return board
