from __future__ import annotations

import unittest

import numpy as np
import pandas as pd

from pacing_lib.errors import ValidationError
from pacing_lib.leaderboard import LeaderboardConfig, rank_agents
from pacing_lib.models import YtdActuals
from pacing_lib.rollups import (
    LOG_COLUMNS,
    TRANSACTION_COLUMNS,
    ytd_actuals_by_agent,
    ytd_actuals_from_row,
)


def make_logs() -> pd.DataFrame:
    return pd.DataFrame(
        [
            ["a1", "2025-12-31", 99, 99, 99, 99, 99],
            ["a1", "2026-01-06", 40, 10, 2, 2, 1],
            ["a1", "2026-02-10", 35, 8, 1, 1, 0],
            ["a3", "2026-03-03", 20, 4, 1, 0, 0],
        ],
        columns=LOG_COLUMNS,
    )


def make_transactions() -> pd.DataFrame:
    return pd.DataFrame(
        [
            ["a1", "2026-03-01", "closed", 4000.0],
            ["a1", "2026-04-01", "pending", 9000.0],
            ["a2", "2026-05-01", "closed", 5000.0],
            ["a2", "2026-06-15", "Closed", 3000.0],
            ["a2", "2025-11-20", "closed", 7000.0],
        ],
        columns=TRANSACTION_COLUMNS,
    )


class RollupTests(unittest.TestCase):
    def test_sums_inside_window(self) -> None:
        out = ytd_actuals_by_agent(make_logs(), make_transactions(), "2026-01-01", "2026-10-18")
        out = out.set_index("agent_id")
        self.assertEqual(sorted(out.index), ["a1", "a2", "a3"])

        a1 = out.loc["a1"]
        self.assertEqual(a1["calls"], 75)
        self.assertEqual(a1["engagements"], 18)
        self.assertEqual(a1["contracts_written"], 1)
        self.assertEqual(a1["closings"], 1)
        self.assertAlmostEqual(a1["net_earned"], 4000.0)

        # transactions only
        a2 = out.loc["a2"]
        self.assertEqual(a2["calls"], 0)
        self.assertEqual(a2["closings"], 2)
        self.assertAlmostEqual(a2["net_earned"], 8000.0)

        # logs only
        self.assertEqual(out.loc["a3", "closings"], 0)
        self.assertAlmostEqual(out.loc["a3", "net_earned"], 0.0)

    def test_window_end_is_inclusive(self) -> None:
        out = ytd_actuals_by_agent(make_logs(), make_transactions(), "2026-01-01", "2026-02-10")
        a1 = out.set_index("agent_id").loc["a1"]
        self.assertEqual(a1["calls"], 75)
        self.assertEqual(a1["closings"], 0)

    def test_empty_inputs(self) -> None:
        out = ytd_actuals_by_agent(pd.DataFrame(), make_transactions(), "2026-01-01", "2026-12-31")
        self.assertEqual(list(out["agent_id"]), ["a1", "a2"])
        out = ytd_actuals_by_agent(pd.DataFrame(), pd.DataFrame(), "2026-01-01", "2026-12-31")
        self.assertTrue(out.empty)

    def test_row_to_actuals(self) -> None:
        out = ytd_actuals_by_agent(make_logs(), make_transactions(), "2026-01-01", "2026-12-31")
        ytd = ytd_actuals_from_row(out.set_index("agent_id").loc["a1"])
        self.assertEqual(ytd.calls, 75.0)
        self.assertEqual(ytd.net_earned, 4000.0)
        self.assertEqual(ytd_actuals_from_row(None), YtdActuals())


class LeaderboardTests(unittest.TestCase):
    def setUp(self) -> None:
        self.frame = pd.DataFrame(
            {
                "agent_id": ["a", "b", "c", "d"],
                "appointments_held": [5, 9, 9, 2],
                "engagements": [10, 3, 7, 1],
            }
        )

    def test_primary_then_secondary(self) -> None:
        board = rank_agents(self.frame, LeaderboardConfig(show_top_n=3))
        self.assertEqual(list(board["agent_id"]), ["c", "b", "a"])
        self.assertEqual(list(board["rank"]), [1, 2, 3])
        np.testing.assert_allclose(
            board["progress_to_leader"].to_numpy(dtype=float), [100.0, 100.0, 500.0 / 9.0]
        )

    def test_primary_only_keeps_input_order_on_ties(self) -> None:
        cfg = LeaderboardConfig(primary_metric="appointments_held", secondary_metric=None)
        board = rank_agents(self.frame, cfg)
        self.assertEqual(list(board["agent_id"]), ["b", "c", "a", "d"])

    def test_leader_with_zero_score(self) -> None:
        frame = pd.DataFrame(
            {"agent_id": ["a", "b"], "appointments_held": [0, 0], "engagements": [0, 0]}
        )
        board = rank_agents(frame, LeaderboardConfig())
        self.assertEqual(list(board["progress_to_leader"]), [0.0, 0.0])

    def test_unknown_metric_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            rank_agents(self.frame, LeaderboardConfig(primary_metric="listings"))


if __name__ == "__main__":
    unittest.main()
