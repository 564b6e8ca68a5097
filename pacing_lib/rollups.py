from __future__ import annotations

from datetime import date

import duckdb
import pandas as pd

from .calendar import as_date
from .models import STAGES, Money, YtdActuals

LOG_COLUMNS = ["agent_id", "date", *[s for s in STAGES if s != "closings"]]
TRANSACTION_COLUMNS = ["agent_id", "closing_date", "status", "net_commission"]
ROLLUP_COLUMNS = ["agent_id", *STAGES, "net_earned"]


def _empty_like(columns: list[str]) -> pd.DataFrame:
    dtypes = {
        "agent_id": "object",
        "status": "object",
        "date": "datetime64[ns]",
        "closing_date": "datetime64[ns]",
    }
    return pd.DataFrame({c: pd.Series(dtype=dtypes.get(c, "float64")) for c in columns})


def ytd_actuals_by_agent(
    logs: pd.DataFrame,
    transactions: pd.DataFrame,
    start_date: date | str,
    end_date: date | str,
) -> pd.DataFrame:
    """Sum daily activity logs and closed transactions per agent over [start, end].

    Closings and net earned come only from transactions with status 'closed';
    every other stage comes from the daily logs.
    """

    logs = logs if not logs.empty else _empty_like(LOG_COLUMNS)
    transactions = transactions if not transactions.empty else _empty_like(TRANSACTION_COLUMNS)
    start, end = as_date(start_date), as_date(end_date)

    con = duckdb.connect()
    try:
        con.register("logs_df", logs[LOG_COLUMNS])
        con.register("tx_df", transactions[TRANSACTION_COLUMNS])
        out = con.execute(
            """
            WITH activity AS (
                SELECT
                    CAST(agent_id AS VARCHAR) AS agent_id,
                    SUM(CAST(calls AS DOUBLE)) AS calls,
                    SUM(CAST(engagements AS DOUBLE)) AS engagements,
                    SUM(CAST(appointments_set AS DOUBLE)) AS appointments_set,
                    SUM(CAST(appointments_held AS DOUBLE)) AS appointments_held,
                    SUM(CAST(contracts_written AS DOUBLE)) AS contracts_written
                FROM logs_df
                WHERE CAST(date AS DATE) BETWEEN CAST(? AS DATE) AND CAST(? AS DATE)
                  AND agent_id IS NOT NULL
                GROUP BY 1
            ),
            closed AS (
                SELECT
                    CAST(agent_id AS VARCHAR) AS agent_id,
                    COUNT(*) AS closings,
                    SUM(CAST(net_commission AS DOUBLE)) AS net_earned
                FROM tx_df
                WHERE LOWER(CAST(status AS VARCHAR)) = 'closed'
                  AND agent_id IS NOT NULL
                  AND CAST(closing_date AS DATE) BETWEEN CAST(? AS DATE) AND CAST(? AS DATE)
                GROUP BY 1
            )
            SELECT
                COALESCE(a.agent_id, c.agent_id) AS agent_id,
                COALESCE(a.calls, 0) AS calls,
                COALESCE(a.engagements, 0) AS engagements,
                COALESCE(a.appointments_set, 0) AS appointments_set,
                COALESCE(a.appointments_held, 0) AS appointments_held,
                COALESCE(a.contracts_written, 0) AS contracts_written,
                COALESCE(c.closings, 0) AS closings,
                COALESCE(c.net_earned, 0) AS net_earned
            FROM activity a
            FULL OUTER JOIN closed c ON a.agent_id = c.agent_id
            ORDER BY 1
            """,
            [str(start), str(end), str(start), str(end)],
        ).df()
    finally:
        con.close()
    return out[ROLLUP_COLUMNS]


def ytd_actuals_from_row(row: pd.Series | dict | None) -> YtdActuals:
    if row is None:
        return YtdActuals()
    values = {s: float(row[s]) for s in STAGES}
    return YtdActuals(**values, net_earned=Money(float(row["net_earned"])))
