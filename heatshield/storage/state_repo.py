"""Refresh run bookkeeping in the ``refresh_runs`` table."""

import sqlite3

# Per-run figures the pipeline may record on completion
RUN_METRICS = frozenset({
    "source",
    "temperature",
    "heat_index",
    "alert_scheduled",
    "notifications_sent",
    "notifications_failed",
})

_RECENT_FIRST = "ORDER BY started_at DESC, rowid DESC"


def _first(conn: sqlite3.Connection, sql: str, params: tuple = ()) -> dict | None:
    row = conn.execute(sql, params).fetchone()
    return dict(row) if row is not None else None


def create_run(conn: sqlite3.Connection, run_id: str) -> None:
    with conn:
        conn.execute("INSERT INTO refresh_runs (run_id) VALUES (?)", (run_id,))


def complete_run(
    conn: sqlite3.Connection,
    run_id: str,
    status: str,
    summary_json: str | None = None,
    error_message: str | None = None,
    **metrics: int | float | str | None,
) -> None:
    """Close out a run. Metrics left as None keep their column NULL.

    Raises ValueError for a metric name that is not a ``refresh_runs`` column.
    """
    unknown = set(metrics) - RUN_METRICS
    if unknown:
        raise ValueError(f"Unknown run metrics: {', '.join(sorted(unknown))}")

    values: dict[str, object] = {
        "status": status,
        "summary_json": summary_json,
        "error_message": error_message,
        **metrics,
    }
    columns = [col for col, val in values.items() if val is not None or col == "status"]
    assignments = ", ".join(f"{col} = :{col}" for col in columns)
    with conn:
        conn.execute(
            f"UPDATE refresh_runs SET completed_at = CURRENT_TIMESTAMP, {assignments} "
            "WHERE run_id = :run_id",
            {**{col: values[col] for col in columns}, "run_id": run_id},
        )


def get_run(conn: sqlite3.Connection, run_id: str) -> dict | None:
    return _first(conn, "SELECT * FROM refresh_runs WHERE run_id = ?", (run_id,))


def get_latest_run(conn: sqlite3.Connection) -> dict | None:
    return _first(conn, f"SELECT * FROM refresh_runs {_RECENT_FIRST} LIMIT 1")


def get_recent_runs(conn: sqlite3.Connection, limit: int = 10) -> list[dict]:
    rows = conn.execute(f"SELECT * FROM refresh_runs {_RECENT_FIRST} LIMIT ?", (limit,))
    return [dict(r) for r in rows]
