"""Initial schema: settings, weather snapshots, zones, quiz history, notifications, runs."""

import sqlite3

DDL = [
    # User preferences (key-value)
    """
    CREATE TABLE IF NOT EXISTS settings (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Current weather readings
    """
    CREATE TABLE IF NOT EXISTS weather_snapshots (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        temperature INTEGER NOT NULL,
        feels_like INTEGER NOT NULL,
        humidity INTEGER NOT NULL,
        wind_speed REAL NOT NULL,
        uv_index INTEGER,
        description TEXT NOT NULL,
        icon TEXT NOT NULL,
        heat_index TEXT NOT NULL,
        source TEXT NOT NULL,
        fetched_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    (
        "CREATE INDEX IF NOT EXISTS idx_weather_snapshots_fetched "
        "ON weather_snapshots(fetched_at)"
    ),

    # Daily forecast rows, one per day per fetch
    """
    CREATE TABLE IF NOT EXISTS forecast_snapshots (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        batch_id TEXT NOT NULL,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        forecast_date TEXT NOT NULL,
        day_name TEXT NOT NULL,
        max_temp INTEGER NOT NULL,
        min_temp INTEGER NOT NULL,
        description TEXT NOT NULL,
        icon TEXT NOT NULL,
        precipitation_probability INTEGER NOT NULL,
        heat_index TEXT NOT NULL,
        source TEXT NOT NULL,
        fetched_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_forecast_snapshots_batch ON forecast_snapshots(batch_id)",

    # Zones found by the nearby-places search
    """
    CREATE TABLE IF NOT EXISTS detected_zones (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        search_latitude REAL NOT NULL,
        search_longitude REAL NOT NULL,
        name TEXT NOT NULL,
        zone_type TEXT NOT NULL,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        open_24_hours INTEGER NOT NULL,
        description TEXT NOT NULL,
        verified INTEGER NOT NULL DEFAULT 1,
        phone TEXT,
        url TEXT,
        detected_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Home assessment history
    """
    CREATE TABLE IF NOT EXISTS quiz_results (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        answers_json TEXT NOT NULL,
        score INTEGER NOT NULL CHECK (score BETWEEN 0 AND 16),
        tier TEXT NOT NULL,
        savings_percent INTEGER NOT NULL,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Local notifications (alerts + reminders)
    """
    CREATE TABLE IF NOT EXISTS notifications (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        kind TEXT NOT NULL,
        title TEXT NOT NULL,
        body TEXT NOT NULL,
        fire_at TEXT NOT NULL,
        repeat_minutes INTEGER,
        sound INTEGER NOT NULL DEFAULT 1,
        status TEXT NOT NULL DEFAULT 'pending',
        attempts INTEGER NOT NULL DEFAULT 0,
        last_error TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    (
        "CREATE INDEX IF NOT EXISTS idx_notifications_status_fire "
        "ON notifications(status, fire_at)"
    ),

    # Refresh cycle tracking
    """
    CREATE TABLE IF NOT EXISTS refresh_runs (
        run_id TEXT PRIMARY KEY,
        started_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        completed_at TEXT,
        status TEXT NOT NULL DEFAULT 'running',
        source TEXT,
        temperature INTEGER,
        heat_index TEXT,
        alert_scheduled INTEGER,
        notifications_sent INTEGER,
        notifications_failed INTEGER,
        summary_json TEXT,
        error_message TEXT
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
