"""Repository for current weather and forecast snapshots."""

import sqlite3
import uuid

from heatshield.models.weather import DailyForecast, DataSource, WeatherData
from heatshield.models.zones import Coordinate


def save_weather(conn: sqlite3.Connection, location: Coordinate, weather: WeatherData) -> int:
    """Persist a weather reading. Returns the row id."""
    cursor = conn.execute(
        "INSERT INTO weather_snapshots "
        "(latitude, longitude, temperature, feels_like, humidity, wind_speed, "
        "uv_index, description, icon, heat_index, source) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (
            location.latitude, location.longitude,
            weather.temperature, weather.feels_like, weather.humidity,
            weather.wind_speed, weather.uv_index, weather.description,
            weather.icon, weather.heat_index.value, weather.source.value,
        ),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_latest_weather(conn: sqlite3.Connection) -> dict | None:
    row = conn.execute(
        "SELECT * FROM weather_snapshots ORDER BY id DESC LIMIT 1"
    ).fetchone()
    if row is None:
        return None
    return dict(row)


def weather_from_row(row: dict) -> WeatherData:
    return WeatherData(
        temperature=row["temperature"],
        feels_like=row["feels_like"],
        humidity=row["humidity"],
        description=row["description"],
        icon=row["icon"],
        wind_speed=row["wind_speed"],
        uv_index=row["uv_index"],
        source=DataSource(row["source"]),
    )


def save_forecast(
    conn: sqlite3.Connection,
    location: Coordinate,
    days: list[DailyForecast],
    source: DataSource,
) -> str:
    """Persist one forecast fetch as a batch of daily rows. Returns the batch id."""
    batch_id = str(uuid.uuid4())
    conn.executemany(
        "INSERT INTO forecast_snapshots "
        "(batch_id, latitude, longitude, forecast_date, day_name, max_temp, min_temp, "
        "description, icon, precipitation_probability, heat_index, source) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        [
            (
                batch_id, location.latitude, location.longitude,
                d.date, d.day_name, d.max_temp, d.min_temp, d.description,
                d.icon, d.precipitation_probability, d.heat_index.value,
                source.value,
            )
            for d in days
        ],
    )
    conn.commit()
    return batch_id


def get_latest_forecast(conn: sqlite3.Connection) -> list[dict]:
    """Rows of the most recent forecast batch, ordered by date."""
    row = conn.execute(
        "SELECT batch_id FROM forecast_snapshots ORDER BY id DESC LIMIT 1"
    ).fetchone()
    if row is None:
        return []
    rows = conn.execute(
        "SELECT * FROM forecast_snapshots WHERE batch_id = ? ORDER BY forecast_date",
        (row[0],),
    ).fetchall()
    return [dict(r) for r in rows]
