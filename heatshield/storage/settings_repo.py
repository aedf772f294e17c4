"""Repository for user settings stored as key-value pairs."""

import logging
import sqlite3
from enum import Enum
from typing import Any

from pydantic import ValidationError

from heatshield.config.schema import UserSettings

logger = logging.getLogger(__name__)

_NULL_STRINGS = ("", "none", "null")


def set_setting(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "INSERT INTO settings (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def get_all_settings(conn: sqlite3.Connection) -> dict[str, str]:
    rows = conn.execute("SELECT key, value FROM settings").fetchall()
    return {r[0]: r[1] for r in rows}


def load_settings(conn: sqlite3.Connection) -> UserSettings:
    """Build UserSettings from the store. Missing or invalid keys fall back to defaults."""
    stored = {
        k: v
        for k, v in get_all_settings(conn).items()
        if k in UserSettings.model_fields and v.lower() not in _NULL_STRINGS
    }
    try:
        return UserSettings(**stored)
    except ValidationError:
        valid = {}
        for key, value in stored.items():
            try:
                UserSettings(**{key: value})
                valid[key] = value
            except ValidationError:
                logger.warning("Ignoring invalid stored setting %s=%r", key, value)
        return UserSettings(**valid)


def save_settings(conn: sqlite3.Connection, settings: UserSettings) -> None:
    for key in UserSettings.model_fields:
        set_setting(conn, key, _to_str(getattr(settings, key)))


def update_setting(conn: sqlite3.Connection, key: str, value: str) -> UserSettings:
    """Validate and persist a single setting given as a string.

    Raises:
        KeyError: unknown setting name.
        pydantic.ValidationError: value fails validation.
    """
    if key not in UserSettings.model_fields:
        raise KeyError(f"Unknown setting: {key}")
    current = load_settings(conn).model_dump()
    current[key] = None if value.strip().lower() in _NULL_STRINGS else value.strip()
    updated = UserSettings(**current)
    set_setting(conn, key, _to_str(getattr(updated, key)))
    return updated


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def remember_location(conn: sqlite3.Connection, latitude: float, longitude: float) -> None:
    """Store explicit coordinates as the last known location."""
    update_setting(conn, "last_latitude", str(latitude))
    update_setting(conn, "last_longitude", str(longitude))
