"""Repository for scheduled local notifications."""

import sqlite3

from heatshield.models.notification import (
    Notification,
    NotificationKind,
    NotificationStatus,
)


def insert_notification(
    conn: sqlite3.Connection,
    kind: NotificationKind,
    title: str,
    body: str,
    fire_at: str,
    repeat_minutes: int | None = None,
    sound: bool = True,
) -> int:
    """Schedule a notification. Returns the row id."""
    cursor = conn.execute(
        "INSERT INTO notifications (kind, title, body, fire_at, repeat_minutes, sound) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        (kind.value, title, body, fire_at, repeat_minutes, int(sound)),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_notification(conn: sqlite3.Connection, notification_id: int) -> Notification | None:
    row = conn.execute(
        "SELECT * FROM notifications WHERE id = ?", (notification_id,)
    ).fetchone()
    if row is None:
        return None
    return _from_row(row)


def get_due(conn: sqlite3.Connection, now_iso: str) -> list[Notification]:
    """Pending notifications whose fire time has passed, oldest first."""
    rows = conn.execute(
        "SELECT * FROM notifications WHERE status = 'pending' AND fire_at <= ? "
        "ORDER BY fire_at, id",
        (now_iso,),
    ).fetchall()
    return [_from_row(r) for r in rows]


def get_pending(
    conn: sqlite3.Connection, kinds: tuple[NotificationKind, ...] | None = None
) -> list[Notification]:
    rows = conn.execute(
        "SELECT * FROM notifications WHERE status = 'pending' ORDER BY fire_at, id"
    ).fetchall()
    pending = [_from_row(r) for r in rows]
    if kinds is not None:
        pending = [n for n in pending if n.kind in kinds]
    return pending


def count_pending(conn: sqlite3.Connection) -> int:
    return conn.execute(
        "SELECT COUNT(*) FROM notifications WHERE status = 'pending'"
    ).fetchone()[0]


def mark_status(
    conn: sqlite3.Connection,
    notification_id: int,
    status: NotificationStatus,
    error: str = "",
) -> None:
    conn.execute(
        "UPDATE notifications SET status = ?, last_error = ?, "
        "attempts = attempts + ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        (
            status.value,
            error,
            0 if status == NotificationStatus.CANCELLED else 1,
            notification_id,
        ),
    )
    conn.commit()


def reschedule(
    conn: sqlite3.Connection, notification_id: int, fire_at: str, error: str = ""
) -> None:
    """Move a repeating notification to its next fire time, keeping it pending."""
    conn.execute(
        "UPDATE notifications SET fire_at = ?, last_error = ?, attempts = attempts + 1, "
        "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        (fire_at, error, notification_id),
    )
    conn.commit()


def cancel_pending(conn: sqlite3.Connection, kinds: tuple[NotificationKind, ...]) -> int:
    """Cancel every pending notification of the given kinds. Returns rows changed."""
    placeholders = ", ".join("?" for _ in kinds)
    cursor = conn.execute(
        f"UPDATE notifications SET status = 'cancelled', updated_at = CURRENT_TIMESTAMP "
        f"WHERE status = 'pending' AND kind IN ({placeholders})",
        tuple(k.value for k in kinds),
    )
    conn.commit()
    return cursor.rowcount


def get_recent(conn: sqlite3.Connection, limit: int = 20) -> list[Notification]:
    rows = conn.execute(
        "SELECT * FROM notifications ORDER BY id DESC LIMIT ?", (limit,)
    ).fetchall()
    return [_from_row(r) for r in rows]


def _from_row(row: sqlite3.Row) -> Notification:
    return Notification(
        id=row["id"],
        kind=NotificationKind(row["kind"]),
        title=row["title"],
        body=row["body"],
        fire_at=row["fire_at"],
        repeat_minutes=row["repeat_minutes"],
        sound=bool(row["sound"]),
        status=NotificationStatus(row["status"]),
        attempts=row["attempts"],
        last_error=row["last_error"],
        created_at=row["created_at"],
    )
