"""Repository for home assessment results."""

import json
import sqlite3

from heatshield.models.quiz import QuizResult


def save_quiz_result(conn: sqlite3.Connection, result: QuizResult) -> int:
    cursor = conn.execute(
        "INSERT INTO quiz_results (answers_json, score, tier, savings_percent) "
        "VALUES (?, ?, ?, ?)",
        (json.dumps(result.answers), result.score, result.tier.value, result.savings_percent),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_quiz_history(conn: sqlite3.Connection, limit: int = 20) -> list[dict]:
    rows = conn.execute(
        "SELECT * FROM quiz_results ORDER BY id DESC LIMIT ?", (limit,)
    ).fetchall()
    history = []
    for r in rows:
        entry = dict(r)
        entry["answers"] = json.loads(entry.pop("answers_json"))
        history.append(entry)
    return history
