# -*- coding: utf-8 -*-
"""Nutrition reference data — food and exercise lookup/upsert-by-name.

The upsert helpers take an open connection so callers can run them inside
their own transaction (diet-plan creation, log entries, AI ingestion).
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from ..app_db import casefold, db_conn, row_to_dict

# Placeholder nutrition for names first seen through a log entry.
DEFAULT_FOOD_NUTRITION = {
    "calories_per_100g": 100.0,
    "protein_per_100g": 5.0,
    "carbs_per_100g": 15.0,
    "fats_per_100g": 2.0,
}
DEFAULT_CALORIES_PER_MINUTE = 5.0


def _num(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def find_food_by_name(conn: sqlite3.Connection, food_name: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT * FROM food WHERE casefold(food_name) = ?",
        (casefold(food_name),),
    ).fetchone()
    return row_to_dict(row)


def get_food(conn: sqlite3.Connection, food_id: int) -> Optional[Dict[str, Any]]:
    return row_to_dict(conn.execute("SELECT * FROM food WHERE food_id = ?", (food_id,)).fetchone())


def upsert_food(
    conn: sqlite3.Connection,
    food_name: str,
    *,
    calories_per_100g: Any = None,
    protein_per_100g: Any = None,
    carbs_per_100g: Any = None,
    fats_per_100g: Any = None,
    defaults: Optional[Dict[str, float]] = None,
) -> Dict[str, Any]:
    """Return the food row matching ``food_name`` case-insensitively, inserting it if absent.

    An existing row is returned untouched; the nutrition arguments only seed new rows.
    Missing values fall back to ``defaults`` (zero when not given).
    """
    name = food_name.strip()
    if not name:
        raise ValueError("food_name must not be empty")
    existing = find_food_by_name(conn, name)
    if existing:
        return existing

    base = defaults or {}
    cur = conn.execute(
        """
        INSERT INTO food (food_name, calories_per_100g, protein_per_100g, carbs_per_100g, fats_per_100g)
        VALUES (?, ?, ?, ?, ?)
        """,
        (
            name,
            _num(calories_per_100g, base.get("calories_per_100g", 0.0)),
            _num(protein_per_100g, base.get("protein_per_100g", 0.0)),
            _num(carbs_per_100g, base.get("carbs_per_100g", 0.0)),
            _num(fats_per_100g, base.get("fats_per_100g", 0.0)),
        ),
    )
    return get_food(conn, cur.lastrowid)


def find_exercise_by_name(conn: sqlite3.Connection, exercise_name: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT * FROM exercise WHERE casefold(exercise_name) = ?",
        (casefold(exercise_name),),
    ).fetchone()
    return row_to_dict(row)


def get_exercise(conn: sqlite3.Connection, exercise_id: int) -> Optional[Dict[str, Any]]:
    return row_to_dict(conn.execute("SELECT * FROM exercise WHERE exercise_id = ?", (exercise_id,)).fetchone())


def upsert_exercise(
    conn: sqlite3.Connection,
    exercise_name: str,
    *,
    calories_burned_per_minute: Any = None,
    default_per_minute: float = 0.0,
) -> Dict[str, Any]:
    name = exercise_name.strip()
    if not name:
        raise ValueError("exercise_name must not be empty")
    existing = find_exercise_by_name(conn, name)
    if existing:
        return existing
    cur = conn.execute(
        "INSERT INTO exercise (exercise_name, calories_burned_per_minute) VALUES (?, ?)",
        (name, _num(calories_burned_per_minute, default_per_minute)),
    )
    return get_exercise(conn, cur.lastrowid)


def _like_pattern(query: str) -> str:
    escaped = casefold(query).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_foods(query: str, *, limit: int = 10, tag_source: bool = False) -> List[Dict[str, Any]]:
    """Case-insensitive substring match on food names."""
    source = ", 'db' AS source" if tag_source else ""
    with db_conn() as conn:
        rows = conn.execute(
            f"""
            SELECT *{source} FROM food
            WHERE casefold(food_name) LIKE ? ESCAPE '\\'
            ORDER BY food_name
            LIMIT ?
            """,
            (_like_pattern(query), limit),
        ).fetchall()
    return [dict(r) for r in rows]


def search_exercises(query: str, *, limit: int = 5, tag_source: bool = False) -> List[Dict[str, Any]]:
    source = ", 'db' AS source" if tag_source else ""
    with db_conn() as conn:
        rows = conn.execute(
            f"""
            SELECT *{source} FROM exercise
            WHERE casefold(exercise_name) LIKE ? ESCAPE '\\'
            ORDER BY exercise_name
            LIMIT ?
            """,
            (_like_pattern(query), limit),
        ).fetchall()
    return [dict(r) for r in rows]
