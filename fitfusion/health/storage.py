# -*- coding: utf-8 -*-
"""Food and exercise log storage (SQLite).

Log rows keep a calorie snapshot computed from the referenced food/exercise
row at insert time; later edits to the reference data do not touch them.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException

from ..app_db import db_conn, iso_now, utc_today
from ..nutrition.storage import (
    DEFAULT_CALORIES_PER_MINUTE,
    DEFAULT_FOOD_NUTRITION,
    get_exercise,
    get_food,
    upsert_exercise,
    upsert_food,
)

logger = logging.getLogger(__name__)

DEFAULT_LOG_LIMIT = 50


def _insert_food_log(
    conn: sqlite3.Connection,
    *,
    user_id: int,
    food: Dict[str, Any],
    quantity_grams: float,
    meal_time: Optional[str],
) -> Dict[str, Any]:
    total = round(float(food["calories_per_100g"]) * float(quantity_grams) / 100.0, 2)
    cur = conn.execute(
        """
        INSERT INTO food_log (user_id, food_id, quantity_grams, total_calories, meal_time, log_date)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (user_id, food["food_id"], quantity_grams, total, meal_time, iso_now()),
    )
    row = dict(conn.execute("SELECT * FROM food_log WHERE log_id = ?", (cur.lastrowid,)).fetchone())
    row["food_name"] = food["food_name"]
    return row


def _insert_exercise_log(
    conn: sqlite3.Connection,
    *,
    user_id: int,
    exercise: Dict[str, Any],
    duration_minutes: float,
) -> Dict[str, Any]:
    total = round(float(exercise["calories_burned_per_minute"]) * float(duration_minutes), 2)
    cur = conn.execute(
        """
        INSERT INTO exercise_log (user_id, exercise_id, duration_minutes, total_calories_burned, log_date)
        VALUES (?, ?, ?, ?, ?)
        """,
        (user_id, exercise["exercise_id"], duration_minutes, total, iso_now()),
    )
    row = dict(conn.execute("SELECT * FROM exercise_log WHERE log_id = ?", (cur.lastrowid,)).fetchone())
    row["exercise_name"] = exercise["exercise_name"]
    return row


def log_food_by_name(
    *,
    user_id: int,
    food_name: str,
    quantity_grams: float,
    meal_time: Optional[str] = None,
) -> Dict[str, Any]:
    """Log a food by name; an unseen name is created with placeholder nutrition."""
    with db_conn() as conn:
        food = upsert_food(conn, food_name, defaults=DEFAULT_FOOD_NUTRITION)
        return _insert_food_log(
            conn, user_id=user_id, food=food, quantity_grams=quantity_grams, meal_time=meal_time
        )


def log_exercise_by_name(*, user_id: int, exercise_name: str, duration_minutes: float) -> Dict[str, Any]:
    with db_conn() as conn:
        exercise = upsert_exercise(conn, exercise_name, default_per_minute=DEFAULT_CALORIES_PER_MINUTE)
        return _insert_exercise_log(conn, user_id=user_id, exercise=exercise, duration_minutes=duration_minutes)


def log_food_entry(
    *,
    user_id: int,
    food: Dict[str, Any],
    quantity_grams: float,
    meal_time: str,
) -> Dict[str, Any]:
    """Log a structured food entry (from search results).

    ``food_id`` wins when present; otherwise the food is upserted by name with
    the supplied nutrition, so an AI estimate becomes a stored row.
    """
    with db_conn() as conn:
        row = _resolve_food(conn, food)
        return _insert_food_log(conn, user_id=user_id, food=row, quantity_grams=quantity_grams, meal_time=meal_time)


def _resolve_food(conn: sqlite3.Connection, food: Dict[str, Any]) -> Dict[str, Any]:
    if food.get("food_id") is not None:
        row = get_food(conn, food["food_id"])
        if not row:
            raise HTTPException(status_code=404, detail="Food not found")
        return row
    if not (food.get("food_name") or "").strip():
        raise HTTPException(status_code=400, detail="Food name is required")
    return upsert_food(
        conn,
        food["food_name"],
        calories_per_100g=food.get("calories_per_100g"),
        protein_per_100g=food.get("protein_per_100g"),
        carbs_per_100g=food.get("carbs_per_100g"),
        fats_per_100g=food.get("fats_per_100g"),
    )


def log_exercise_entry(*, user_id: int, exercise: Dict[str, Any], duration_minutes: float) -> Dict[str, Any]:
    with db_conn() as conn:
        if exercise.get("exercise_id") is not None:
            row = get_exercise(conn, exercise["exercise_id"])
            if not row:
                raise HTTPException(status_code=404, detail="Exercise not found")
        else:
            if not (exercise.get("exercise_name") or "").strip():
                raise HTTPException(status_code=400, detail="Exercise name is required")
            row = upsert_exercise(
                conn,
                exercise["exercise_name"],
                calories_burned_per_minute=exercise.get("calories_burned_per_minute"),
            )
        return _insert_exercise_log(conn, user_id=user_id, exercise=row, duration_minutes=duration_minutes)


def _date_filters(
    column: str, start_date: Optional[date], end_date: Optional[date]
) -> tuple[str, List[Any]]:
    sql = ""
    params: List[Any] = []
    if start_date:
        sql += f" AND date({column}) >= ?"
        params.append(start_date.isoformat())
    if end_date:
        sql += f" AND date({column}) <= ?"
        params.append(end_date.isoformat())
    return sql, params


def list_food_logs(
    *,
    user_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = DEFAULT_LOG_LIMIT,
) -> List[Dict[str, Any]]:
    filters, params = _date_filters("fl.log_date", start_date, end_date)
    sql = f"""
        SELECT fl.log_id, fl.quantity_grams, fl.total_calories, fl.meal_time, fl.log_date,
               f.food_name, f.calories_per_100g, f.protein_per_100g, f.carbs_per_100g, f.fats_per_100g
        FROM food_log fl
        JOIN food f ON fl.food_id = f.food_id
        WHERE fl.user_id = ?{filters}
        ORDER BY fl.log_date DESC, fl.log_id DESC
        LIMIT ?
    """
    with db_conn() as conn:
        rows = conn.execute(sql, [user_id, *params, limit]).fetchall()
    return [dict(r) for r in rows]


def list_exercise_logs(
    *,
    user_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = DEFAULT_LOG_LIMIT,
) -> List[Dict[str, Any]]:
    filters, params = _date_filters("el.log_date", start_date, end_date)
    sql = f"""
        SELECT el.log_id, el.duration_minutes, el.total_calories_burned, el.log_date,
               e.exercise_name, e.calories_burned_per_minute
        FROM exercise_log el
        JOIN exercise e ON el.exercise_id = e.exercise_id
        WHERE el.user_id = ?{filters}
        ORDER BY el.log_date DESC, el.log_id DESC
        LIMIT ?
    """
    with db_conn() as conn:
        rows = conn.execute(sql, [user_id, *params, limit]).fetchall()
    return [dict(r) for r in rows]


def todays_logs(*, user_id: int) -> Dict[str, List[Dict[str, Any]]]:
    today = utc_today()
    return {
        "food": list_food_logs(user_id=user_id, start_date=today, limit=-1),
        "exercise": list_exercise_logs(user_id=user_id, start_date=today, limit=-1),
    }


def delete_food_log(*, user_id: int, log_id: int) -> bool:
    with db_conn() as conn:
        cur = conn.execute("DELETE FROM food_log WHERE log_id = ? AND user_id = ?", (log_id, user_id))
    return cur.rowcount > 0


def delete_exercise_log(*, user_id: int, log_id: int) -> bool:
    with db_conn() as conn:
        cur = conn.execute("DELETE FROM exercise_log WHERE log_id = ? AND user_id = ?", (log_id, user_id))
    return cur.rowcount > 0


def daily_summary(*, user_id: int, day: date) -> Dict[str, Any]:
    with db_conn() as conn:
        food_total = conn.execute(
            "SELECT COALESCE(SUM(total_calories), 0) AS total FROM food_log WHERE user_id = ? AND date(log_date) = ?",
            (user_id, day.isoformat()),
        ).fetchone()["total"]
        exercise_total = conn.execute(
            """
            SELECT COALESCE(SUM(total_calories_burned), 0) AS total
            FROM exercise_log WHERE user_id = ? AND date(log_date) = ?
            """,
            (user_id, day.isoformat()),
        ).fetchone()["total"]
    food_total = round(float(food_total), 2)
    exercise_total = round(float(exercise_total), 2)
    return {
        "date": day.isoformat(),
        "total_food_calories": food_total,
        "total_exercise_calories": exercise_total,
        "net_calories": round(food_total - exercise_total, 2),
    }


def ingest_food_suggestions(foods: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Upsert AI food suggestions by case-insensitive name; blank names are skipped."""
    stored: List[Dict[str, Any]] = []
    with db_conn() as conn:
        for food in foods:
            name = (food.get("food_name") or food.get("name") or "").strip()
            if not name:
                continue
            stored.append(
                upsert_food(
                    conn,
                    name,
                    calories_per_100g=_first(food, "calories_per_100g", "calories"),
                    protein_per_100g=_first(food, "protein_per_100g", "protein"),
                    carbs_per_100g=_first(food, "carbs_per_100g", "carbs"),
                    fats_per_100g=_first(food, "fats_per_100g", "fat"),
                    defaults={"calories_per_100g": DEFAULT_FOOD_NUTRITION["calories_per_100g"]},
                )
            )
    logger.info("ingested %d food suggestions", len(stored))
    return stored


def _first(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None
