# -*- coding: utf-8 -*-
"""Diet plan storage helpers (SQLite).

``create_plan`` is the shared write path for form-built, manual and
AI-generated plans: foods are upserted by case-insensitive name, then the plan
row, then its items, all inside one transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException

from ..app_db import casefold, db_conn, iso_now
from ..nutrition.storage import find_food_by_name, get_food, upsert_food

logger = logging.getLogger(__name__)

_PLAN_AGGREGATE_SQL = """
    SELECT dp.*,
           COUNT(dpi.item_id) AS item_count,
           COALESCE(SUM(dpi.calories), 0) AS total_calories
    FROM diet_plans dp
    LEFT JOIN diet_plan_items dpi ON dp.plan_id = dpi.plan_id
    WHERE dp.user_id = ?
    GROUP BY dp.plan_id
    ORDER BY dp.created_at DESC, dp.plan_id DESC
"""


def _iso_date(value: Optional[date | str]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10] or None


def food_calories(food: Dict[str, Any], quantity: float) -> float:
    return round(float(food["calories_per_100g"]) * float(quantity) / 100.0, 2)


def list_plans(user_id: int, *, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    sql = _PLAN_AGGREGATE_SQL
    params: list[Any] = [user_id]
    if limit:
        sql += " LIMIT ?"
        params.append(limit)
    with db_conn() as conn:
        rows = conn.execute(sql, params).fetchall()
    return [dict(r) for r in rows]


def _plan_items(conn: sqlite3.Connection, plan_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT dpi.*, f.food_name, f.calories_per_100g, f.protein_per_100g,
               f.carbs_per_100g, f.fats_per_100g, p.product_name
        FROM diet_plan_items dpi
        LEFT JOIN food f ON dpi.food_id = f.food_id
        LEFT JOIN products p ON dpi.product_id = p.product_id
        WHERE dpi.plan_id = ?
        ORDER BY CASE dpi.meal_time
                     WHEN 'Breakfast' THEN 1 WHEN 'Lunch' THEN 2
                     WHEN 'Snack' THEN 3 WHEN 'Dinner' THEN 4 END,
                 dpi.item_id
        """,
        (plan_id,),
    ).fetchall()
    return [dict(r) for r in rows]


def get_plan(user_id: int, plan_id: int) -> Optional[Dict[str, Any]]:
    with db_conn() as conn:
        plan = conn.execute(
            "SELECT * FROM diet_plans WHERE plan_id = ? AND user_id = ?",
            (plan_id, user_id),
        ).fetchone()
        if not plan:
            return None
        items = _plan_items(conn, plan_id)
    return {"plan": dict(plan), "items": items}


def _owned_plan_or_404(conn: sqlite3.Connection, user_id: int, plan_id: int) -> None:
    row = conn.execute(
        "SELECT plan_id FROM diet_plans WHERE plan_id = ? AND user_id = ?",
        (plan_id, user_id),
    ).fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="Diet plan not found")


def _insert_plan(
    conn: sqlite3.Connection,
    *,
    user_id: int,
    plan_name: str,
    start_date: Optional[date | str],
    end_date: Optional[date | str],
    is_ai_generated: bool,
) -> Dict[str, Any]:
    cur = conn.execute(
        """
        INSERT INTO diet_plans (user_id, plan_name, start_date, end_date, is_ai_generated, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (user_id, plan_name, _iso_date(start_date), _iso_date(end_date), int(is_ai_generated), iso_now()),
    )
    return dict(conn.execute("SELECT * FROM diet_plans WHERE plan_id = ?", (cur.lastrowid,)).fetchone())


def _insert_item(
    conn: sqlite3.Connection,
    *,
    plan_id: int,
    food_id: Optional[int],
    product_id: Optional[int],
    meal_time: str,
    quantity: float,
    calories: Optional[float],
) -> Dict[str, Any]:
    """Insert one plan item; calories default to the food's per-100g value scaled by quantity."""
    if food_id is None and product_id is None:
        raise HTTPException(status_code=400, detail="Each item must reference a food or a product")

    if food_id is not None:
        food = get_food(conn, food_id)
        if not food:
            raise HTTPException(status_code=400, detail=f"Unknown food id: {food_id}")
        if calories is None:
            calories = food_calories(food, quantity)
    if product_id is not None:
        product = conn.execute("SELECT 1 FROM products WHERE product_id = ?", (product_id,)).fetchone()
        if not product:
            raise HTTPException(status_code=400, detail=f"Unknown product id: {product_id}")

    cur = conn.execute(
        """
        INSERT INTO diet_plan_items (plan_id, food_id, product_id, meal_time, quantity, calories)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (plan_id, food_id, product_id, meal_time, quantity, calories or 0.0),
    )
    return dict(conn.execute("SELECT * FROM diet_plan_items WHERE item_id = ?", (cur.lastrowid,)).fetchone())


def create_plan(
    *,
    user_id: int,
    plan_name: str,
    start_date: Optional[date | str],
    end_date: Optional[date | str],
    items: Iterable[Dict[str, Any]],
    foods: Iterable[Dict[str, Any]],
    is_ai_generated: bool = False,
) -> Dict[str, Any]:
    """Create a plan with its items in one transaction.

    ``foods`` entries are upserted by case-insensitive ``food_name``; an item
    naming one of them is linked through the resulting name->id map, falling
    back to its explicit ``food_id`` and then to an existing food of that name.
    """
    with db_conn() as conn:
        food_ids: Dict[str, int] = {}
        for food in foods:
            row = upsert_food(
                conn,
                food["food_name"],
                calories_per_100g=food.get("calories_per_100g"),
                protein_per_100g=food.get("protein_per_100g"),
                carbs_per_100g=food.get("carbs_per_100g"),
                fats_per_100g=food.get("fats_per_100g"),
            )
            food_ids[casefold(row["food_name"])] = row["food_id"]
            food_ids[casefold(food["food_name"])] = row["food_id"]

        plan = _insert_plan(
            conn,
            user_id=user_id,
            plan_name=plan_name,
            start_date=start_date,
            end_date=end_date,
            is_ai_generated=is_ai_generated,
        )

        for item in items:
            food_id = item.get("food_id")
            name = (item.get("food_name") or "").strip()
            if name:
                if casefold(name) in food_ids:
                    food_id = food_ids[casefold(name)]
                elif food_id is None:
                    existing = find_food_by_name(conn, name)
                    if not existing:
                        raise HTTPException(status_code=400, detail=f"Unknown food: {name}")
                    food_id = existing["food_id"]
            _insert_item(
                conn,
                plan_id=plan["plan_id"],
                food_id=food_id,
                product_id=item.get("product_id"),
                meal_time=_meal_value(item["meal_time"]),
                quantity=item["quantity"],
                calories=item.get("calories"),
            )

        items_out = _plan_items(conn, plan["plan_id"])
    logger.info("diet plan %s created for user %s with %d items", plan["plan_id"], user_id, len(items_out))
    return {"plan": plan, "items": items_out}


def _meal_value(meal_time: Any) -> str:
    return getattr(meal_time, "value", meal_time)


def create_manual_plan(
    *,
    user_id: int,
    plan_name: str,
    start_date: date,
    end_date: date,
    days: Iterable[Dict[str, Any]],
) -> int:
    """Persist a plan built from autocomplete-selected foods (each carries ``food_id``)."""
    items: List[Dict[str, Any]] = []
    for day in days:
        for meal in day.get("meals") or []:
            for item in meal.get("items") or []:
                items.append(
                    {
                        "food_id": item["food"]["food_id"],
                        "meal_time": meal["meal_time"],
                        "quantity": item["quantity"],
                    }
                )
    created = create_plan(
        user_id=user_id,
        plan_name=plan_name,
        start_date=start_date,
        end_date=end_date,
        items=items,
        foods=[],
    )
    return created["plan"]["plan_id"]


def update_plan(
    *,
    user_id: int,
    plan_id: int,
    plan_name: str,
    start_date: Optional[date],
    end_date: Optional[date],
) -> Dict[str, Any]:
    with db_conn() as conn:
        cur = conn.execute(
            "UPDATE diet_plans SET plan_name = ?, start_date = ?, end_date = ? WHERE plan_id = ? AND user_id = ?",
            (plan_name, _iso_date(start_date), _iso_date(end_date), plan_id, user_id),
        )
        if cur.rowcount == 0:
            raise HTTPException(status_code=404, detail="Diet plan not found")
        row = conn.execute("SELECT * FROM diet_plans WHERE plan_id = ?", (plan_id,)).fetchone()
    return dict(row)


def delete_plan(*, user_id: int, plan_id: int) -> None:
    """Delete a plan; its items go with it through ON DELETE CASCADE."""
    with db_conn() as conn:
        cur = conn.execute(
            "DELETE FROM diet_plans WHERE plan_id = ? AND user_id = ?",
            (plan_id, user_id),
        )
        if cur.rowcount == 0:
            raise HTTPException(status_code=404, detail="Diet plan not found")


def add_plan_item(
    *,
    user_id: int,
    plan_id: int,
    food_id: Optional[int],
    product_id: Optional[int],
    meal_time: str,
    quantity: float,
    calories: Optional[float],
) -> Dict[str, Any]:
    with db_conn() as conn:
        _owned_plan_or_404(conn, user_id, plan_id)
        return _insert_item(
            conn,
            plan_id=plan_id,
            food_id=food_id,
            product_id=product_id,
            meal_time=_meal_value(meal_time),
            quantity=quantity,
            calories=calories,
        )


def delete_plan_item(*, user_id: int, plan_id: int, item_id: int) -> None:
    with db_conn() as conn:
        _owned_plan_or_404(conn, user_id, plan_id)
        cur = conn.execute(
            "DELETE FROM diet_plan_items WHERE item_id = ? AND plan_id = ?",
            (item_id, plan_id),
        )
        if cur.rowcount == 0:
            raise HTTPException(status_code=404, detail="Diet plan item not found")
