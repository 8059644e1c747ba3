# -*- coding: utf-8 -*-
"""App database — SQLite schema and connection helpers.

Every multi-statement write goes through ``db_conn``: the block runs inside one
transaction that commits on success and rolls back on any exception.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from .config import settings


def iso_now() -> str:
    return datetime.utcnow().isoformat(sep=" ", timespec="seconds")


def utc_today() -> date:
    return datetime.utcnow().date()


def casefold(value: Optional[str]) -> Optional[str]:
    """Unicode case folding; SQLite's LOWER() and NOCASE only fold ASCII."""
    return value.strip().casefold() if value is not None else None


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.create_function("casefold", 1, casefold, deterministic=True)
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def row_to_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    return dict(row) if row is not None else None


def init_app_db(db_path: Path | None = None) -> None:
    conn = connect(db_path or settings.db_path)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                user_id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                email TEXT NOT NULL UNIQUE,
                password TEXT NOT NULL,
                phone_number TEXT,
                address TEXT,
                role TEXT NOT NULL DEFAULT 'customer' CHECK (role IN ('customer', 'supplier')),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS suppliers (
                supplier_id INTEGER PRIMARY KEY AUTOINCREMENT,
                supplier_name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                phone_number TEXT,
                address TEXT,
                created_at TEXT NOT NULL
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS categories (
                category_id INTEGER PRIMARY KEY AUTOINCREMENT,
                category_name TEXT NOT NULL UNIQUE,
                description TEXT
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS products (
                product_id INTEGER PRIMARY KEY AUTOINCREMENT,
                product_name TEXT NOT NULL,
                description TEXT,
                price REAL NOT NULL CHECK (price >= 0),
                stock_quantity INTEGER NOT NULL DEFAULT 0 CHECK (stock_quantity >= 0),
                category_id INTEGER,
                supplier_id INTEGER,
                created_at TEXT NOT NULL,
                FOREIGN KEY(category_id) REFERENCES categories(category_id) ON DELETE SET NULL,
                FOREIGN KEY(supplier_id) REFERENCES suppliers(supplier_id) ON DELETE SET NULL
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS orders (
                order_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                total_amount REAL NOT NULL DEFAULT 0,
                status TEXT NOT NULL DEFAULT 'Cart'
                    CHECK (status IN ('Cart', 'Pending', 'Shipped', 'Delivered', 'Cancelled')),
                shipping_address TEXT,
                order_date TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(user_id) ON DELETE CASCADE
            );
            """
        )
        # At most one open cart per user.
        cur.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_orders_one_cart_per_user ON orders(user_id) WHERE status = 'Cart';"
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_orders_user_status_date ON orders(user_id, status, order_date DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS order_items (
                order_item_id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_id INTEGER NOT NULL,
                product_id INTEGER NOT NULL,
                quantity INTEGER NOT NULL CHECK (quantity >= 1),
                price_at_purchase REAL NOT NULL,
                FOREIGN KEY(order_id) REFERENCES orders(order_id) ON DELETE CASCADE,
                FOREIGN KEY(product_id) REFERENCES products(product_id),
                UNIQUE(order_id, product_id)
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS food (
                food_id INTEGER PRIMARY KEY AUTOINCREMENT,
                food_name TEXT NOT NULL,
                calories_per_100g REAL NOT NULL DEFAULT 0,
                protein_per_100g REAL NOT NULL DEFAULT 0,
                carbs_per_100g REAL NOT NULL DEFAULT 0,
                fats_per_100g REAL NOT NULL DEFAULT 0
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS exercise (
                exercise_id INTEGER PRIMARY KEY AUTOINCREMENT,
                exercise_name TEXT NOT NULL,
                calories_burned_per_minute REAL NOT NULL DEFAULT 0
            );
            """
        )
        cur.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_food_name_casefold ON food(casefold(food_name));"
        )
        cur.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_exercise_name_casefold ON exercise(casefold(exercise_name));"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS food_log (
                log_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                food_id INTEGER NOT NULL,
                quantity_grams REAL NOT NULL CHECK (quantity_grams > 0),
                total_calories REAL NOT NULL,
                meal_time TEXT,
                log_date TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(user_id) ON DELETE CASCADE,
                FOREIGN KEY(food_id) REFERENCES food(food_id)
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_food_log_user_date ON food_log(user_id, log_date DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS exercise_log (
                log_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                exercise_id INTEGER NOT NULL,
                duration_minutes REAL NOT NULL CHECK (duration_minutes > 0),
                total_calories_burned REAL NOT NULL,
                log_date TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(user_id) ON DELETE CASCADE,
                FOREIGN KEY(exercise_id) REFERENCES exercise(exercise_id)
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_exercise_log_user_date ON exercise_log(user_id, log_date DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS diet_plans (
                plan_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                plan_name TEXT NOT NULL,
                start_date TEXT,
                end_date TEXT,
                is_ai_generated INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(user_id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS diet_plan_items (
                item_id INTEGER PRIMARY KEY AUTOINCREMENT,
                plan_id INTEGER NOT NULL,
                food_id INTEGER,
                product_id INTEGER,
                meal_time TEXT NOT NULL CHECK (meal_time IN ('Breakfast', 'Lunch', 'Snack', 'Dinner')),
                quantity REAL NOT NULL,
                calories REAL NOT NULL DEFAULT 0,
                FOREIGN KEY(plan_id) REFERENCES diet_plans(plan_id) ON DELETE CASCADE,
                FOREIGN KEY(food_id) REFERENCES food(food_id),
                FOREIGN KEY(product_id) REFERENCES products(product_id)
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_diet_plan_items_plan ON diet_plan_items(plan_id, meal_time);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS reviews (
                review_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                product_id INTEGER NOT NULL,
                rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
                comment TEXT,
                reviewed_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(user_id) ON DELETE CASCADE,
                FOREIGN KEY(product_id) REFERENCES products(product_id) ON DELETE CASCADE,
                UNIQUE(user_id, product_id)
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path | None = None) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path or settings.db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
