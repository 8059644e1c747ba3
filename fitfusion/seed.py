# -*- coding: utf-8 -*-
"""Sample catalog and reference data for a fresh database."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from .app_db import db_conn, iso_now
from .nutrition.storage import upsert_exercise, upsert_food

logger = logging.getLogger(__name__)

SAMPLE_CATEGORIES = [
    ("Supplements", "Protein powders, vitamins and other supplements"),
    ("Healthy Snacks", "Bars, nuts and ready-to-eat snacks"),
    ("Fitness Equipment", "Home workout gear"),
]

SAMPLE_SUPPLIER = {
    "supplier_name": "FitFusion Store",
    "email": "store@fitfusion.local",
    "phone_number": None,
    "address": None,
}

SAMPLE_PRODUCTS = [
    ("Whey Protein 1kg", "Vanilla whey protein isolate", 39.99, 50, "Supplements"),
    ("Multivitamin 60ct", "Daily multivitamin tablets", 14.5, 120, "Supplements"),
    ("Almond Protein Bar", "20g protein, low sugar", 2.99, 200, "Healthy Snacks"),
    ("Mixed Nuts 500g", "Unsalted roasted nuts", 9.75, 80, "Healthy Snacks"),
    ("Resistance Bands Set", "Five bands with handles", 24.0, 30, "Fitness Equipment"),
    ("Yoga Mat", "6mm non-slip mat", 29.99, 40, "Fitness Equipment"),
]

# (name, kcal, protein, carbs, fats) per 100 g
SAMPLE_FOODS = [
    ("Oats", 379, 13.2, 67.7, 6.5),
    ("Chicken Breast", 165, 31.0, 0.0, 3.6),
    ("Brown Rice", 111, 2.6, 23.0, 0.9),
    ("Broccoli", 34, 2.8, 6.6, 0.4),
    ("Banana", 89, 1.1, 22.8, 0.3),
    ("Greek Yogurt", 59, 10.0, 3.6, 0.4),
    ("Salmon", 208, 20.0, 0.0, 13.0),
    ("Egg", 155, 13.0, 1.1, 11.0),
]

SAMPLE_EXERCISES = [
    ("Running", 11.4),
    ("Cycling", 8.5),
    ("Walking", 4.0),
    ("Swimming", 9.8),
    ("Yoga", 3.0),
]


def seed_sample_data(db_path: Path | None = None) -> bool:
    """Insert sample data when the catalog is empty. Returns True when rows were added."""
    with db_conn(db_path) as conn:
        has_products = conn.execute("SELECT 1 FROM products LIMIT 1").fetchone()
        if has_products:
            return False

        category_ids = {}
        for name, description in SAMPLE_CATEGORIES:
            conn.execute(
                "INSERT OR IGNORE INTO categories (category_name, description) VALUES (?, ?)",
                (name, description),
            )
            row = conn.execute("SELECT category_id FROM categories WHERE category_name = ?", (name,)).fetchone()
            category_ids[name] = row["category_id"]

        conn.execute(
            """
            INSERT OR IGNORE INTO suppliers (supplier_name, email, phone_number, address, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                SAMPLE_SUPPLIER["supplier_name"],
                SAMPLE_SUPPLIER["email"],
                SAMPLE_SUPPLIER["phone_number"],
                SAMPLE_SUPPLIER["address"],
                iso_now(),
            ),
        )
        supplier_id = conn.execute(
            "SELECT supplier_id FROM suppliers WHERE email = ?", (SAMPLE_SUPPLIER["email"],)
        ).fetchone()["supplier_id"]

        for name, description, price, stock, category in SAMPLE_PRODUCTS:
            conn.execute(
                """
                INSERT INTO products (product_name, description, price, stock_quantity, category_id, supplier_id, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (name, description, price, stock, category_ids[category], supplier_id, iso_now()),
            )

        for name, kcal, protein, carbs, fats in SAMPLE_FOODS:
            upsert_food(
                conn,
                name,
                calories_per_100g=kcal,
                protein_per_100g=protein,
                carbs_per_100g=carbs,
                fats_per_100g=fats,
            )
        for name, per_minute in SAMPLE_EXERCISES:
            upsert_exercise(conn, name, calories_burned_per_minute=per_minute)

    logger.info(
        "seeded %d products, %d foods, %d exercises",
        len(SAMPLE_PRODUCTS),
        len(SAMPLE_FOODS),
        len(SAMPLE_EXERCISES),
    )
    return True


def try_seed_sample_data(db_path: Path | None = None) -> None:
    """Best-effort seeding; a failure is logged and the app keeps starting."""
    try:
        seed_sample_data(db_path)
    except sqlite3.Error as exc:
        logger.warning("sample data seeding skipped: %s", exc)
