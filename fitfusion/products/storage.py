# -*- coding: utf-8 -*-
"""Products — catalog, supplier and review storage (SQLite)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from ..app_db import db_conn, iso_now, row_to_dict


def get_supplier_id_for_user(user_id: int) -> Optional[int]:
    with db_conn() as conn:
        row = conn.execute(
            "SELECT supplier_id FROM suppliers WHERE email = (SELECT email FROM users WHERE user_id = ?)",
            (user_id,),
        ).fetchone()
    return row["supplier_id"] if row else None


def create_product(
    *,
    supplier_id: int,
    product_name: str,
    description: Optional[str],
    price: float,
    stock_quantity: int,
    category_id: int,
) -> Dict[str, Any]:
    with db_conn() as conn:
        category = conn.execute("SELECT 1 FROM categories WHERE category_id = ?", (category_id,)).fetchone()
        if not category:
            raise HTTPException(status_code=400, detail="Unknown category")
        cur = conn.execute(
            """
            INSERT INTO products (product_name, description, price, stock_quantity, category_id, supplier_id, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (product_name, description, price, stock_quantity, category_id, supplier_id, iso_now()),
        )
        row = conn.execute("SELECT * FROM products WHERE product_id = ?", (cur.lastrowid,)).fetchone()
    return dict(row)


def list_products() -> List[Dict[str, Any]]:
    with db_conn() as conn:
        rows = conn.execute(
            """
            SELECT p.product_id, p.product_name, p.description, p.price,
                   p.stock_quantity, p.category_id,
                   c.category_name,
                   COALESCE(AVG(r.rating), 0) AS avg_rating,
                   COUNT(r.review_id) AS review_count
            FROM products p
            LEFT JOIN categories c ON p.category_id = c.category_id
            LEFT JOIN reviews r ON p.product_id = r.product_id
            GROUP BY p.product_id
            ORDER BY p.product_name
            """
        ).fetchall()
    return [dict(r) for r in rows]


def list_supplier_products(supplier_id: int) -> List[Dict[str, Any]]:
    with db_conn() as conn:
        rows = conn.execute(
            """
            SELECT product_id, product_name, stock_quantity, price
            FROM products
            WHERE supplier_id = ?
            ORDER BY product_name
            """,
            (supplier_id,),
        ).fetchall()
    return [dict(r) for r in rows]


def get_product_detail(product_id: int) -> Optional[Dict[str, Any]]:
    """Product with category, supplier and rating aggregates plus its latest 10 reviews."""
    with db_conn() as conn:
        product = conn.execute(
            """
            SELECT p.*, c.category_name, s.supplier_name,
                   COALESCE(AVG(r.rating), 0) AS avg_rating,
                   COUNT(r.review_id) AS review_count
            FROM products p
            LEFT JOIN categories c ON p.category_id = c.category_id
            LEFT JOIN suppliers s ON p.supplier_id = s.supplier_id
            LEFT JOIN reviews r ON p.product_id = r.product_id
            WHERE p.product_id = ?
            GROUP BY p.product_id
            """,
            (product_id,),
        ).fetchone()
        if not product:
            return None
        reviews = conn.execute(
            """
            SELECT r.*, u.username
            FROM reviews r
            JOIN users u ON r.user_id = u.user_id
            WHERE r.product_id = ?
            ORDER BY r.reviewed_at DESC, r.review_id DESC
            LIMIT 10
            """,
            (product_id,),
        ).fetchall()
    return {"product": dict(product), "reviews": [dict(r) for r in reviews]}


def list_categories() -> List[Dict[str, Any]]:
    with db_conn() as conn:
        rows = conn.execute("SELECT * FROM categories ORDER BY category_name").fetchall()
    return [dict(r) for r in rows]


def add_review(*, user_id: int, product_id: int, rating: int, comment: Optional[str]) -> Dict[str, Any]:
    with db_conn() as conn:
        product = conn.execute("SELECT product_id FROM products WHERE product_id = ?", (product_id,)).fetchone()
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")

        existing = conn.execute(
            "SELECT review_id FROM reviews WHERE user_id = ? AND product_id = ?",
            (user_id, product_id),
        ).fetchone()
        if existing:
            raise HTTPException(status_code=409, detail="You have already reviewed this product")

        cur = conn.execute(
            "INSERT INTO reviews (user_id, product_id, rating, comment, reviewed_at) VALUES (?, ?, ?, ?, ?)",
            (user_id, product_id, rating, comment, iso_now()),
        )
        row = conn.execute("SELECT * FROM reviews WHERE review_id = ?", (cur.lastrowid,)).fetchone()
    return row_to_dict(row)
