# -*- coding: utf-8 -*-
"""Orders & cart storage (SQLite).

A cart is the user's single ``orders`` row with status ``Cart``. Every cart
mutation recomputes ``total_amount`` from its items inside the same
transaction, and checkout is all-or-nothing across every line item.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from ..app_db import db_conn, iso_now, row_to_dict
from .models import STATUS_TRANSITIONS, OrderStatus

logger = logging.getLogger(__name__)


def _find_cart(conn: sqlite3.Connection, user_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT * FROM orders WHERE user_id = ? AND status = 'Cart'",
        (user_id,),
    ).fetchone()
    return row_to_dict(row)


def get_or_create_cart(conn: sqlite3.Connection, user_id: int) -> Dict[str, Any]:
    cart = _find_cart(conn, user_id)
    if cart:
        return cart
    try:
        cur = conn.execute(
            "INSERT INTO orders (user_id, total_amount, status, created_at) VALUES (?, 0, 'Cart', ?)",
            (user_id, iso_now()),
        )
    except sqlite3.IntegrityError:
        # Another request opened the cart first (one Cart row per user).
        cart = _find_cart(conn, user_id)
        if cart is None:
            raise
        return cart
    return dict(conn.execute("SELECT * FROM orders WHERE order_id = ?", (cur.lastrowid,)).fetchone())


def recompute_total(conn: sqlite3.Connection, order_id: int) -> float:
    row = conn.execute(
        "SELECT COALESCE(SUM(quantity * price_at_purchase), 0) AS total FROM order_items WHERE order_id = ?",
        (order_id,),
    ).fetchone()
    total = round(float(row["total"]), 2)
    conn.execute("UPDATE orders SET total_amount = ? WHERE order_id = ?", (total, order_id))
    return total


def _cart_items(conn: sqlite3.Connection, order_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT oi.*, p.product_name, p.description, p.price AS current_price
        FROM order_items oi
        JOIN products p ON oi.product_id = p.product_id
        WHERE oi.order_id = ?
        ORDER BY oi.order_item_id
        """,
        (order_id,),
    ).fetchall()
    return [dict(r) for r in rows]


def get_cart(user_id: int) -> Dict[str, Any]:
    with db_conn() as conn:
        cart = get_or_create_cart(conn, user_id)
        cart["items"] = _cart_items(conn, cart["order_id"])
    return cart


def add_cart_item(*, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
    """Add ``quantity`` of a product, merging with an existing line for the same product."""
    with db_conn() as conn:
        product = conn.execute("SELECT * FROM products WHERE product_id = ?", (product_id,)).fetchone()
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        if product["stock_quantity"] < quantity:
            raise HTTPException(status_code=400, detail="Insufficient stock available")

        cart = get_or_create_cart(conn, user_id)
        existing = conn.execute(
            "SELECT * FROM order_items WHERE order_id = ? AND product_id = ?",
            (cart["order_id"], product_id),
        ).fetchone()

        if existing:
            updated_quantity = existing["quantity"] + quantity
            if product["stock_quantity"] < updated_quantity:
                raise HTTPException(status_code=400, detail="Insufficient stock for total quantity")
            conn.execute(
                "UPDATE order_items SET quantity = ? WHERE order_item_id = ?",
                (updated_quantity, existing["order_item_id"]),
            )
        else:
            updated_quantity = quantity
            conn.execute(
                "INSERT INTO order_items (order_id, product_id, quantity, price_at_purchase) VALUES (?, ?, ?, ?)",
                (cart["order_id"], product_id, quantity, product["price"]),
            )

        total = recompute_total(conn, cart["order_id"])
    return {"order_id": cart["order_id"], "product_id": product_id, "quantity": updated_quantity, "total_amount": total}


def _owned_cart_item(conn: sqlite3.Connection, user_id: int, item_id: int) -> Dict[str, Any]:
    row = conn.execute(
        """
        SELECT oi.*, p.stock_quantity
        FROM order_items oi
        JOIN orders o ON oi.order_id = o.order_id
        JOIN products p ON oi.product_id = p.product_id
        WHERE oi.order_item_id = ? AND o.user_id = ? AND o.status = 'Cart'
        """,
        (item_id, user_id),
    ).fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return dict(row)


def update_cart_item(*, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
    if quantity < 1:
        raise HTTPException(status_code=400, detail="Valid quantity is required")
    with db_conn() as conn:
        item = _owned_cart_item(conn, user_id, item_id)
        if item["stock_quantity"] < quantity:
            raise HTTPException(status_code=400, detail="Insufficient stock available")
        conn.execute("UPDATE order_items SET quantity = ? WHERE order_item_id = ?", (quantity, item_id))
        total = recompute_total(conn, item["order_id"])
    return {"order_id": item["order_id"], "order_item_id": item_id, "quantity": quantity, "total_amount": total}


def remove_cart_item(*, user_id: int, item_id: int) -> Dict[str, Any]:
    with db_conn() as conn:
        item = _owned_cart_item(conn, user_id, item_id)
        conn.execute("DELETE FROM order_items WHERE order_item_id = ?", (item_id,))
        total = recompute_total(conn, item["order_id"])
    return {"order_id": item["order_id"], "total_amount": total}


def place_order(*, user_id: int, shipping_address: str) -> int:
    """Check out the user's cart: validate stock, decrement it, flip Cart -> Pending.

    Any shortfall raises before commit, so no product's stock changes.
    """
    with db_conn() as conn:
        cart = _find_cart(conn, user_id)
        if not cart:
            raise HTTPException(status_code=404, detail="No items in cart")

        items = conn.execute(
            """
            SELECT oi.*, p.stock_quantity
            FROM order_items oi
            JOIN products p ON oi.product_id = p.product_id
            WHERE oi.order_id = ?
            """,
            (cart["order_id"],),
        ).fetchall()
        if not items:
            raise HTTPException(status_code=400, detail="No items in cart")

        for item in items:
            if item["stock_quantity"] < item["quantity"]:
                raise HTTPException(
                    status_code=400,
                    detail=f"Insufficient stock for product ID: {item['product_id']}",
                )

        for item in items:
            cur = conn.execute(
                """
                UPDATE products SET stock_quantity = stock_quantity - ?
                WHERE product_id = ? AND stock_quantity >= ?
                """,
                (item["quantity"], item["product_id"], item["quantity"]),
            )
            if cur.rowcount != 1:
                # Stock moved between the check and the update (concurrent checkout).
                raise HTTPException(
                    status_code=400,
                    detail=f"Insufficient stock for product ID: {item['product_id']}",
                )

        recompute_total(conn, cart["order_id"])
        conn.execute(
            "UPDATE orders SET status = 'Pending', shipping_address = ?, order_date = ? WHERE order_id = ?",
            (shipping_address, iso_now(), cart["order_id"]),
        )
    logger.info("order %s placed by user %s", cart["order_id"], user_id)
    return cart["order_id"]


def list_orders(*, user_id: int, status: Optional[str] = None) -> List[Dict[str, Any]]:
    sql = """
        SELECT o.*, COUNT(oi.order_item_id) AS item_count
        FROM orders o
        LEFT JOIN order_items oi ON o.order_id = oi.order_id
        WHERE o.user_id = ? AND o.status != 'Cart'
    """
    params: list[Any] = [user_id]
    if status:
        sql += " AND o.status = ?"
        params.append(status)
    sql += " GROUP BY o.order_id ORDER BY o.order_date DESC, o.order_id DESC"

    with db_conn() as conn:
        rows = conn.execute(sql, params).fetchall()
    return [dict(r) for r in rows]


def get_order(*, user_id: int, order_id: int) -> Optional[Dict[str, Any]]:
    with db_conn() as conn:
        order = conn.execute(
            "SELECT * FROM orders WHERE order_id = ? AND user_id = ?",
            (order_id, user_id),
        ).fetchone()
        if not order:
            return None
        items = conn.execute(
            """
            SELECT oi.*, p.product_name, p.description
            FROM order_items oi
            JOIN products p ON oi.product_id = p.product_id
            WHERE oi.order_id = ?
            ORDER BY oi.order_item_id
            """,
            (order_id,),
        ).fetchall()
    return {"order": dict(order), "items": [dict(r) for r in items]}


def update_order_status(*, user_id: int, order_id: int, status: str) -> Dict[str, Any]:
    try:
        target = OrderStatus(status)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid order status") from exc
    if target is OrderStatus.cart:
        raise HTTPException(status_code=400, detail="Invalid order status")

    with db_conn() as conn:
        row = conn.execute(
            "SELECT * FROM orders WHERE order_id = ? AND user_id = ?",
            (order_id, user_id),
        ).fetchone()
        if not row:
            raise HTTPException(status_code=404, detail="Order not found")

        current = OrderStatus(row["status"])
        if target not in STATUS_TRANSITIONS.get(current, frozenset()):
            raise HTTPException(
                status_code=409,
                detail=f"Cannot change order status from {current.value} to {target.value}",
            )
        conn.execute("UPDATE orders SET status = ? WHERE order_id = ?", (target.value, order_id))
        updated = conn.execute("SELECT * FROM orders WHERE order_id = ?", (order_id,)).fetchone()
    return dict(updated)


def complete_order(*, user_id: int, order_id: int) -> None:
    """Payment shortcut: flip a cart straight to Delivered.

    Unlike ``place_order`` this neither re-validates nor decrements stock.
    """
    with db_conn() as conn:
        cur = conn.execute(
            """
            UPDATE orders SET status = 'Delivered', order_date = COALESCE(order_date, ?)
            WHERE order_id = ? AND user_id = ? AND status = 'Cart'
            """,
            (iso_now(), order_id, user_id),
        )
        if cur.rowcount == 0:
            raise HTTPException(status_code=400, detail="Order not found or already completed")
    logger.info("order %s completed via payment shortcut by user %s", order_id, user_id)
