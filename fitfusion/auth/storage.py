# -*- coding: utf-8 -*-
"""Auth — DB storage helpers."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..app_db import db_conn, iso_now, row_to_dict

_PUBLIC_COLUMNS = "user_id, username, email, phone_number, address, role, created_at, updated_at"


def get_user_by_identifier(identifier: str) -> Optional[Dict[str, Any]]:
    """Look a user up by email or username (credentials row, includes the hash)."""
    value = identifier.strip()
    with db_conn() as conn:
        row = conn.execute(
            "SELECT * FROM users WHERE LOWER(email) = LOWER(?) OR username = ?",
            (value, value),
        ).fetchone()
        return row_to_dict(row)


def get_user_by_id(user_id: int) -> Optional[Dict[str, Any]]:
    with db_conn() as conn:
        row = conn.execute(f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE user_id = ?", (user_id,)).fetchone()
        return row_to_dict(row)


def user_exists(*, email: str, username: str) -> bool:
    with db_conn() as conn:
        row = conn.execute(
            "SELECT 1 FROM users WHERE LOWER(email) = LOWER(?) OR username = ?",
            (email.strip(), username.strip()),
        ).fetchone()
        return row is not None


def create_user(
    *,
    username: str,
    email: str,
    password_hash: str,
    role: str,
    phone_number: Optional[str] = None,
    address: Optional[str] = None,
    supplier_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Insert a user; suppliers also get a ``suppliers`` row keyed by email."""
    now = iso_now()
    email_norm = email.lower().strip()
    with db_conn() as conn:
        cur = conn.execute(
            """
            INSERT INTO users (username, email, password, phone_number, address, role, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (username.strip(), email_norm, password_hash, phone_number, address, role, now, now),
        )
        user_id = cur.lastrowid
        if role == "supplier":
            conn.execute(
                """
                INSERT INTO suppliers (supplier_name, email, phone_number, address, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (supplier_name or username.strip(), email_norm, phone_number, address, now),
            )
        row = conn.execute(f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE user_id = ?", (user_id,)).fetchone()
    return dict(row)


def touch_login(user_id: int) -> None:
    with db_conn() as conn:
        conn.execute("UPDATE users SET updated_at = ? WHERE user_id = ?", (iso_now(), user_id))


def username_taken_by_other(username: str, user_id: int) -> bool:
    with db_conn() as conn:
        row = conn.execute(
            "SELECT 1 FROM users WHERE username = ? AND user_id != ?",
            (username, user_id),
        ).fetchone()
        return row is not None


def update_profile(user_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    allowed = {k: v for k, v in fields.items() if k in {"username", "phone_number", "address"}}
    if not allowed:
        return get_user_by_id(user_id)
    assignments = ", ".join(f"{column} = ?" for column in allowed)
    params = [*allowed.values(), iso_now(), user_id]
    with db_conn() as conn:
        cur = conn.execute(
            f"UPDATE users SET {assignments}, updated_at = ? WHERE user_id = ?",
            params,
        )
        if cur.rowcount == 0:
            return None
        row = conn.execute(f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE user_id = ?", (user_id,)).fetchone()
    return row_to_dict(row)
