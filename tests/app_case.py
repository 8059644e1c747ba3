# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import shutil
import sqlite3
import sys
import tempfile
import unittest
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator

from fastapi.testclient import TestClient


class AppTestCase(unittest.TestCase):
    """Boots the app against a throwaway SQLite database per test class."""

    extra_env: Dict[str, str] = {}

    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="fitfusion-test-"))
        data_root = cls._tmp / "data"
        cls.db_path = data_root / "fitfusion.db"
        os.environ["FITFUSION_DATA_ROOT"] = str(data_root)
        os.environ["FITFUSION_DB_PATH"] = str(cls.db_path)
        os.environ["FITFUSION_JWT_SECRET"] = "test-secret"
        os.environ["FITFUSION_SEED_SAMPLE_DATA"] = "0"
        os.environ["FITFUSION_AI_API_KEY"] = "test-key"
        os.environ["FITFUSION_AI_BASE_URL"] = "http://127.0.0.1:1"
        os.environ.pop("FITFUSION_INGESTION_KEY", None)
        for key, value in cls.extra_env.items():
            os.environ[key] = value

        # Ensure settings/app reflect the env vars above.
        for name in list(sys.modules.keys()):
            if name == "fitfusion" or name.startswith("fitfusion."):
                sys.modules.pop(name, None)

        from fitfusion.api import app  # noqa: WPS433 (import inside test for env control)

        cls.app = app
        cls.client = TestClient(app)
        cls._counter = 0

    @classmethod
    def tearDownClass(cls) -> None:
        cls.client.close()
        for key in cls.extra_env:
            os.environ.pop(key, None)
        shutil.rmtree(cls._tmp, ignore_errors=True)

    # -- helpers -----------------------------------------------------------

    @contextmanager
    def db(self) -> Iterator[sqlite3.Connection]:
        from fitfusion.app_db import connect  # noqa: WPS433

        conn = connect(self.db_path)
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def signup(self, *, role: str = "customer", prefix: str = "user") -> Dict[str, str]:
        """Register a fresh user and return Bearer headers for it."""
        type(self)._counter += 1
        username = f"{prefix}{self._counter}"
        payload = {
            "username": username,
            "email": f"{username}@example.com",
            "password": "password123",
            "role": role,
        }
        if role == "supplier":
            payload["supplier_name"] = f"{username} Foods"
        resp = self.client.post("/api/auth/signup", json=payload)
        self.assertEqual(resp.status_code, 201, resp.text)
        token = resp.cookies.get("authToken")
        self.assertTrue(token)
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {token}"}

    def add_category(self, name: str) -> int:
        with self.db() as conn:
            cur = conn.execute("INSERT INTO categories (category_name) VALUES (?)", (name,))
            return cur.lastrowid

    def add_product(self, name: str, *, price: float, stock: int) -> int:
        with self.db() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO suppliers (supplier_name, email, created_at) VALUES (?, ?, ?)",
                ("Test Supplier", "supplier@test.local", "2024-01-01 00:00:00"),
            )
            supplier_id = conn.execute(
                "SELECT supplier_id FROM suppliers WHERE email = ?", ("supplier@test.local",)
            ).fetchone()["supplier_id"]
            cur = conn.execute(
                """
                INSERT INTO products (product_name, price, stock_quantity, supplier_id, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, price, stock, supplier_id, "2024-01-01 00:00:00"),
            )
            return cur.lastrowid

    def add_food(self, name: str, calories_per_100g: float) -> int:
        with self.db() as conn:
            cur = conn.execute(
                """
                INSERT INTO food (food_name, calories_per_100g, protein_per_100g, carbs_per_100g, fats_per_100g)
                VALUES (?, ?, 0, 0, 0)
                """,
                (name, calories_per_100g),
            )
            return cur.lastrowid

    def stock_of(self, product_id: int) -> int:
        with self.db() as conn:
            row = conn.execute("SELECT stock_quantity FROM products WHERE product_id = ?", (product_id,)).fetchone()
        return row["stock_quantity"]
