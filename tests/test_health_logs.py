# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import datetime

import app_case


class TestHealthLogs(app_case.AppTestCase):
    def test_food_log_by_name_is_case_insensitive(self) -> None:
        headers = self.signup()
        self.add_food("Banana", 89)

        resp = self.client.post("/api/health/food-logs", json={"food_name": "banana", "quantity_grams": 100}, headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertAlmostEqual(resp.json()["data"]["total_calories"], 89.0)
        self.assertEqual(resp.json()["data"]["food_name"], "Banana")

        resp = self.client.post("/api/health/food-logs", json={"food_name": "BANANA", "quantity_grams": 50}, headers=headers)
        self.assertEqual(resp.status_code, 201)
        with self.db() as conn:
            count = conn.execute("SELECT COUNT(*) AS n FROM food WHERE LOWER(food_name) = 'banana'").fetchone()["n"]
        self.assertEqual(count, 1)

    def test_non_ascii_names_match_across_casing(self) -> None:
        headers = self.signup()
        for name in ("Crème Brûlée", "CRÈME BRÛLÉE"):
            resp = self.client.post("/api/health/food-logs", json={"food_name": name, "quantity_grams": 100}, headers=headers)
            self.assertEqual(resp.status_code, 201, resp.text)
            self.assertEqual(resp.json()["data"]["food_name"], "Crème Brûlée")
        for name in ("Ćwiczenia Siłowe", "ĆWICZENIA SIŁOWE"):
            resp = self.client.post(
                "/api/health/exercise-logs", json={"exercise_name": name, "duration_minutes": 10}, headers=headers
            )
            self.assertEqual(resp.status_code, 201, resp.text)

        with self.db() as conn:
            foods = conn.execute("SELECT food_name FROM food WHERE casefold(food_name) = 'crème brûlée'").fetchall()
            exercises = conn.execute(
                "SELECT exercise_name FROM exercise WHERE casefold(exercise_name) = 'ćwiczenia siłowe'"
            ).fetchall()
        self.assertEqual([r["food_name"] for r in foods], ["Crème Brûlée"])
        self.assertEqual([r["exercise_name"] for r in exercises], ["Ćwiczenia Siłowe"])

    def test_unseen_food_and_exercise_get_defaults(self) -> None:
        headers = self.signup()
        resp = self.client.post(
            "/api/health/food-logs", json={"food_name": "Mystery Stew", "quantity_grams": 150}, headers=headers
        )
        self.assertEqual(resp.status_code, 201)
        self.assertAlmostEqual(resp.json()["data"]["total_calories"], 150.0)
        with self.db() as conn:
            food = conn.execute("SELECT * FROM food WHERE food_name = 'Mystery Stew'").fetchone()
        self.assertEqual(
            (food["calories_per_100g"], food["protein_per_100g"], food["carbs_per_100g"], food["fats_per_100g"]),
            (100, 5, 15, 2),
        )

        resp = self.client.post(
            "/api/health/exercise-logs", json={"exercise_name": "Rowing", "duration_minutes": 30}, headers=headers
        )
        self.assertEqual(resp.status_code, 201)
        self.assertAlmostEqual(resp.json()["data"]["total_calories_burned"], 150.0)

        resp = self.client.post("/api/health/food-logs", json={"food_name": "Soup", "quantity_grams": 0}, headers=headers)
        self.assertEqual(resp.status_code, 400)

    def test_list_summary_and_delete(self) -> None:
        headers = self.signup()
        self.add_food("Toast", 265)
        for grams in (100, 50):
            self.client.post("/api/health/food-logs", json={"food_name": "Toast", "quantity_grams": grams}, headers=headers)
        self.client.post("/api/health/exercise-logs", json={"exercise_name": "Rowing", "duration_minutes": 10}, headers=headers)

        logs = self.client.get("/api/health/food-logs", headers=headers).json()["data"]
        self.assertEqual(len(logs), 2)
        self.assertEqual(logs[0]["food_name"], "Toast")
        self.assertEqual(len(self.client.get("/api/health/food-logs?limit=1", headers=headers).json()["data"]), 1)
        self.assertEqual(
            self.client.get("/api/health/food-logs?endDate=2000-01-01", headers=headers).json()["data"], []
        )

        today = datetime.utcnow().date().isoformat()
        summary = self.client.get(f"/api/health/summary?date={today}", headers=headers).json()["data"]
        self.assertAlmostEqual(summary["total_food_calories"], 397.5)
        exercise_total = summary["total_exercise_calories"]
        self.assertGreater(exercise_total, 0)
        self.assertAlmostEqual(summary["net_calories"], 397.5 - exercise_total)

        empty = self.client.get("/api/health/summary?date=2000-01-01", headers=headers).json()["data"]
        self.assertEqual(empty["net_calories"], 0)

        other = self.signup()
        log_id = logs[0]["log_id"]
        resp = self.client.delete(f"/api/health/food-logs/{log_id}", headers=other)
        self.assertEqual(resp.status_code, 404)
        resp = self.client.delete(f"/api/health/food-logs/{log_id}", headers=headers)
        self.assertEqual(resp.status_code, 200)

    def test_food_suggestions_disabled_without_key(self) -> None:
        resp = self.client.post("/api/health/food-suggestions", json={"foods": [{"name": "Apple"}]})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["message"], "Ingestion disabled")


class TestFoodSuggestionIngestion(app_case.AppTestCase):
    extra_env = {"FITFUSION_INGESTION_KEY": "ingest-secret"}

    def test_requires_matching_key(self) -> None:
        resp = self.client.post(
            "/api/health/food-suggestions",
            json={"foods": [{"name": "Apple"}]},
            headers={"X-Ingest-Key": "wrong"},
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid ingestion key")

    def test_upserts_by_name(self) -> None:
        self.add_food("Pear", 57)
        resp = self.client.post(
            "/api/health/food-suggestions?ingest_key=ingest-secret",
            json={
                "foods": [
                    {"name": "Apple", "calories": 52, "protein": 0.3},
                    {"food_name": "pear", "calories_per_100g": 99},
                    {"name": "Plain Rice Cake"},
                    {"name": "   "},
                ]
            },
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        data = resp.json()["data"]
        self.assertEqual([f["food_name"] for f in data], ["Apple", "Pear", "Plain Rice Cake"])
        self.assertEqual(data[0]["calories_per_100g"], 52)
        self.assertEqual(data[1]["calories_per_100g"], 57)
        self.assertEqual(data[2]["calories_per_100g"], 100)


if __name__ == "__main__":
    unittest.main()
