# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from unittest import mock

import app_case


class TestTracker(app_case.AppTestCase):
    def test_query_required(self) -> None:
        headers = self.signup()
        resp = self.client.get("/api/log/search-food", headers=headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Query is required")
        resp = self.client.get("/api/log/search-exercise?q=%20", headers=headers)
        self.assertEqual(resp.status_code, 400)

    def test_search_prefers_database(self) -> None:
        headers = self.signup()
        self.add_food("Brown Rice", 111)
        with mock.patch("fitfusion.tracker.estimator.complete_text") as fake:
            resp = self.client.get("/api/log/search-food?q=RICE", headers=headers)
        self.assertEqual(resp.status_code, 200)
        results = resp.json()["results"]
        self.assertTrue(results)
        self.assertTrue(all(r["source"] == "db" for r in results))
        self.assertIn("Brown Rice", [r["food_name"] for r in results])
        fake.assert_not_called()

    def test_search_falls_back_to_ai_without_persisting(self) -> None:
        headers = self.signup()
        reply = "```json\n" + json.dumps({"food_name": "Dragonfruit", "calories_per_100g": 60}) + "\n```"
        with mock.patch("fitfusion.tracker.estimator.complete_text", return_value=reply):
            resp = self.client.get("/api/log/search-food?q=dragonfruit", headers=headers)
        self.assertEqual(resp.status_code, 200, resp.text)
        results = resp.json()["results"]
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0]["source"], "ai")
        self.assertEqual(results[0]["calories_per_100g"], 60)
        with self.db() as conn:
            row = conn.execute("SELECT 1 FROM food WHERE LOWER(food_name) = 'dragonfruit'").fetchone()
        self.assertIsNone(row)

        null_reply = json.dumps({"food_name": "Zzyzx", "calories_per_100g": None})
        with mock.patch("fitfusion.tracker.estimator.complete_text", return_value=null_reply):
            resp = self.client.get("/api/log/search-food?q=zzyzx", headers=headers)
        self.assertEqual(resp.json()["results"], [])

        exercise_reply = json.dumps({"exercise_name": "Sled Push", "calories_burned_per_minute": 12.5})
        with mock.patch("fitfusion.tracker.estimator.complete_text", return_value=exercise_reply):
            resp = self.client.get("/api/log/search-exercise?q=sled%20push", headers=headers)
        self.assertEqual(resp.json()["results"][0]["source"], "ai")

    def test_search_ai_failure(self) -> None:
        from fitfusion.agent_service import AgentError  # noqa: WPS433

        headers = self.signup()
        with mock.patch("fitfusion.tracker.estimator.complete_text", side_effect=AgentError("down")):
            resp = self.client.get("/api/log/search-food?q=unobtainium", headers=headers)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["message"], "Failed to search for food")

        with mock.patch("fitfusion.tracker.estimator.complete_text", return_value="no idea"):
            resp = self.client.get("/api/log/search-exercise?q=unobtainium", headers=headers)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["message"], "Failed to search for exercise")

    def test_log_entries_today_and_delete(self) -> None:
        headers = self.signup()
        # AI estimate: no food_id, stored on first log.
        resp = self.client.post(
            "/api/log/food",
            json={
                "food": {"food_name": "Acai Bowl", "calories_per_100g": 120, "source": "ai"},
                "quantity_grams": 250,
                "meal_time": "Breakfast",
            },
            headers=headers,
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        first = resp.json()["log"]
        self.assertAlmostEqual(first["total_calories"], 300.0)
        self.assertEqual(first["meal_time"], "Breakfast")

        # Different casing and nutrition resolves to the stored row.
        resp = self.client.post(
            "/api/log/food",
            json={"food": {"food_name": "acai bowl", "calories_per_100g": 999}, "quantity_grams": 100, "meal_time": "snack"},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 201)
        self.assertAlmostEqual(resp.json()["log"]["total_calories"], 120.0)
        self.assertEqual(resp.json()["log"]["food_id"], first["food_id"])

        resp = self.client.post(
            "/api/log/food",
            json={"food": {"food_id": 987654}, "quantity_grams": 100, "meal_time": "Lunch"},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 404)

        resp = self.client.post(
            "/api/log/exercise",
            json={"exercise": {"exercise_name": "Kayaking", "calories_burned_per_minute": 6}, "duration_minutes": 20},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 201)
        exercise_log = resp.json()["log"]
        self.assertAlmostEqual(exercise_log["total_calories_burned"], 120.0)

        today = self.client.get("/api/log/today", headers=headers).json()
        self.assertEqual(len(today["food"]), 2)
        self.assertEqual(len(today["exercise"]), 1)
        self.assertEqual(today["exercise"][0]["exercise_name"], "Kayaking")

        resp = self.client.delete(f"/api/log/food/{first['log_id']}", headers=headers)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.delete(f"/api/log/food/{first['log_id']}", headers=headers)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["message"], "Log not found")

        resp = self.client.delete(f"/api/log/exercise/{exercise_log['log_id']}", headers=headers)
        self.assertEqual(resp.status_code, 200)

    def test_food_autocomplete(self) -> None:
        headers = self.signup()
        self.add_food("Almond Butter", 614)
        self.add_food("Almond Milk", 17)
        resp = self.client.get("/api/food/search?q=almond", headers=headers)
        self.assertEqual(resp.status_code, 200)
        names = [f["food_name"] for f in resp.json()["foods"]]
        self.assertEqual(names, ["Almond Butter", "Almond Milk"])

        self.add_food("Crème Fraîche", 292)
        resp = self.client.get("/api/food/search?q=CR%C3%88ME", headers=headers)
        self.assertEqual([f["food_name"] for f in resp.json()["foods"]], ["Crème Fraîche"])

        resp = self.client.get("/api/food/search?q=", headers=headers)
        self.assertEqual(resp.json()["foods"], [])


if __name__ == "__main__":
    unittest.main()
