# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from datetime import datetime, timedelta
from unittest import mock

import app_case


def _ai_reply() -> str:
    plan = {
        "planName": "Two Day Cut",
        "meals": [
            {"day": 1, "mealTime": "Breakfast", "foodName": "Skyr", "quantity": 200, "caloriesPer100g": 100},
            {"day": 1, "mealTime": "Lunch", "foodName": "Turkey Wrap", "quantity": 150, "caloriesPer100g": 210},
            {"day": 2, "mealTime": "breakfast", "foodName": "skyr", "quantity": 150, "caloriesPer100g": 100},
        ],
    }
    return "```json\n" + json.dumps(plan) + "\n```"


class TestAIDietPlan(app_case.AppTestCase):
    def test_generate_saves_flagged_plan(self) -> None:
        headers = self.signup()
        # Existing food keeps its stored nutrition.
        self.add_food("Skyr", 63)

        with mock.patch("fitfusion.diet_plans.generator.complete_text", return_value=_ai_reply()) as fake:
            resp = self.client.post(
                "/api/ai-diet-plan/generate",
                json={"goals": "lose fat", "duration": 2},
                headers=headers,
            )
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertIn("2-day diet plan", fake.call_args[0][0])

        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["plan"]["plan_name"], "Two Day Cut")
        self.assertEqual(body["plan"]["is_ai_generated"], 1)
        self.assertEqual(body["aiResponse"]["planName"], "Two Day Cut")

        today = datetime.utcnow().date()
        self.assertEqual(body["plan"]["start_date"], today.isoformat())
        self.assertEqual(body["plan"]["end_date"], (today + timedelta(days=2)).isoformat())

        items = body["items"]
        self.assertEqual(len(items), 3)
        skyr = [i for i in items if i["food_name"] == "Skyr"]
        self.assertEqual(len(skyr), 2)
        self.assertEqual(len({i["food_id"] for i in skyr}), 1)
        self.assertAlmostEqual(sorted(i["calories"] for i in skyr)[-1], 126.0, places=2)

        wrap = next(i for i in items if i["food_name"] == "Turkey Wrap")
        self.assertAlmostEqual(wrap["calories"], 315.0, places=2)

    def test_unparseable_reply(self) -> None:
        headers = self.signup()
        with mock.patch("fitfusion.diet_plans.generator.complete_text", return_value="not json at all"):
            resp = self.client.post("/api/ai-diet-plan/generate", json={}, headers=headers)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "message": "Failed to parse AI response. Please try again."})
        self.assertEqual(self.client.get("/api/diet-plans", headers=headers).json()["plans"], [])

    def test_provider_failure(self) -> None:
        from fitfusion.agent_service import AgentError  # noqa: WPS433

        headers = self.signup()
        with mock.patch(
            "fitfusion.diet_plans.generator.complete_text", side_effect=AgentError("Agent API unreachable")
        ):
            resp = self.client.post("/api/ai-diet-plan/generate", json={"duration": 3}, headers=headers)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["message"], "Error generating AI diet plan")

    def test_duration_bounds(self) -> None:
        headers = self.signup()
        resp = self.client.post("/api/ai-diet-plan/generate", json={"duration": 0}, headers=headers)
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
