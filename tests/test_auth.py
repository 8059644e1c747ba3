# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

import app_case


class TestAuth(app_case.AppTestCase):
    def test_liveness(self) -> None:
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "OK"})

    def test_auth_required(self) -> None:
        resp = self.client.get("/api/auth/profile")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"success": False, "message": "Access denied. No token provided."})

        resp = self.client.get("/api/orders/cart", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"success": False, "message": "Invalid token."})

    def test_signup_validation_messages(self) -> None:
        resp = self.client.post(
            "/api/auth/signup",
            json={"username": "ab", "email": "ab@example.com", "password": "password123"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Username must be at least 3 characters long")

        resp = self.client.post(
            "/api/auth/signup",
            json={"username": "abc", "email": "abc@example.com", "password": "pass word"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Password must not contain spaces")

    def test_signup_login_profile_flow(self) -> None:
        payload = {"username": "alice", "email": "Alice@Example.com", "password": "secret123"}
        resp = self.client.post("/api/auth/signup", json=payload)
        self.assertEqual(resp.status_code, 201, resp.text)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["user"]["role"], "customer")
        self.assertIn("authToken", resp.cookies)
        self.client.cookies.clear()

        resp = self.client.post("/api/auth/signup", json=payload)
        self.assertEqual(resp.status_code, 409)

        resp = self.client.post("/api/auth/login", json={"identifier": "alice", "password": "wrong-pass"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid credentials")

        resp = self.client.post("/api/auth/login", json={"identifier": "alice@example.com", "password": "secret123"})
        self.assertEqual(resp.status_code, 200)
        headers = {"Authorization": f"Bearer {resp.cookies.get('authToken')}"}
        self.client.cookies.clear()

        resp = self.client.get("/api/auth/check", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["username"], "alice")

        resp = self.client.put("/api/auth/profile", json={}, headers=headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "No fields to update")

        resp = self.client.put("/api/auth/profile", json={"address": "1 Main St"}, headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["address"], "1 Main St")

    def test_profile_username_conflict(self) -> None:
        first = self.signup(prefix="taken")
        second = self.signup(prefix="other")
        first_name = self.client.get("/api/auth/profile", headers=first).json()["user"]["username"]

        resp = self.client.put("/api/auth/profile", json={"username": first_name}, headers=second)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["message"], "Username is already taken")


if __name__ == "__main__":
    unittest.main()
