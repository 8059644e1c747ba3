# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

import app_case


class TestProducts(app_case.AppTestCase):
    def test_only_suppliers_create_products(self) -> None:
        category = self.add_category("Supplements")
        customer = self.signup()
        payload = {"product_name": "Creatine 300g", "price": 19.99, "stock_quantity": 25, "category_id": category}

        resp = self.client.post("/api/products", json=payload, headers=customer)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["message"], "Only suppliers can add products")

        supplier = self.signup(role="supplier", prefix="vendor")
        resp = self.client.post("/api/products", json=payload, headers=supplier)
        self.assertEqual(resp.status_code, 201, resp.text)
        product_id = resp.json()["product"]["product_id"]

        mine = self.client.get("/api/products/supplier/mine", headers=supplier).json()["products"]
        self.assertEqual([p["product_id"] for p in mine], [product_id])

        resp = self.client.post("/api/products", json={**payload, "category_id": 999999}, headers=supplier)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Unknown category")

        listing = self.client.get("/api/products").json()["products"]
        listed = next(p for p in listing if p["product_id"] == product_id)
        self.assertEqual(listed["category_name"], "Supplements")

        categories = self.client.get("/api/products/categories/list").json()["categories"]
        self.assertIn("Supplements", [c["category_name"] for c in categories])

    def test_reviews(self) -> None:
        product_id = self.add_product("Yoga Block", price=8, stock=5)
        reviewer = self.signup()

        resp = self.client.post(f"/api/products/{product_id}/reviews", json={"rating": 6}, headers=reviewer)
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post(
            f"/api/products/{product_id}/reviews", json={"rating": 4, "comment": "Sturdy"}, headers=reviewer
        )
        self.assertEqual(resp.status_code, 201, resp.text)

        resp = self.client.post(f"/api/products/{product_id}/reviews", json={"rating": 5}, headers=reviewer)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["message"], "You have already reviewed this product")

        second = self.signup()
        self.client.post(f"/api/products/{product_id}/reviews", json={"rating": 2}, headers=second)

        detail = self.client.get(f"/api/products/{product_id}").json()
        self.assertAlmostEqual(detail["product"]["avg_rating"], 3.0)
        self.assertEqual(detail["product"]["review_count"], 2)
        self.assertEqual(detail["product"]["supplier_name"], "Test Supplier")
        self.assertEqual(len(detail["reviews"]), 2)

        resp = self.client.post("/api/products/999999/reviews", json={"rating": 3}, headers=reviewer)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.client.get("/api/products/999999").status_code, 404)


if __name__ == "__main__":
    unittest.main()
