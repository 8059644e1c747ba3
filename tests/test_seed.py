# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

import app_case


class TestSampleSeeding(app_case.AppTestCase):
    extra_env = {"FITFUSION_SEED_SAMPLE_DATA": "1"}

    def test_catalog_seeded_once(self) -> None:
        from fitfusion.seed import SAMPLE_PRODUCTS, seed_sample_data  # noqa: WPS433

        products = self.client.get("/api/products").json()["products"]
        self.assertEqual(len(products), len(SAMPLE_PRODUCTS))
        self.assertFalse(seed_sample_data(self.db_path))

        headers = self.signup()
        foods = self.client.get("/api/food/search?q=oats", headers=headers).json()["foods"]
        self.assertEqual([f["food_name"] for f in foods], ["Oats"])


if __name__ == "__main__":
    unittest.main()
