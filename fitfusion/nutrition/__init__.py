# -*- coding: utf-8 -*-
"""Nutrition reference data (food and exercise rows) and autocomplete search."""
