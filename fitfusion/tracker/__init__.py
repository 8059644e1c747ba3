# -*- coding: utf-8 -*-
"""Search-driven food and exercise tracker (database first, AI estimate fallback)."""
