# -*- coding: utf-8 -*-
"""Health logging domain (food/exercise logs by name, daily summary).

Log storage here is shared with the search-driven tracker under ``/api/log``.
"""
