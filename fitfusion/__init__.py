# -*- coding: utf-8 -*-
"""FitFusion API server.

Run with ``uvicorn fitfusion.api:app``.
"""
