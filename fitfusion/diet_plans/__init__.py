# -*- coding: utf-8 -*-
"""Diet plans (form-built, manual and AI-generated)."""
