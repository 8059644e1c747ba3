# -*- coding: utf-8 -*-
"""Product catalog, supplier listings and reviews."""
