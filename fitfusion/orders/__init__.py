# -*- coding: utf-8 -*-
"""Shopping cart, checkout and order lifecycle."""
