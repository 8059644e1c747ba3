# -*- coding: utf-8 -*-
"""Accounts, password hashing and signed session tokens."""
