"""Expansion engine.

expanded.py owns the expanded-id set transitions; expand_rows.py turns an
ordered row tree into the visible depth-first row list.
"""
