"""Sort engine.

toggle.py owns the sort_by state machine, sort_types.py the
comparator registry, and sort_rows.py the stable recursive multi-key sort.
"""
