"""
Expense Ledger - Source Package

A local, single-user expense ledger: discrete monetary records persisted
to SQLite, with time-windowed views and per-category totals.

DESIGN PRINCIPLES:
1. The store handle and the clock are always passed in, never global
2. Invalid input is rejected before anything is written
3. A failed schema upgrade degrades filtering, not the whole ledger
4. Views are recomputed from a full re-fetch, no incremental cache
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Ledger Team"
