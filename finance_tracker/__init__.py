"""
Finance Tracker - Source Package

A personal finance tracker: users record income and expense
transactions and see totals, per-category breakdowns and monthly trends.

DESIGN PRINCIPLES:
1. Every request is scoped to the authenticated user
2. Validate before anything is persisted
3. Aggregation is deterministic
4. Every state change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
