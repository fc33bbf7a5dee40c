"""
Split Ledger - Source Package

A bill-splitting ledger for small groups sharing expenses.

DESIGN PRINCIPLES:
1. One roster of participants, shared by every bill
2. Each participant has exactly one allocation mode
3. Allocations are derived, never stored
4. Every mutation is persisted and logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Split Ledger Team"
