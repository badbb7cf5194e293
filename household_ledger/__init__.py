"""
Household Ledger - Source Package

The ledger and insight core of a shared expense tracker for
two-member households.

DESIGN PRINCIPLES:
1. Engines are pure functions over snapshots
2. "Today" is always passed in, never read from the clock
3. The core holds no state; storage is swappable
4. Every write is auditable
"""

__version__ = "1.0.0"
__author__ = "Household Ledger Team"
