"""
WorkWorth - Source Package

Converts expenses into hours of work, based on a monthly salary and the
number of days worked.

DESIGN PRINCIPLES:
1. Money is priced in time: hourly rate = salary / (days worked * 8)
2. A time cost is fixed when the expense is recorded
3. Invalid input is refused, never corrected
4. UI state is an immutable snapshot; storage is the only mutable boundary
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "WorkWorth Team"
