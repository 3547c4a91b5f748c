"""
Finance Splitter - Source Package

A shared bill tracker for two people, Ire and Ebe, who split every
household bill 50/50.

DESIGN PRINCIPLES:
1. The bill board always shows something: remote -> local cache -> schedule
2. Fail visibly, keep working offline
3. No silent corrections of form input
4. Regenerating the schedule never overwrites payment state
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Splitter Team"
