"""
BPTracker analytics engine.

Statistics and health insights over blood pressure, exercise, diet and
medication records.
"""

__version__ = "1.0.0"
