"""
DevDesk Insights
================

SLA evaluation and team analytics over tickets read from an external
issue tracker.
"""

__version__ = "1.0.0"
