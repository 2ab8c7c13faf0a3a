"""
Reporting Module
================

Bounded Context for historical ticket reports.

Responsibilities:
- Team activity heatmap over the trailing year
- Monthly checkpoint KPIs and daily trend
"""
