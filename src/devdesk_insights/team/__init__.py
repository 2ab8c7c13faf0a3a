"""
Team Analytics Module
=====================

Bounded Context for per-member workload analytics.

Responsibilities:
- Aggregate assigned, pending and resolved tickets per internal member
- Compare this week's resolutions with the previous week
- Sample first-response latencies from comment histories
- Keep sampled latencies in a background-refreshed cache
- Classify members as On Track / Behind / Needs Attention
"""
