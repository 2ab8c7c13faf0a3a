"""
Shared Kernel Module
====================

Shared infrastructure used across all bounded contexts (SLA, Team,
Reporting) and the ticket-source adapters they consume.

DO NOT add business logic from SLA or Team analytics to shared kernel.
"""
