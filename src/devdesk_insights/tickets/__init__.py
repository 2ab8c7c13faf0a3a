"""
Tickets Module
==============

Read-only ticket model and the source abstraction through which the
analytics modules obtain tickets, comments and members.
"""
