"""
Shared API Layer
================

Middleware, exception handlers and FastAPI dependencies used by every router.
"""
