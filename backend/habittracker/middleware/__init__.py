# Middleware package init
"""
Habit Tracker Backend — Middleware Package
===========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

The request ID is set first so the access log line and any error body
produced further down carry it.
"""
